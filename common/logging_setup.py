import sys
from pathlib import Path
from typing import Optional

from loguru import logger

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level:<8} | {message}"


def setup_logging(level: str = "INFO", log_file: Optional[str] = None):
    logger.remove()
    logger.add(lambda msg: sys.stderr.write(msg), level=level, format=LOG_FORMAT)
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            rotation="10 MB",
            retention="10 days",
            backtrace=True,
            diagnose=False,
            level=level,
            format=LOG_FORMAT,
        )
    return logger
