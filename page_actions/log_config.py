import sys
from typing import Optional

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | {message}"
)


def configure_logging(
        level: str = "INFO",
        log_file: Optional[str] = None,
        rotation: str = "10 MB",
) -> None:
    """
    Replace the default loguru sink with a stdout sink at ``level`` and,
    optionally, a rotating file sink that always records DEBUG.
    """
    logger.remove()
    logger.add(sys.stdout, format=LOG_FORMAT, level=level.upper())
    if log_file:
        logger.add(log_file, format=LOG_FORMAT, level="DEBUG", rotation=rotation)
