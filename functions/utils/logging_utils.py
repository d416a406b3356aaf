import logging

from config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_logger(name):
    """
    Creates and returns a logger with the specified name.

    The level comes from the LOG_LEVEL setting; unknown values fall back to INFO.

    Args:
        name: The name for the logger, typically __name__ from the calling module

    Returns:
        A configured logger instance
    """
    logger = logging.getLogger(name)

    # Only configure handlers if they haven't been added yet
    if not logger.handlers:
        level = logging.getLevelName(get_settings().log_level.upper())
        logger.setLevel(level if isinstance(level, int) else logging.INFO)

        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    return logger
