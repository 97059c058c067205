import sys

from loguru import logger

from github_activity.settings import settings

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> "
    "| <level>{level:<8}</level> "
    "| <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> "
    "- <level>{message}</level> | <magenta>{extra}</magenta>"
)


def configure_logger(level: str = settings.log_level, sink=sys.stdout):
    """
    Replaces loguru handlers with a single sink of the given level.

    Parameters
    ----------
    level: str
        Minimal level of messages to be written (DEBUG, INFO...).
    sink
        Any loguru-compatible sink. Standard output by default.
    """
    logger.remove()
    logger.add(sink, level=level.upper(), colorize=True, format=LOG_FORMAT)


configure_logger()
