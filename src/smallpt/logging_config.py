"""Console logging setup for the command line tool."""

import logging

LOG_FORMAT = "%(message)s"
DEBUG_LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s: %(message)s"


def setup_logging(level: int = logging.INFO) -> None:
    """Send smallpt log records to stderr at the given level."""
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(DEBUG_LOG_FORMAT if level <= logging.DEBUG else LOG_FORMAT)
    )
    logger = logging.getLogger("smallpt")
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
