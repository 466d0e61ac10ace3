import logging
import sys

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Global verbose flag that can be set by the command line
verbose_mode = False


def set_verbose_mode(verbose):
    """Set the global verbose mode flag."""
    global verbose_mode
    verbose_mode = verbose


def _console_handler(level):
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return console_handler


def get_logger():
    """
    Configure and return the root logger for the command line tool.

    The level follows the global verbose flag and is updated on every call,
    replacing the console handler when it was set up at another level.

    Returns:
        A configured logger instance
    """
    logger = logging.getLogger()

    level = logging.DEBUG if verbose_mode else logging.INFO
    logger.setLevel(level)

    if not logger.handlers:
        logger.addHandler(_console_handler(level))
    elif logger.handlers[0].level != level:
        logger.removeHandler(logger.handlers[0])
        logger.addHandler(_console_handler(level))

    return logger
