"""
Logging setup for the application.

All modules log through named loggers under the "starter" hierarchy
(starter.auth, starter.users, starter.http, ...). configure_logging()
attaches a single stdout handler to the root of that hierarchy.
"""

import logging
import sys

LOGGER_NAME = "starter"

LOG_FORMAT = "[%(asctime)s] %(levelname)s [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Configure the "starter" logger.

    Safe to call more than once (the app factory runs for every test app):
    the handler is only added the first time, the level is always updated.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper())

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)

    return logger
