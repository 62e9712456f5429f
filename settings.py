"""
Configuration constants and logging setup for the telephone registry.
"""

import logging
from typing import Union

# History
DEFAULT_MAX_HISTORY_SIZE = 100

# Notification configuration
DEFAULT_EVENT_TYPE = "dial"
SIMPLE = "simple"
DETAILED = "detailed"
BUILTIN_NOTIFICATION_TYPES = (SIMPLE, DETAILED)

# Optional leading "+", then 10 or more ASCII digits, whitespace or hyphens.
PHONE_NUMBER_PATTERN = r"\+?[0-9\s-]{10,}"

# Logging setup
LOGGER_NAME = "telephone"
LOG_FORMAT = "%(asctime)s %(levelname)s - %(message)s"

logger = logging.getLogger(LOGGER_NAME)


def configure_logging(level: Union[int, str] = logging.INFO) -> logging.Logger:
    """Send the registry's log output to the console.

    The library never installs handlers on its own; applications call this
    once at startup when they want the informational messages printed.
    """
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logger.setLevel(level)
    return logger
