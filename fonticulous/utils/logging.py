"""
Shared logging configuration for the codec and command line tools.
"""

import logging

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s",
    handlers=[logging.StreamHandler()],
)

logger = logging.getLogger("fonticulous")

# Number of -v flags -> log level
VERBOSITY_LEVELS = {
    0: logging.WARNING,
    1: logging.INFO,
    2: logging.DEBUG,
}


def set_verbosity(verbose: int) -> None:
    """Set the package log level from a -v count."""
    logger.setLevel(VERBOSITY_LEVELS.get(min(verbose, 2), logging.WARNING))
