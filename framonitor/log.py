"""
Logging setup for FRA Monitor.

The level comes from the `logging.level` config section; the CLI's
`--log-level` flag overrides it for one run.
"""

import logging
from typing import Optional

from framonitor.config import Config

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(config: Optional[Config] = None, level: Optional[str] = None) -> None:
    """
    Configure root logging for a CLI or server process.

    Args:
        config: Loaded configuration; INFO is used when omitted
        level: Level name from `--log-level` (any case), taking precedence
            over `config.logging.level`

    Raises:
        ValueError: If the resulting level name is not a logging level
    """
    if level is None:
        level = config.logging.level if config is not None else "INFO"

    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")

    logging.basicConfig(level=numeric_level, format=LOG_FORMAT, datefmt=DATE_FORMAT)


def get_logger(name: str) -> logging.Logger:
    """Module logger; framonitor modules call this with __name__."""
    return logging.getLogger(name)
