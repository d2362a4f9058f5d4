"""Logging bootstrap. Modules just call logging.getLogger(__name__); entrypoints call configure_logging() once."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level!r}")
    logging.basicConfig(level=numeric_level, format=LOG_FORMAT)
