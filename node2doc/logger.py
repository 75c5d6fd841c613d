"""Central logging configuration for the library."""
from __future__ import annotations

import logging
from typing import Optional, Union

_DEFAULT_LEVEL = logging.INFO
_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: Union[int, str] = _DEFAULT_LEVEL) -> None:
    """Install the default handler format at ``level`` (name or number)."""
    if isinstance(level, str):
        level = getattr(logging, level.upper(), _DEFAULT_LEVEL)
    logging.basicConfig(level=level, format=_FORMAT)
    logging.getLogger().setLevel(level)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-level logger with default configuration applied."""
    logger = logging.getLogger(name)
    if not logging.getLogger().handlers:
        logging.basicConfig(level=_DEFAULT_LEVEL, format=_FORMAT)
    return logger
