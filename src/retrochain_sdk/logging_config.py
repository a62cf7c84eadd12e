"""
Logging setup for the RetroChain SDK.

Every SDK module logs through the single ``retrochain_sdk`` logger. By default
it only propagates to whatever the application configured; ``setup_sdk_logging``
gives it its own stream handler so SDK output shows up without touching the
root logger.
"""

import logging
import sys
from typing import Optional, TextIO

SDK_LOGGER_NAME = "retrochain_sdk"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(message)s"

_HANDLER_ATTR = "_retrochain_sdk_handler"


class ThreeCharLevelFormatter(logging.Formatter):
    """Formats level names as DBG/INF/WRN/ERR/CRT, colored when writing to a TTY."""

    SHORT_LEVELS = {
        logging.DEBUG: ("DBG", "\033[36m"),
        logging.INFO: ("INF", "\033[32m"),
        logging.WARNING: ("WRN", "\033[33m"),
        logging.ERROR: ("ERR", "\033[31m"),
        logging.CRITICAL: ("CRT", "\033[35m"),
    }
    RESET = "\033[0m"

    def __init__(self, fmt: str = DEFAULT_FORMAT, use_color: bool = True, stream: Optional[TextIO] = None):
        super().__init__(fmt)
        stream = stream if stream is not None else sys.stdout
        self.use_color = use_color and hasattr(stream, "isatty") and stream.isatty()

    def format(self, record: logging.LogRecord) -> str:
        short, color = self.SHORT_LEVELS.get(record.levelno, (record.levelname[:3], ""))
        if self.use_color and color:
            short = f"{color}{short}{self.RESET}"

        # Other handlers may format the same record
        original = record.levelname
        record.levelname = short
        try:
            return super().format(record)
        finally:
            record.levelname = original


def _installed_handler(logger: logging.Logger) -> Optional[logging.Handler]:
    for handler in logger.handlers:
        if getattr(handler, _HANDLER_ATTR, False):
            return handler
    return None


def setup_sdk_logging(
    debug: bool = False,
    force: bool = False,
    use_color: bool = True,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Attach a stream handler to the ``retrochain_sdk`` logger.

    Args:
        debug: DEBUG level when True, otherwise INFO
        force: Replace the handler installed by an earlier call
        use_color: Color level names (only when the stream is a TTY)
        stream: Output stream, stdout by default

    Returns:
        The configured SDK logger
    """
    logger = logging.getLogger(SDK_LOGGER_NAME)
    existing = _installed_handler(logger)
    if existing is not None and not force:
        return logger
    if existing is not None:
        logger.removeHandler(existing)

    stream = stream if stream is not None else sys.stdout
    handler = logging.StreamHandler(stream)
    handler.setFormatter(ThreeCharLevelFormatter(use_color=use_color, stream=stream))
    setattr(handler, _HANDLER_ATTR, True)

    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    # SDK records go to this handler only
    logger.propagate = False
    return logger


def is_configured() -> bool:
    """Check if SDK logging has been configured."""
    return _installed_handler(logging.getLogger(SDK_LOGGER_NAME)) is not None
