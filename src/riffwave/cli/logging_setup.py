import logging
import os

from rich.console import Console
from rich.logging import RichHandler

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}

LOG_LEVEL_ENV = "RIFFWAVE_LOG_LEVEL"


def init_logging(level: str | None = None) -> None:
    """Send ``riffwave`` log records to stderr through rich.

    The level comes from ``level``, then ``$RIFFWAVE_LOG_LEVEL``, then
    defaults to ``warning``. Only the package logger is touched.
    """
    lvl_name = (level or os.environ.get(LOG_LEVEL_ENV) or "warning").lower()
    lvl = _LEVELS.get(lvl_name, logging.WARNING)

    logger = logging.getLogger("riffwave")
    for h in list(logger.handlers):
        if isinstance(h, RichHandler):
            logger.removeHandler(h)

    handler = RichHandler(console=Console(stderr=True), show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(lvl)
