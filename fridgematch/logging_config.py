import logging

from . import config

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

logger = logging.getLogger(__name__)


def _resolve_level(level):
    if isinstance(level, int):
        return level
    name = str(level).strip().upper()
    if isinstance(logging.getLevelName(name), int):
        return name
    return None


def configure_logging(level=None):
    """Set up a single stream handler on the root logger.

    Safe to call more than once; later calls only change the level.
    Level names are case-insensitive; an unknown name falls back to WARNING.
    """
    requested = level or config.LOG_LEVEL
    root = logging.getLogger()
    if not any(getattr(h, "_fridgematch", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._fridgematch = True
        root.addHandler(handler)
    resolved = _resolve_level(requested)
    if resolved is None:
        root.setLevel(logging.WARNING)
        logger.warning("unknown log level %r, using WARNING", requested)
        return
    root.setLevel(resolved)
