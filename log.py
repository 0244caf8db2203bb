"""Console logging for the API and the Flask app logger."""
import logging
import sys

from config import LOG_LEVEL

LOG_FORMAT = "[%(asctime)s] %(levelname)s in %(name)s: %(message)s"
_ready = False


def log_level(name: str = LOG_LEVEL) -> int:
    """Numeric level for a name like ``"debug"``; unknown names give INFO."""
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.INFO


def get_logger(name: str) -> logging.Logger:
    global _ready
    if not _ready:
        _setup_root()
        _ready = True
    return logging.getLogger(name)


def configure_app_logging(app) -> None:
    """Put ``app.logger`` on ``LOG_LEVEL`` and route it through the root handler."""
    get_logger(app.name)
    app.logger.setLevel(log_level())
    app.logger.propagate = True


def _setup_root() -> None:
    root = logging.getLogger()
    root.setLevel(log_level())
    # the test runner and gunicorn bring their own handlers
    if root.handlers:
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
