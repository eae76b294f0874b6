"""
Logging setup shared by the service.
All modules obtain their logger through get_logger().
"""
import logging

from app.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_configured = False


def configure_logging() -> None:
    """Attach a single stream handler to the package root logger."""
    global _configured
    if _configured:
        return

    level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level.upper(), logging.INFO)

    root = logging.getLogger("app")
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(level)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the service namespace."""
    configure_logging()
    return logging.getLogger(name)
