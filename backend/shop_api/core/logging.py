"""
Logging setup for the Shop API backend
"""
import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger once; safe to call again (replaces the handler)."""
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_shop_api", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._shop_api = True
    root.addHandler(handler)
    root.setLevel(level.upper())

    # pymongo logs heartbeats at DEBUG; our command listener covers what we need
    logging.getLogger("pymongo").setLevel(logging.WARNING)
