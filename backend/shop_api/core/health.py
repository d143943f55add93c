"""
Liveness check used by / and /_health
"""
from . import database


def health_check() -> bool:
    """The service is UP when MongoDB answers a ping"""
    return database.ping()
