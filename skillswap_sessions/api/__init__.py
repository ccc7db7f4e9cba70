# skillswap_sessions/api/__init__.py
from . import admin, review, session

__all__ = ["admin", "review", "session"]
