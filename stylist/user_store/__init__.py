"""User storage backends."""

from .base import UserStore
from .memory import InMemoryUserStore
from .sql import SqlUserStore
from .factory import build_user_store

__all__ = [
    "UserStore",
    "InMemoryUserStore",
    "SqlUserStore",
    "build_user_store",
]
