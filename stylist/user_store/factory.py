"""Factory helpers for choosing a user store at startup."""

from __future__ import annotations

from stylist import config
from stylist.user_store.base import UserStore
from stylist.user_store.memory import InMemoryUserStore
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="user_store/factory")


DEFAULT_STORE_NAME = "sql"


def build_user_store(settings: config.Settings | None = None) -> UserStore:
    """Instantiate the configured user store."""
    settings = settings or config.settings
    store = (settings.user_store or DEFAULT_STORE_NAME).lower()

    if store == "memory":
        logger.info("Using in-memory user store")
        return InMemoryUserStore()

    if store == "sql":
        from .sql import SqlUserStore

        if not settings.database_url:
            raise ValueError("database_url must be set for the SQL user store")
        return SqlUserStore.from_url(settings.database_url)

    raise ValueError(f"Unknown user store '{store}'")
