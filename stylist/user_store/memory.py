"""In-memory user store, intended for development and tests."""

import itertools
import threading
from dataclasses import replace
from typing import List, Optional

from stylist.errors import DuplicateEmailError
from stylist.models import User, normalize_email
from stylist.user_store.base import UserStore
from utils.logging_utils import get_tagged_logger, mask_email

logger = get_tagged_logger(__name__, tag="user_store/in_memory_user_store")


class InMemoryUserStore(UserStore):
    """Thread-safe dict keyed by normalized email."""

    def __init__(self) -> None:
        logger.debug("Initializing InMemoryUserStore")
        self._users: dict[str, User] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def find_by_email(self, email: str) -> Optional[User]:
        with self._lock:
            user = self._users.get(normalize_email(email))
            return replace(user) if user else None

    def insert(self, user: User) -> User:
        """Check and insert under one lock so concurrent signups cannot both win."""
        with self._lock:
            if user.email in self._users:
                logger.info("Rejected duplicate registration", extra={"email": mask_email(user.email)})
                raise DuplicateEmailError(user.email)
            stored = user.with_id(next(self._ids))
            self._users[stored.email] = stored
            return replace(stored)

    def list_active(self) -> List[User]:
        with self._lock:
            return [replace(u) for u in self._users.values() if u.is_active]

    def deactivate(self, email: str) -> bool:
        with self._lock:
            user = self._users.get(normalize_email(email))
            if user is None:
                return False
            user.is_active = False
            return True

    def clear(self) -> None:
        """Remove all users."""
        with self._lock:
            self._users.clear()
