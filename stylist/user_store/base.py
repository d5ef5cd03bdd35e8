"""Shared protocol for user storage backends."""

from typing import List, Optional, Protocol

from stylist.models import User


class UserStore(Protocol):
    """Protocol for subscriber storage backends.

    `insert` is the only way to create a user and must enforce email
    uniqueness itself, raising DuplicateEmailError on conflict.
    """

    def find_by_email(self, email: str) -> Optional[User]:
        """Return the user with this email, or None."""

    def insert(self, user: User) -> User:
        """Persist a new user and return it with its id; raise DuplicateEmailError on conflict."""

    def list_active(self) -> List[User]:
        """Return all users with is_active set."""

    def deactivate(self, email: str) -> bool:
        """Mark a user inactive; return False if no such user."""
