"""Subscriber records shared by the user store, registration and dispatch."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field, replace
from typing import Optional


def normalize_email(email: str) -> str:
    """Canonical form used for storage and uniqueness checks."""
    return email.strip().lower()


@dataclass
class User:
    """A subscriber to the daily weather email."""
    first_name: str
    email: str
    latitude: float
    longitude: float
    timezone: str  # IANA name, or an Etc/GMT estimate
    city: Optional[str] = None
    is_active: bool = True
    created_at: dt.datetime = field(default_factory=lambda: dt.datetime.now(dt.timezone.utc))
    id: Optional[int] = None

    def __post_init__(self):
        self.email = normalize_email(self.email)
        self.first_name = self.first_name.strip()

    def with_id(self, user_id: int) -> "User":
        """Return a copy carrying the storage-assigned id."""
        return replace(self, id=user_id)
