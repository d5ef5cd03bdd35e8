"""Daily dispatch sweep: email every active user whose local hour matches the target.

The sweep is stateless. An outside timer invokes it (typically hourly); each
invocation loads the active users once, keeps those for whom it is currently
`target_hour` o'clock in their own timezone, and makes exactly one
forecast-and-send attempt per match. One user's failure never stops the rest.
"""

from __future__ import annotations

import datetime as dt
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, List, Optional

from stylist.data_sources import WeatherProvider
from stylist.email_client import EmailClient, EmailReceipt
from stylist.email_templates import render_daily_email
from stylist.forecast_service import get_outlook_for_location
from stylist.models import User
from stylist.timezones import local_now, provider_zone_name
from stylist.user_store import UserStore
from utils.logging_utils import get_tagged_logger, mask_email

logger = get_tagged_logger(__name__, tag="dispatch")

DEFAULT_TARGET_HOUR = 5


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


@dataclass
class SweepResult:
    """Counts for one sweep invocation."""
    processed: int
    errors: int
    total_users: int

    def as_payload(self) -> dict:
        """Shape used by the HTTP trigger."""
        return {"processed": self.processed, "errors": self.errors, "totalUsers": self.total_users}


class DispatchSweep:
    """Runs the hour-matched daily email over the active user population."""

    def __init__(
        self,
        store: UserStore,
        weather_provider: WeatherProvider,
        email_client: EmailClient,
        *,
        max_workers: int = 1,
        sender: Optional[str] = None,
        clock: Callable[[], dt.datetime] = _utcnow,
    ) -> None:
        self.store = store
        self.weather_provider = weather_provider
        self.email_client = email_client
        self.max_workers = max(1, max_workers)
        self.sender = sender
        self.clock = clock

    def _matches(self, user: User, now: dt.datetime, target_hour: int) -> Optional[dt.datetime]:
        """Return the user's local time when it falls in the target hour, else None."""
        user_now = local_now(now, user.timezone)
        if user_now.hour != target_hour:
            logger.debug(
                "Skipping %s - it's %02d:00 in their timezone, not %02d:00",
                mask_email(user.email), user_now.hour, target_hour,
            )
            return None
        return user_now

    def send_daily_email(self, user: User, local_date: dt.date) -> EmailReceipt:
        """Fetch the forecast, build the outlook and send one user's morning email."""
        outlook = get_outlook_for_location(
            self.weather_provider,
            user.latitude,
            user.longitude,
            provider_zone_name(user.timezone),
            local_date,
        )
        rendered = render_daily_email(user.first_name, user.city, outlook)
        return self.email_client.send(user.email, rendered.subject, rendered.html, sender=self.sender)

    def _process_user(self, user: User, now: dt.datetime, target_hour: int) -> Optional[bool]:
        """
        Handle one user.

        Returns None when the user is not due, True on a sent email and False
        on any failure. Never raises.
        """
        try:
            user_now = self._matches(user, now, target_hour)
            if user_now is None:
                return None
            receipt = self.send_daily_email(user, user_now.date())
        except Exception as exc:
            logger.error(
                "Error processing user %s: %s", mask_email(user.email), exc,
                extra={"user_id": user.id, "timezone": user.timezone},
            )
            return False
        logger.info("Processed email for %s", mask_email(user.email), extra={"email_id": receipt.id})
        return True

    def sweep(self, target_hour: int = DEFAULT_TARGET_HOUR, now: dt.datetime | None = None) -> SweepResult:
        """Run one sweep. Errors loading the user list propagate to the caller."""
        if not 0 <= target_hour <= 23:
            raise ValueError("target_hour must be between 0 and 23")
        now = now or self.clock()

        users: List[User] = self.store.list_active()
        logger.info(
            "Starting daily sweep",
            extra={"target_hour": target_hour, "active_users": len(users), "now": now.isoformat()},
        )
        if not users:
            logger.info("No active users found")
            return SweepResult(processed=0, errors=0, total_users=0)

        if self.max_workers > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="dispatch") as pool:
                outcomes = list(pool.map(lambda u: self._process_user(u, now, target_hour), users))
        else:
            outcomes = [self._process_user(u, now, target_hour) for u in users]

        result = SweepResult(
            processed=sum(1 for o in outcomes if o is True),
            errors=sum(1 for o in outcomes if o is False),
            total_users=len(users),
        )
        logger.info("Daily sweep finished", extra=result.as_payload())
        return result
