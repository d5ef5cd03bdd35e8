"""Signup handling: validate the form, fill in location details, store, confirm."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from stylist.data_sources import WeatherProvider
from stylist.email_client import EmailClient
from stylist.email_templates import render_confirmation_email
from stylist.errors import DuplicateEmailError, EmailDeliveryError
from stylist.geocoding import CityLookup
from stylist.models import User, normalize_email
from stylist.timezones import is_iana_zone, resolve_timezone_for_location
from stylist.user_store import UserStore
from utils.logging_utils import get_tagged_logger, mask_email

logger = get_tagged_logger(__name__, tag="registration")

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class RegistrationRequest(BaseModel):
    """Signup form payload (camelCase on the wire)."""
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    first_name: str = Field(alias="firstName", min_length=1, max_length=100)
    email: str = Field(max_length=320)
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    timezone: Optional[str] = None
    city: Optional[str] = Field(default=None, max_length=200)

    @field_validator("email", mode="after")
    @classmethod
    def check_email(cls, v: str) -> str:
        """Reject obviously malformed addresses and normalize the rest."""
        if not _EMAIL_RE.match(v):
            raise ValueError("Please enter a valid email address")
        return normalize_email(v)


@dataclass
class RegistrationResult:
    """Stored user plus the outcome of the confirmation email."""
    user: User
    confirmation_sent: bool
    confirmation_email_id: Optional[str] = None
    confirmation_error: Optional[str] = None


def send_confirmation(email_client: EmailClient, first_name: str, email: str, *,
                      dispatch_hour: int = 5, sender: Optional[str] = None) -> str:
    """Send the welcome email and return the provider message id."""
    rendered = render_confirmation_email(first_name, dispatch_hour=dispatch_hour)
    receipt = email_client.send(email, rendered.subject, rendered.html, sender=sender)
    logger.info("Confirmation email sent", extra={"email": mask_email(email), "email_id": receipt.id})
    return receipt.id


class RegistrationService:
    """Creates subscribers; collaborators are passed in, never looked up globally."""

    def __init__(
        self,
        store: UserStore,
        email_client: EmailClient,
        *,
        weather_provider: WeatherProvider | None = None,
        city_lookup: CityLookup | None = None,
        dispatch_hour: int = 5,
        confirmation_sender: Optional[str] = None,
    ) -> None:
        self.store = store
        self.email_client = email_client
        self.weather_provider = weather_provider
        self.city_lookup = city_lookup
        self.dispatch_hour = dispatch_hour
        self.confirmation_sender = confirmation_sender

    def _resolve_timezone(self, req: RegistrationRequest) -> str:
        if req.timezone and is_iana_zone(req.timezone):
            return req.timezone
        if req.timezone:
            logger.info("Ignoring unrecognized timezone from form", extra={"timezone": req.timezone})
        return resolve_timezone_for_location(req.latitude, req.longitude, self.weather_provider)

    def _resolve_city(self, req: RegistrationRequest) -> Optional[str]:
        if req.city:
            return req.city
        if self.city_lookup is None:
            return None
        try:
            return self.city_lookup.city_for(req.latitude, req.longitude)
        except Exception as exc:
            logger.warning("City lookup failed; continuing without a city", extra={"error": str(exc)})
            return None

    def register(self, req: RegistrationRequest) -> RegistrationResult:
        """
        Store a new subscriber and send the welcome email.

        Raises DuplicateEmailError if the address is already registered. A
        failed confirmation email does not undo the registration.
        """
        # early out before any lookups; the store's constraint is what guarantees uniqueness
        if self.store.find_by_email(req.email) is not None:
            logger.info("Rejected duplicate registration", extra={"email": mask_email(req.email)})
            raise DuplicateEmailError(req.email)

        user = User(
            first_name=req.first_name,
            email=req.email,
            latitude=req.latitude,
            longitude=req.longitude,
            timezone=self._resolve_timezone(req),
            city=self._resolve_city(req),
        )
        stored = self.store.insert(user)
        logger.info(
            "Registered user",
            extra={"user_id": stored.id, "email": mask_email(stored.email), "timezone": stored.timezone},
        )

        try:
            email_id = send_confirmation(
                self.email_client,
                stored.first_name,
                stored.email,
                dispatch_hour=self.dispatch_hour,
                sender=self.confirmation_sender,
            )
        except EmailDeliveryError as exc:
            logger.error("Failed to send confirmation email, but user was registered: %s", exc)
            return RegistrationResult(user=stored, confirmation_sent=False, confirmation_error=str(exc))

        return RegistrationResult(user=stored, confirmation_sent=True, confirmation_email_id=email_id)
