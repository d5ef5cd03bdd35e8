"""HTTP API for the daily weather stylist: dispatch trigger, emails, signup."""

import datetime as dt
import threading
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from stylist import config
from stylist.email_templates import render_test_email
from stylist.errors import DuplicateEmailError, EmailDeliveryError
from stylist.recommendation import recommend
from stylist.registration import RegistrationRequest, send_confirmation
from stylist.services import Services, build_services
from stylist.weather_codes import classify_weather_code, describe_weather_code
from utils.logging_utils import get_tagged_logger, mask_email

logger = get_tagged_logger(__name__, tag="stylist/api")

_services_lock = threading.Lock()


def get_services(request: Request) -> Services:
    """Services attached to the app at startup; built once here if startup was skipped."""
    services = getattr(request.app.state, "services", None)
    if services is None:
        with _services_lock:
            services = getattr(request.app.state, "services", None)
            if services is None:
                services = build_services(config.settings)
                request.app.state.services = services
    return services


def require_api_key(
    x_api_key: str | None = Header(default=None),
    services: Services = Depends(get_services),
):
    """
    Validate X-API-Key header against Redis (if configured) or the static api_key setting.
    """
    # If no key configured anywhere, allow requests (dev/default mode).
    if not services.api_keys.enabled:
        logger.debug("No API key configured; allowing all requests")
        return

    if not x_api_key:
        logger.debug("No API key provided")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing API key")

    if services.api_keys.is_valid(x_api_key):
        return

    logger.debug("Invalid API key provided")
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key")


router = APIRouter(dependencies=[Depends(require_api_key)])


def _timestamp() -> str:
    return dt.datetime.now(dt.timezone.utc).isoformat()


class EmailRequest(BaseModel):
    """Confirmation/test email payload; fields are checked by hand to return 400s."""
    model_config = ConfigDict(populate_by_name=True)

    first_name: Optional[str] = Field(default=None, alias="firstName")
    email: Optional[str] = None


class UserResponse(BaseModel):
    """Public view of a stored subscriber."""
    id: int
    firstName: str
    email: str
    latitude: float
    longitude: float
    timezone: str
    city: Optional[str] = None
    isActive: bool
    createdAt: dt.datetime


class RegistrationResponse(BaseModel):
    """Signup response payload."""
    success: bool = True
    user: UserResponse
    confirmationSent: bool
    confirmationError: Optional[str] = None


class RecommendationResponse(BaseModel):
    """Outfit preview for a given forecast."""
    outfit: str
    reason: str
    category: str
    description: str


def _run_sweep(hour: Optional[int], services: Services):
    target_hour = services.settings.dispatch_hour if hour is None else hour
    try:
        result = services.sweep.sweep(target_hour)
    except Exception as exc:
        logger.exception("Daily sweep failed")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": str(exc), "timestamp": _timestamp()},
        )
    return {
        "success": True,
        "message": f"Processed {result.processed} emails with {result.errors} errors",
        "data": result.as_payload(),
        "timestamp": _timestamp(),
    }


@router.post("/dispatch/daily")
def trigger_daily_dispatch(
    hour: Optional[int] = Query(default=None, ge=0, le=23),
    services: Services = Depends(get_services),
):
    """Send the morning email to every user whose local time is `hour` o'clock."""
    return _run_sweep(hour, services)


@router.get("/dispatch/daily")
def trigger_daily_dispatch_get(
    hour: Optional[int] = Query(default=None, ge=0, le=23),
    services: Services = Depends(get_services),
):
    """Same as the POST trigger, for schedulers that can only issue GETs."""
    return _run_sweep(hour, services)


@router.post("/emails/confirmation")
def send_confirmation_email(req: EmailRequest, services: Services = Depends(get_services)):
    """Send (or resend) the welcome email to one address."""
    if not req.first_name or not req.email:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "error": "Missing firstName or email"},
        )
    try:
        email_id = send_confirmation(
            services.email_client,
            req.first_name,
            req.email,
            dispatch_hour=services.settings.dispatch_hour,
            sender=services.settings.confirmation_email_from,
        )
    except EmailDeliveryError as exc:
        logger.error("Confirmation email failed for %s: %s", mask_email(req.email), exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": str(exc)},
        )
    return {"success": True, "message": "Email sent successfully", "emailId": email_id}


@router.post("/emails/test")
def send_test_email(req: EmailRequest, services: Services = Depends(get_services)):
    """Send a short transport check message."""
    if not req.email:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "error": "Missing email"},
        )
    rendered = render_test_email(dt.datetime.now(dt.timezone.utc))
    try:
        receipt = services.email_client.send(req.email, rendered.subject, rendered.html)
    except EmailDeliveryError as exc:
        logger.error("Test email failed for %s: %s", mask_email(req.email), exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": str(exc)},
        )
    return {"success": True, "message": "Email sent successfully", "emailId": receipt.id}


@router.post("/users", status_code=status.HTTP_201_CREATED, response_model=RegistrationResponse)
def register_user(req: RegistrationRequest, services: Services = Depends(get_services)):
    """Sign up for the daily email."""
    try:
        result = services.registration.register(req)
    except DuplicateEmailError as exc:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"success": False, "error": str(exc)},
        )

    user = result.user
    return RegistrationResponse(
        user=UserResponse(
            id=user.id,
            firstName=user.first_name,
            email=user.email,
            latitude=user.latitude,
            longitude=user.longitude,
            timezone=user.timezone,
            city=user.city,
            isActive=user.is_active,
            createdAt=user.created_at,
        ),
        confirmationSent=result.confirmation_sent,
        confirmationError=result.confirmation_error,
    )


@router.get("/recommendation", response_model=RecommendationResponse)
def preview_recommendation(
    high: float = Query(..., description="Daily high in °F"),
    low: float = Query(..., description="Daily low in °F"),
    code: int = Query(0, ge=0, description="WMO weather code"),
):
    """Outfit suggestion for an arbitrary forecast."""
    rec = recommend(high, low, code)
    return RecommendationResponse(
        outfit=rec.outfit,
        reason=rec.reason,
        category=classify_weather_code(code).value,
        description=describe_weather_code(code),
    )
