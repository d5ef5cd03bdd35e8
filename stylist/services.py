"""Wire the configured collaborators together once per process."""

from __future__ import annotations

from dataclasses import dataclass

from stylist import config
from stylist.api_keys import ApiKeyChecker
from stylist.data_sources import OpenMeteoClient, WeatherProvider, build_http_session
from stylist.dispatch import DispatchSweep
from stylist.email_client import EmailClient, ResendEmailClient
from stylist.geocoding import CityLookup, NominatimCityLookup
from stylist.registration import RegistrationService
from stylist.user_store import UserStore, build_user_store
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="services")


@dataclass
class Services:
    """Explicit container handed to the HTTP layer and the sweep entrypoint."""
    settings: config.Settings
    store: UserStore
    weather_provider: WeatherProvider
    email_client: EmailClient
    city_lookup: CityLookup | None
    registration: RegistrationService
    sweep: DispatchSweep
    api_keys: ApiKeyChecker


def assemble_services(
    settings: config.Settings,
    *,
    store: UserStore,
    weather_provider: WeatherProvider,
    email_client: EmailClient,
    city_lookup: CityLookup | None = None,
    api_keys: ApiKeyChecker | None = None,
) -> Services:
    """Build the registration and dispatch services around given backends."""
    registration = RegistrationService(
        store,
        email_client,
        weather_provider=weather_provider,
        city_lookup=city_lookup,
        dispatch_hour=settings.dispatch_hour,
        confirmation_sender=settings.confirmation_email_from,
    )
    sweep = DispatchSweep(
        store,
        weather_provider,
        email_client,
        max_workers=settings.dispatch_max_workers,
    )
    return Services(
        settings=settings,
        store=store,
        weather_provider=weather_provider,
        email_client=email_client,
        city_lookup=city_lookup,
        registration=registration,
        sweep=sweep,
        api_keys=api_keys or ApiKeyChecker(settings.api_key),
    )


def build_services(settings: config.Settings | None = None) -> Services:
    """Create the production backends described by `settings`."""
    settings = settings or config.settings

    http = build_http_session(
        cache_path=settings.http_cache_path,
        cache_ttl_seconds=settings.http_cache_ttl_seconds,
        retries=settings.http_retries,
    )
    weather = OpenMeteoClient(http, base_url=settings.open_meteo_base_url, timeout=settings.http_timeout_seconds)
    email = ResendEmailClient(
        settings.resend_api_key,
        default_sender=settings.email_from,
        base_url=settings.resend_api_url,
        timeout=settings.http_timeout_seconds,
    )
    if not settings.resend_api_key:
        logger.warning("STYLIST_RESEND_API_KEY is not set; email sends will fail")
    city_lookup = NominatimCityLookup(
        user_agent=settings.geocoder_user_agent,
        timeout=settings.geocoder_timeout_seconds,
    )

    logger.info(
        "Services configured",
        extra={"user_store": settings.user_store, "dispatch_hour": settings.dispatch_hour},
    )
    return assemble_services(
        settings,
        store=build_user_store(settings),
        weather_provider=weather,
        email_client=email,
        city_lookup=city_lookup,
        api_keys=ApiKeyChecker.from_settings(settings),
    )
