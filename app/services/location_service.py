"""
Device location lookup.

The platform GPS stack is not part of this package; a ``LocationProvider``
is injected. The service prefers a recent cached fix and otherwise waits a
bounded time for a fresh one.
"""

import asyncio
import logging
from datetime import datetime
from typing import Optional, Protocol

from app.config.settings import LocationSettings, get_settings
from app.core.exceptions import LocationUnavailableError
from app.models.landmark import LocationCoordinates

logger = logging.getLogger(__name__)


class LocationProvider(Protocol):
    """Source of location fixes; raises LocationUnavailableError when denied or disabled."""

    async def last_known(self) -> Optional[LocationCoordinates]:
        ...

    async def request_fix(self) -> LocationCoordinates:
        ...


class StaticLocationProvider:
    """Always reports the same coordinate, e.g. one given on the command line."""

    def __init__(self, latitude: float, longitude: float, accuracy: float = 0.0):
        self.latitude = latitude
        self.longitude = longitude
        self.accuracy = accuracy

    async def last_known(self) -> Optional[LocationCoordinates]:
        return None

    async def request_fix(self) -> LocationCoordinates:
        return LocationCoordinates(self.latitude, self.longitude, self.accuracy)


class UnavailableLocationProvider:
    """Provider used when no location source is configured."""

    def __init__(self, reason: str = "Location provider is disabled"):
        self.reason = reason

    async def last_known(self) -> Optional[LocationCoordinates]:
        raise LocationUnavailableError(self.reason)

    async def request_fix(self) -> LocationCoordinates:
        raise LocationUnavailableError(self.reason)


class LocationService:

    def __init__(self, provider: LocationProvider, location_settings: Optional[LocationSettings] = None):
        self.provider = provider
        self.settings = location_settings or get_settings().location

    async def current_location(self, now: Optional[datetime] = None) -> LocationCoordinates:
        """
        Current coordinates for pre-filling the landmark form.

        Raises:
            LocationUnavailableError: Permission denied, provider disabled or timeout
        """
        cached = await self.provider.last_known()
        if cached is not None and cached.age_seconds(now) < self.settings.max_fix_age_seconds:
            logger.debug(f"Using last known location {cached.latitude}, {cached.longitude}")
            return cached

        try:
            fix = await asyncio.wait_for(self.provider.request_fix(), timeout=self.settings.timeout_seconds)
        except asyncio.TimeoutError:
            logger.warning("Location request timed out")
            raise LocationUnavailableError("Location request timed out")

        logger.debug(f"Got fresh location {fix.latitude}, {fix.longitude}")
        return fix
