"""Device position lookup."""

import logging

import httpx

from emotion_engine.config import (
    GEOLOCATION_ACCURACY_M,
    GEOLOCATION_API_BASE,
    HTTP_TIMEOUT,
    LOCATION_LATITUDE,
    LOCATION_LONGITUDE,
)
from emotion_engine.models import Location

logger = logging.getLogger(__name__)


def configured_location() -> Location | None:
    """Fixed position from LOCATION_LONGITUDE / LOCATION_LATITUDE, if both are set."""
    if not (LOCATION_LONGITUDE and LOCATION_LATITUDE):
        return None
    return Location(longitude=float(LOCATION_LONGITUDE), latitude=float(LOCATION_LATITUDE))


class Geolocator:
    """Resolve the device position.

    A fixed location wins when given. Otherwise the public IP address is
    geolocated, which is far coarser than ``desired_accuracy_m``; the value
    is kept so callers can report what was asked for.
    """

    def __init__(
        self,
        fixed: Location | None = None,
        api_base: str = GEOLOCATION_API_BASE,
        desired_accuracy_m: int = GEOLOCATION_ACCURACY_M,
        timeout: float = HTTP_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.fixed = fixed
        self.api_base = api_base
        self.desired_accuracy_m = desired_accuracy_m
        self.timeout = timeout
        self._transport = transport

    async def locate(self) -> Location:
        """Return the current position.

        Raises:
            httpx.HTTPError: The lookup service could not be reached.
            ValueError: The lookup service did not return coordinates.
        """
        if self.fixed is not None:
            return self.fixed

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            resp = await client.get(self.api_base)
            resp.raise_for_status()
        data = resp.json()
        if data.get("status", "success") != "success" or "lon" not in data:
            raise ValueError(f"Geolocation lookup failed: {data}")
        location = Location(longitude=float(data["lon"]), latitude=float(data["lat"]))
        logger.debug(
            "Located at %s (requested accuracy %d m)", location, self.desired_accuracy_m
        )
        return location
