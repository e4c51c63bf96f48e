"""Geofence precondition checks.

Distances use the haversine formula on a spherical Earth. The location gate
runs before any ledger write and never touches storage: a failed or slow
lookup surfaces as ``LocationDenied`` and the request stops there.
"""

from __future__ import annotations

import asyncio
import logging
import math
from typing import Optional, Protocol

from attendance_ledger.common.constants import (
    EARTH_RADIUS_METERS,
    DeclarationStatus,
    LocationDeniedReason,
)
from attendance_ledger.common.exceptions import LocationDenied
from attendance_ledger.config import settings
from attendance_ledger.geofence.schemas import Coordinates, GeolocationResult, GeoPoint

logger = logging.getLogger(__name__)


# ── Distance ────────────────────────────────────────────────────────

def haversine_distance(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance between *a* and *b* in metres."""

    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    d_phi = math.radians(b.latitude - a.latitude)
    d_lambda = math.radians(b.longitude - a.longitude)

    h = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_METERS * c


def within_radius(a: GeoPoint, b: GeoPoint, radius_meters: float) -> bool:
    return haversine_distance(a, b) <= radius_meters


class GeofenceValidator:
    """A circular geofence around a fixed site."""

    def __init__(self, center: GeoPoint, radius_meters: float) -> None:
        if radius_meters <= 0:
            raise ValueError("radius_meters must be positive")
        self.center = center
        self.radius_meters = radius_meters

    @classmethod
    def from_settings(cls) -> "GeofenceValidator":
        return cls(
            GeoPoint(settings.OFFICE_LATITUDE, settings.OFFICE_LONGITUDE),
            settings.GEOFENCE_RADIUS_METERS,
        )

    def contains(self, point: GeoPoint) -> bool:
        return within_radius(self.center, point, self.radius_meters)

    def ensure_within(self, point: GeoPoint) -> None:
        """Raise LocationDenied if *point* lies outside the fence."""

        distance = haversine_distance(self.center, point)
        if distance > self.radius_meters:
            logger.info(
                "Location rejected: %.1fm from site (radius %.1fm)",
                distance,
                self.radius_meters,
            )
            raise LocationDenied(
                LocationDeniedReason.outside_geofence,
                distance_meters=distance,
            )


# ── Geolocation capability ──────────────────────────────────────────

class GeolocationProvider(Protocol):
    async def locate(self, timeout: float) -> GeolocationResult:
        ...


class ReportedLocationProvider:
    """Provider backed by the coordinates the client sent with the request."""

    def __init__(self, coordinates: Optional[Coordinates]) -> None:
        self.coordinates = coordinates

    async def locate(self, timeout: float) -> GeolocationResult:
        if self.coordinates is None:
            return GeolocationResult.denied()
        return GeolocationResult.found(self.coordinates.to_point())


async def require_location(
    provider: GeolocationProvider,
    validator: GeofenceValidator,
    timeout: Optional[float] = None,
) -> GeoPoint:
    """Resolve the caller's position and check it against *validator*.

    Returns the resolved point; raises LocationDenied on denial, failure,
    timeout, or a position outside the fence.
    """
    timeout = settings.GEOLOCATION_TIMEOUT_SECONDS if timeout is None else timeout
    try:
        result = await asyncio.wait_for(provider.locate(timeout), timeout)
    except asyncio.TimeoutError:
        logger.info("Geolocation lookup exceeded %.1fs", timeout)
        raise LocationDenied(LocationDeniedReason.timeout) from None

    if not result.ok:
        raise LocationDenied(result.failure or LocationDeniedReason.location_unavailable)

    validator.ensure_within(result.point)
    return result.point


def declaration_requires_location(status: DeclarationStatus) -> bool:
    """Only a Present declaration needs proof of being on site."""
    return status == DeclarationStatus.present


def session_requires_location() -> bool:
    return settings.GEOFENCE_REQUIRED_FOR_SESSIONS


# ── FastAPI dependency ──────────────────────────────────────────────

def get_geofence_validator() -> GeofenceValidator:
    """Validator for the configured office site (override in tests)."""
    return GeofenceValidator.from_settings()
