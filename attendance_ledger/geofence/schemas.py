"""Geofence value types — coordinates and geolocation lookup results."""

from __future__ import annotations

from typing import NamedTuple, Optional

from pydantic import BaseModel, Field

from attendance_ledger.common.constants import LocationDeniedReason


class GeoPoint(NamedTuple):
    """A latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float


class Coordinates(BaseModel):
    """Client-reported position attached to a submission."""

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)

    def to_point(self) -> GeoPoint:
        return GeoPoint(self.latitude, self.longitude)


class GeolocationResult(NamedTuple):
    """Outcome of a geolocation lookup: a point, or the reason there is none."""

    point: Optional[GeoPoint] = None
    failure: Optional[LocationDeniedReason] = None

    @classmethod
    def found(cls, point: GeoPoint) -> "GeolocationResult":
        return cls(point=point)

    @classmethod
    def denied(
        cls,
        reason: LocationDeniedReason = LocationDeniedReason.location_unavailable,
    ) -> "GeolocationResult":
        return cls(failure=reason)

    @property
    def ok(self) -> bool:
        return self.point is not None
