"""Geofence — haversine distance, site validator and the location gate."""

from attendance_ledger.geofence.schemas import Coordinates, GeolocationResult, GeoPoint
from attendance_ledger.geofence.service import (
    GeofenceValidator,
    GeolocationProvider,
    ReportedLocationProvider,
    haversine_distance,
    require_location,
    within_radius,
)

__all__ = [
    "Coordinates",
    "GeoPoint",
    "GeolocationResult",
    "GeofenceValidator",
    "GeolocationProvider",
    "ReportedLocationProvider",
    "haversine_distance",
    "require_location",
    "within_radius",
]
