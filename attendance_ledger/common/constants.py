"""Enums and constants for the attendance ledger — matching database ENUM types."""

from __future__ import annotations

import enum


# ── Declarations ────────────────────────────────────────────────────

class DeclarationStatus(str, enum.Enum):
    present = "Present"
    sick = "Sick"
    leave = "Leave"


# ── Sessions ────────────────────────────────────────────────────────

class SessionEventKind(str, enum.Enum):
    clock_in = "clock-in"
    clock_out = "clock-out"


class SessionState(str, enum.Enum):
    no_session = "NoSession"
    clocked_in = "ClockedIn"
    completed = "Completed"


class SequenceReason(str, enum.Enum):
    already_in = "already-in"
    already_out = "already-out"
    not_yet_in = "not-yet-in"


# ── Work time ───────────────────────────────────────────────────────

class Punctuality(str, enum.Enum):
    early_arrival = "EarlyArrival"
    on_time = "OnTime"
    late = "Late"
    none = "None"


class WorkProgress(str, enum.Enum):
    in_progress = "InProgress"
    completed = "Completed"
    incomplete = "Incomplete"


# ── Geofence ────────────────────────────────────────────────────────

class LocationDeniedReason(str, enum.Enum):
    outside_geofence = "outside-geofence"
    location_unavailable = "location-unavailable"
    timeout = "timeout"


# ── Misc constants ──────────────────────────────────────────────────

NOT_AVAILABLE = "N/A"
DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M:%S"
EARTH_RADIUS_METERS = 6_371_000.0
