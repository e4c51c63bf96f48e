"""Sessions — the clock-in / clock-out ledger and its daily state machine."""

from attendance_ledger.sessions.models import SessionEvent

__all__ = ["SessionEvent"]
