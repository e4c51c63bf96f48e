"""Staff roster — the Staff model and its read/create service."""

from attendance_ledger.staff.models import Staff

__all__ = ["Staff"]
