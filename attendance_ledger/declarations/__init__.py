"""Declarations — the one-per-day presence/sick/leave ledger."""

from attendance_ledger.declarations.models import Declaration

__all__ = ["Declaration"]
