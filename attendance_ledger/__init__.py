"""Attendance & work-time ledger: declarations, clock sessions and reports."""

__version__ = "1.0.0"
