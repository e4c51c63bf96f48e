"""Session event ORM model — immutable clock-in / clock-out instants."""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from attendance_ledger.common.constants import SessionEventKind
from attendance_ledger.database import Base


class SessionEvent(Base):
    """One clock event. ``day`` is the local calendar day of ``timestamp``."""

    __tablename__ = "session_events"
    __table_args__ = (
        sa.UniqueConstraint(
            "staff_id", "day", "kind", name="uq_session_event_staff_day_kind"
        ),
        sa.Index("ix_session_events_staff_day", "staff_id", "day"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    staff_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), sa.ForeignKey("staff.id"), nullable=False
    )
    kind: Mapped[SessionEventKind] = mapped_column(
        sa.Enum(
            SessionEventKind,
            name="session_event_kind",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
    )
    timestamp: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False
    )
    day: Mapped[date] = mapped_column(sa.Date, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    def __repr__(self) -> str:
        return f"<SessionEvent {self.staff_id} {self.kind} {self.timestamp}>"
