"""001 – Initial schema: staff, declarations, session events.

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-18 09:00:00.000000+07:00
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import ENUM, UUID

# Revision identifiers
revision = "001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

ENUM_TYPES: list[tuple[str, list[str]]] = [
    ("declaration_status", ["Present", "Sick", "Leave"]),
    ("session_event_kind", ["clock-in", "clock-out"]),
]


def _create_enum(name: str, values: list[str]) -> None:
    vals = ", ".join(f"'{v}'" for v in values)
    op.execute(f"CREATE TYPE {name} AS ENUM ({vals})")


def _drop_enum(name: str) -> None:
    op.execute(f"DROP TYPE IF EXISTS {name}")


def _enum(name: str, values: list[str]) -> ENUM:
    return ENUM(*values, name=name, create_type=False)


# ---------------------------------------------------------------------------
# Upgrade / downgrade
# ---------------------------------------------------------------------------

def upgrade() -> None:
    for name, values in ENUM_TYPES:
        _create_enum(name, values)

    op.create_table(
        "staff",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(150), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("NOW()")),
    )

    op.create_table(
        "declarations",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("staff_id", UUID(as_uuid=True), sa.ForeignKey("staff.id"), nullable=False),
        sa.Column("status", _enum(*ENUM_TYPES[0]), nullable=False),
        sa.Column("date", sa.Date, nullable=False),
        sa.Column("time_of_day", sa.Time, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("NOW()")),
        sa.UniqueConstraint("staff_id", "date", name="uq_declaration_staff_date"),
    )
    op.create_index("ix_declarations_date", "declarations", ["date"])

    op.create_table(
        "session_events",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("staff_id", UUID(as_uuid=True), sa.ForeignKey("staff.id"), nullable=False),
        sa.Column("kind", _enum(*ENUM_TYPES[1]), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("day", sa.Date, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("NOW()")),
        sa.UniqueConstraint("staff_id", "day", "kind", name="uq_session_event_staff_day_kind"),
    )
    op.create_index("ix_session_events_staff_day", "session_events", ["staff_id", "day"])


def downgrade() -> None:
    op.drop_index("ix_session_events_staff_day", table_name="session_events")
    op.drop_table("session_events")
    op.drop_index("ix_declarations_date", table_name="declarations")
    op.drop_table("declarations")
    op.drop_table("staff")
    for name, _ in reversed(ENUM_TYPES):
        _drop_enum(name)
