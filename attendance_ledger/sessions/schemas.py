"""Session event Pydantic v2 schemas."""

import uuid
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from attendance_ledger.common.constants import SessionEventKind, SessionState
from attendance_ledger.geofence.schemas import Coordinates


class SessionEventCreate(BaseModel):
    """Payload for a clock-in or clock-out. The server stamps the time."""

    staff_id: uuid.UUID
    kind: SessionEventKind
    location: Optional[Coordinates] = None


class SessionEventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    staff_id: uuid.UUID
    kind: SessionEventKind
    timestamp: datetime
    day: date


class SessionStateResponse(BaseModel):
    staff_id: uuid.UUID
    day: date
    state: SessionState
