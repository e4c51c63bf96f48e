"""Declaration Pydantic v2 schemas — request / response validation."""

import datetime
import uuid
from datetime import date, time
from typing import Optional

from pydantic import BaseModel, ConfigDict

from attendance_ledger.common.constants import DeclarationStatus
from attendance_ledger.geofence.schemas import Coordinates


class DeclarationCreate(BaseModel):
    """Payload for declaring today's attendance.

    ``date`` and ``time_of_day`` default to the local calendar day and clock.
    ``location`` is required when declaring ``Present``.
    """

    staff_id: uuid.UUID
    status: DeclarationStatus
    date: Optional[datetime.date] = None
    time_of_day: Optional[datetime.time] = None
    location: Optional[Coordinates] = None


class DeclarationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    staff_id: uuid.UUID
    status: DeclarationStatus
    date: date
    time_of_day: time
