"""Staff Pydantic v2 schemas."""

import uuid

from pydantic import BaseModel, ConfigDict, Field


class StaffCreate(BaseModel):
    """Payload for adding a staff member to the roster."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=150)


class StaffResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
