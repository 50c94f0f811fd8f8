"""
Schedule models.

ScheduleEntry is what the cache and the UI hold; ScheduleRecord is the raw
shape the backend sends, with date and time still as strings.
"""

from datetime import date, time
from typing import Optional

from pydantic import BaseModel, Field

from quickplan.models.api import WireModel


class ScheduleEntry(BaseModel):
    """One calendar appointment."""

    id: str = Field(..., description="Local identifier used for UI identity")
    server_id: Optional[str] = Field(None, description="Backend identifier once persisted")
    title: str
    date: date
    time: time
    location: Optional[str] = None
    description: Optional[str] = None

    @property
    def remote_id(self) -> str:
        """Identifier to address this entry on the backend."""
        return self.server_id or self.id


class ScheduleRecord(WireModel):
    """Schedule as returned by the backend."""

    id: str = ""
    user_id: Optional[str] = Field(None, alias="userId")
    title: str = ""
    date: str
    time: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None


class ScheduleCreateRequest(WireModel):
    user_id: str = Field(..., alias="userId")
    title: str
    location: Optional[str] = None
    date: str = Field(..., description="YYYY-MM-DD")
    time: str = Field(..., description="HH:MM:SS")
    description: Optional[str] = None


class ScheduleUpdateRequest(ScheduleCreateRequest):
    id: str
