from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class EventStatus(str, Enum):
    open = "open"
    closed = "closed"


class EventBase(BaseModel):
    title: str
    description: str
    heldOn: datetime
    duration: int = Field(default=120, ge=0, description="Duration in minutes")
    speaker: Optional[str] = None
    location: Optional[str] = None
    needsRegistration: bool = True
    status: EventStatus = EventStatus.open
    maxNumberOfRegistrations: Optional[int] = Field(default=None, ge=0)


class EventCreate(EventBase):
    pass


class Event(EventBase):
    """Snapshot of a stored event. Identity and start are fixed once created."""

    model_config = ConfigDict(frozen=True)

    id: int
    createdAt: datetime

    @property
    def endsAt(self) -> datetime:
        return self.heldOn + timedelta(minutes=self.duration)

    @property
    def openForRegistration(self) -> bool:
        return self.needsRegistration and self.status == EventStatus.open

    @classmethod
    def create(
        cls,
        id: int,
        heldOn: datetime,
        title: str,
        description: str,
        createdAt: Optional[datetime] = None,
        **kwargs,
    ) -> "Event":
        """Build an event with an explicit identity, e.g. for fixtures"""
        return cls(
            id=id,
            heldOn=heldOn,
            title=title,
            description=description,
            createdAt=createdAt or datetime.now(timezone.utc),
            **kwargs,
        )
