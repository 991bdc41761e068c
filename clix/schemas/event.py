"""Pydantic schemas for Events, registrations, feedback and winners."""
import datetime as dt
from typing import Optional
from pydantic import BaseModel, Field, field_validator

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class EventCreate(BaseModel):
    event_id: Optional[str] = None
    title: str = Field(min_length=1)
    description: str = ""
    club_id: str
    date: dt.date
    time: str = Field(pattern=TIME_PATTERN)
    venue_id: Optional[str] = None
    capacity: int = Field(gt=0)
    price: int = Field(default=0, ge=0)
    budget: int = Field(default=0, ge=0)
    tags: list[str] = []
    image: Optional[str] = None
    volunteers_needed: bool = False


class EventUpdate(BaseModel):
    """Partial update; ``venue_id`` and ``image`` may be cleared with null, other fields may not."""

    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    date: Optional[dt.date] = None
    time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    venue_id: Optional[str] = None
    capacity: Optional[int] = Field(default=None, gt=0)
    price: Optional[int] = Field(default=None, ge=0)
    budget: Optional[int] = Field(default=None, ge=0)
    tags: Optional[list[str]] = None
    image: Optional[str] = None
    volunteers_needed: Optional[bool] = None

    @field_validator(
        "title", "description", "date", "time", "capacity", "price", "budget", "tags", "volunteers_needed",
    )
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class FeedbackIn(BaseModel):
    user_id: str
    rating: int = Field(ge=1, le=5)
    comment: str = ""


class Winner(BaseModel):
    rank: int = Field(ge=1)
    name: str
    photo: str = ""


class WinnersIn(BaseModel):
    winners: list[Winner]


class EventOut(BaseModel):
    event_id: str
    title: str
    description: str
    organizer: str
    club_id: str
    date: dt.date
    time: str
    venue_id: Optional[str] = None
    status: str
    capacity: int
    registered_count: int
    image: Optional[str] = None
    tags: list[str] = []
    price: int
    budget: int
    feedback: list[FeedbackIn] = []
    volunteers_needed: bool
    certificates_issued: bool
    winners: list[Winner] = []
    rejection_reason: Optional[str] = None
    created_at: Optional[dt.datetime] = None

    model_config = {"from_attributes": True}


class EventStatusUpdate(BaseModel):
    status: str
    reason: Optional[str] = None


class RegistrationRequest(BaseModel):
    user_id: str


class RegistrationOut(BaseModel):
    event: EventOut
    event_ids: list[str]
