"""Pydantic schemas for volunteer applications and announcements."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class VolunteerApply(BaseModel):
    application_id: Optional[str] = None
    event_id: str
    user_id: str


class VolunteerStatusUpdate(BaseModel):
    status: str  # ACCEPTED, REJECTED


class VolunteerOut(BaseModel):
    application_id: str
    event_id: str
    user_id: str
    user_name: str
    user_avatar: Optional[str] = None
    status: str
    applied_at: datetime

    model_config = {"from_attributes": True}


class AnnouncementCreate(BaseModel):
    announcement_id: Optional[str] = None
    club_id: str
    content: str = Field(min_length=1)


class AnnouncementOut(BaseModel):
    announcement_id: str
    club_id: str
    content: str
    date: datetime

    model_config = {"from_attributes": True}
