"""Pydantic schemas for Clubs and Venues."""
from typing import Optional
from pydantic import BaseModel, Field, field_validator


class ClubCreate(BaseModel):
    club_id: Optional[str] = None
    name: str = Field(min_length=1)
    description: str = ""
    logo: Optional[str] = None
    banner: Optional[str] = None
    admin_id: Optional[str] = None


class ClubUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    logo: Optional[str] = None
    banner: Optional[str] = None

    @field_validator("name", "description")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class ClubOut(BaseModel):
    club_id: str
    name: str
    description: str
    logo: Optional[str] = None
    banner: Optional[str] = None
    admin_id: Optional[str] = None
    member_count: int

    model_config = {"from_attributes": True}


class MemberToggle(BaseModel):
    user_id: str


class MemberCountAdjust(BaseModel):
    delta: int = Field(ge=-1, le=1)


class VenueCreate(BaseModel):
    venue_id: Optional[str] = None
    name: str
    capacity: int = Field(gt=0)
    features: list[str] = []


class VenueOut(BaseModel):
    venue_id: str
    name: str
    capacity: int
    features: list[str] = []

    model_config = {"from_attributes": True}
