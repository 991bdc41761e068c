"""Pydantic schemas for Users and auth."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator


class UserCreate(BaseModel):
    user_id: Optional[str] = None
    name: str = Field(min_length=1)
    email: str = Field(pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(min_length=1)
    role: str = "STUDENT"
    avatar: Optional[str] = None
    club_id: Optional[str] = None
    bio: Optional[str] = None
    year: Optional[str] = None
    branch: Optional[str] = None


class UserUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    avatar: Optional[str] = None
    bio: Optional[str] = None
    year: Optional[str] = None
    branch: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _name_not_null(cls, value):
        if value is None:
            raise ValueError("name may be omitted but not null")
        return value


class UserOut(BaseModel):
    user_id: str
    name: str
    email: str
    role: str
    avatar: Optional[str] = None
    club_id: Optional[str] = None
    bio: Optional[str] = None
    year: Optional[str] = None
    branch: Optional[str] = None
    joined_club_ids: list[str] = []
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class LoginRequest(BaseModel):
    email: str
    password: str
