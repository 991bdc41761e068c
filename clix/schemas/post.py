"""Pydantic schemas for Posts, MediaPosts and their comments."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class Comment(BaseModel):
    id: str = Field(min_length=1, max_length=64)
    user_id: str
    user_name: str
    text: str = Field(min_length=1)
    timestamp: datetime


class LikeToggle(BaseModel):
    user_id: str


class PostCreate(BaseModel):
    post_id: Optional[str] = None
    club_id: str
    user_id: str
    content: str = Field(min_length=1)


class PostOut(BaseModel):
    post_id: str
    club_id: str
    user_id: str
    user_name: str
    user_avatar: Optional[str] = None
    content: str
    timestamp: datetime
    liked_by: list[str] = []
    comments: list[Comment] = []

    model_config = {"from_attributes": True}


class MediaCreate(BaseModel):
    media_id: Optional[str] = None
    club_id: str
    event_id: Optional[str] = None
    image_url: str = Field(min_length=1)
    caption: str = ""


class MediaOut(BaseModel):
    media_id: str
    club_id: str
    event_id: Optional[str] = None
    image_url: str
    caption: str
    liked_by: list[str] = []
    comments: list[Comment] = []

    model_config = {"from_attributes": True}
