"""Pydantic schemas for the generative assist endpoints."""
from typing import Literal, Optional
from pydantic import BaseModel, Field


class TextRequest(BaseModel):
    prompt: str = Field(min_length=1)
    kind: Literal["description", "tagline", "poster_idea"] = "description"


class TextOut(BaseModel):
    text: str


class ImageRequest(BaseModel):
    prompt: str = Field(min_length=1)


class ImageOut(BaseModel):
    image: Optional[str] = None
