"""Club and Venue ORM models."""
import uuid
from sqlalchemy import Column, String, Text, Integer, DateTime, JSON
from sqlalchemy.sql import func
from clix.database import Base


class Club(Base):
    __tablename__ = "clubs"

    club_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(150), nullable=False, unique=True)
    description = Column(Text, nullable=False, default="")
    logo = Column(String(500), nullable=True)
    banner = Column(String(500), nullable=True)
    admin_id = Column(String(36), nullable=True)
    # Denormalized; written by its own request, see club_service.adjust_member_count
    member_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Venue(Base):
    __tablename__ = "venues"

    venue_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(150), nullable=False)
    capacity = Column(Integer, nullable=False)
    features = Column(JSON, nullable=False, default=list)
