"""Event and Registration ORM models."""
import uuid
import enum
from sqlalchemy import (
    Column, String, Text, Date, DateTime, Integer, Boolean, JSON, ForeignKey, Enum as SAEnum,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from clix.database import Base


class EventStatus(str, enum.Enum):
    pending = "PENDING"
    approved = "APPROVED"
    rejected = "REJECTED"
    completed = "COMPLETED"


class Event(Base):
    __tablename__ = "events"

    event_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    organizer = Column(String(150), nullable=False)
    club_id = Column(String(36), ForeignKey("clubs.club_id"), nullable=False)
    date = Column(Date, nullable=False)
    time = Column(String(5), nullable=False)  # HH:MM, local campus time
    venue_id = Column(String(36), ForeignKey("venues.venue_id"), nullable=True)
    status = Column(SAEnum(EventStatus), nullable=False, default=EventStatus.pending)
    capacity = Column(Integer, nullable=False)
    registered_count = Column(Integer, nullable=False, default=0)
    image = Column(String(500), nullable=True)
    tags = Column(JSON, nullable=False, default=list)
    price = Column(Integer, nullable=False, default=0)
    budget = Column(Integer, nullable=False, default=0)
    feedback = Column(JSON, nullable=False, default=list)
    volunteers_needed = Column(Boolean, nullable=False, default=False)
    certificates_issued = Column(Boolean, nullable=False, default=False)
    winners = Column(JSON, nullable=False, default=list)
    rejection_reason = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    registrations = relationship("Registration", back_populates="event", cascade="all, delete-orphan")


class Registration(Base):
    __tablename__ = "registrations"

    event_id = Column(String(36), ForeignKey("events.event_id"), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.user_id"), primary_key=True)
    registered_at = Column(DateTime(timezone=True), server_default=func.now())

    event = relationship("Event", back_populates="registrations")
