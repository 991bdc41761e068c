"""VolunteerApplication ORM model."""
import uuid
import enum
from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint, Enum as SAEnum
from sqlalchemy.sql import func
from clix.database import Base


class VolunteerStatus(str, enum.Enum):
    pending = "PENDING"
    accepted = "ACCEPTED"
    rejected = "REJECTED"


class VolunteerApplication(Base):
    __tablename__ = "volunteers"
    __table_args__ = (UniqueConstraint("event_id", "user_id", name="uq_volunteer_event_user"),)

    application_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    event_id = Column(String(36), ForeignKey("events.event_id"), nullable=False)
    user_id = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    user_name = Column(String(100), nullable=False)
    user_avatar = Column(String(500), nullable=True)
    status = Column(SAEnum(VolunteerStatus), nullable=False, default=VolunteerStatus.pending)
    applied_at = Column(DateTime(timezone=True), server_default=func.now())
