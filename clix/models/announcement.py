"""Announcement ORM model."""
import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, Text, DateTime, ForeignKey
from clix.database import Base


class Announcement(Base):
    __tablename__ = "announcements"

    announcement_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    club_id = Column(String(36), ForeignKey("clubs.club_id"), nullable=False)
    content = Column(Text, nullable=False)
    date = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
