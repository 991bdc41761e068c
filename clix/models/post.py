"""Post and MediaPost ORM models — the targets of likes and comments."""
import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, Text, DateTime, JSON, ForeignKey
from clix.database import Base


class Post(Base):
    __tablename__ = "posts"

    post_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    club_id = Column(String(36), ForeignKey("clubs.club_id"), nullable=False)
    user_id = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    user_name = Column(String(100), nullable=False)
    user_avatar = Column(String(500), nullable=True)
    content = Column(Text, nullable=False)
    timestamp = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    liked_by = Column(JSON, nullable=False, default=list)
    comments = Column(JSON, nullable=False, default=list)


class MediaPost(Base):
    __tablename__ = "media"

    media_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    club_id = Column(String(36), ForeignKey("clubs.club_id"), nullable=False)
    event_id = Column(String(36), ForeignKey("events.event_id"), nullable=True)
    image_url = Column(Text, nullable=False)
    caption = Column(String(500), nullable=False, default="")
    liked_by = Column(JSON, nullable=False, default=list)
    comments = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
