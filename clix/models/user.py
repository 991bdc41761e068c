"""User ORM model — students, club admins and college admins."""
import uuid
import enum
from sqlalchemy import Column, String, Text, DateTime, JSON, Enum as SAEnum
from sqlalchemy.sql import func
from clix.database import Base


class UserRole(str, enum.Enum):
    student = "STUDENT"
    club_admin = "CLUB_ADMIN"
    college_admin = "COLLEGE_ADMIN"


class User(Base):
    __tablename__ = "users"

    user_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False, default="")
    role = Column(SAEnum(UserRole), nullable=False, default=UserRole.student)
    avatar = Column(String(500), nullable=True)
    club_id = Column(String(36), nullable=True)  # set for club admins
    bio = Column(Text, nullable=True)
    year = Column(String(20), nullable=True)
    branch = Column(String(50), nullable=True)
    joined_club_ids = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
