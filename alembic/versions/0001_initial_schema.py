"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19

Creates all tables for Clix:
users, clubs, venues, events, registrations, posts, media,
volunteers, announcements.
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# SQLAlchemy persists enum member names
user_role = sa.Enum("student", "club_admin", "college_admin", name="userrole")
event_status = sa.Enum("pending", "approved", "rejected", "completed", name="eventstatus")
volunteer_status = sa.Enum("pending", "accepted", "rejected", name="volunteerstatus")


def upgrade() -> None:
    # --- users ---
    op.create_table(
        "users",
        sa.Column("user_id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=False, server_default=""),
        sa.Column("role", user_role, nullable=False),
        sa.Column("avatar", sa.String(500), nullable=True),
        sa.Column("club_id", sa.String(36), nullable=True),
        sa.Column("bio", sa.Text, nullable=True),
        sa.Column("year", sa.String(20), nullable=True),
        sa.Column("branch", sa.String(50), nullable=True),
        sa.Column("joined_club_ids", sa.JSON, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- clubs ---
    op.create_table(
        "clubs",
        sa.Column("club_id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(150), nullable=False, unique=True),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("logo", sa.String(500), nullable=True),
        sa.Column("banner", sa.String(500), nullable=True),
        sa.Column("admin_id", sa.String(36), nullable=True),
        sa.Column("member_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- venues ---
    op.create_table(
        "venues",
        sa.Column("venue_id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(150), nullable=False),
        sa.Column("capacity", sa.Integer, nullable=False),
        sa.Column("features", sa.JSON, nullable=False),
    )

    # --- events ---
    op.create_table(
        "events",
        sa.Column("event_id", sa.String(36), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("organizer", sa.String(150), nullable=False),
        sa.Column("club_id", sa.String(36), sa.ForeignKey("clubs.club_id"), nullable=False),
        sa.Column("date", sa.Date, nullable=False),
        sa.Column("time", sa.String(5), nullable=False),
        sa.Column("venue_id", sa.String(36), sa.ForeignKey("venues.venue_id"), nullable=True),
        sa.Column("status", event_status, nullable=False),
        sa.Column("capacity", sa.Integer, nullable=False),
        sa.Column("registered_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("image", sa.String(500), nullable=True),
        sa.Column("tags", sa.JSON, nullable=False),
        sa.Column("price", sa.Integer, nullable=False, server_default="0"),
        sa.Column("budget", sa.Integer, nullable=False, server_default="0"),
        sa.Column("feedback", sa.JSON, nullable=False),
        sa.Column("volunteers_needed", sa.Boolean, nullable=False, server_default="0"),
        sa.Column("certificates_issued", sa.Boolean, nullable=False, server_default="0"),
        sa.Column("winners", sa.JSON, nullable=False),
        sa.Column("rejection_reason", sa.String(500), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- registrations ---
    op.create_table(
        "registrations",
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.event_id"), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.user_id"), primary_key=True),
        sa.Column("registered_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- posts ---
    op.create_table(
        "posts",
        sa.Column("post_id", sa.String(36), primary_key=True),
        sa.Column("club_id", sa.String(36), sa.ForeignKey("clubs.club_id"), nullable=False),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("user_name", sa.String(100), nullable=False),
        sa.Column("user_avatar", sa.String(500), nullable=True),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=True),
        sa.Column("liked_by", sa.JSON, nullable=False),
        sa.Column("comments", sa.JSON, nullable=False),
    )

    # --- media ---
    op.create_table(
        "media",
        sa.Column("media_id", sa.String(36), primary_key=True),
        sa.Column("club_id", sa.String(36), sa.ForeignKey("clubs.club_id"), nullable=False),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.event_id"), nullable=True),
        sa.Column("image_url", sa.Text, nullable=False),
        sa.Column("caption", sa.String(500), nullable=False, server_default=""),
        sa.Column("liked_by", sa.JSON, nullable=False),
        sa.Column("comments", sa.JSON, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
    )

    # --- volunteers ---
    op.create_table(
        "volunteers",
        sa.Column("application_id", sa.String(36), primary_key=True),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.event_id"), nullable=False),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("user_name", sa.String(100), nullable=False),
        sa.Column("user_avatar", sa.String(500), nullable=True),
        sa.Column("status", volunteer_status, nullable=False),
        sa.Column("applied_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("event_id", "user_id", name="uq_volunteer_event_user"),
    )

    # --- announcements ---
    op.create_table(
        "announcements",
        sa.Column("announcement_id", sa.String(36), primary_key=True),
        sa.Column("club_id", sa.String(36), sa.ForeignKey("clubs.club_id"), nullable=False),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("date", sa.DateTime(timezone=True), nullable=True),
    )


def downgrade() -> None:
    op.drop_table("announcements")
    op.drop_table("volunteers")
    op.drop_table("media")
    op.drop_table("posts")
    op.drop_table("registrations")
    op.drop_table("events")
    op.drop_table("venues")
    op.drop_table("clubs")
    op.drop_table("users")
    bind = op.get_bind()
    for enum_type in (volunteer_status, event_status, user_role):
        enum_type.drop(bind, checkfirst=True)
