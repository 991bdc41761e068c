"""Club service — creation, membership toggles and the member counter.

Membership lives on the user row (``joined_club_ids``); ``member_count`` on
the club row is a denormalized counter written by a separate request. The
two writes are not atomic with each other.
"""
import logging
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from clix.models.club import Club
from clix.models.user import User, UserRole
from clix.schemas.club import ClubCreate
from clix.services.access import require_role

logger = logging.getLogger(__name__)


def get_club_or_404(db: Session, club_id: str, for_update: bool = False) -> Club:
    query = db.query(Club).filter(Club.club_id == club_id)
    if for_update:
        query = query.with_for_update()
    club = query.first()
    if not club:
        raise HTTPException(status_code=404, detail="Club not found")
    return club


def create_club(db: Session, payload: ClubCreate, actor_user_id: str) -> Club:
    """College admins create clubs; the named admin becomes a CLUB_ADMIN of it."""
    require_role(db, actor_user_id, UserRole.college_admin)

    if db.query(Club).filter(Club.name == payload.name).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="A club with this name already exists")
    if payload.club_id and db.query(Club).filter(Club.club_id == payload.club_id).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Club id already exists")

    admin: Optional[User] = None
    if payload.admin_id:
        admin = db.query(User).filter(User.user_id == payload.admin_id).first()
        if not admin:
            raise HTTPException(status_code=404, detail="Admin user not found")

    club = Club(**payload.model_dump(exclude_none=True), member_count=0)
    db.add(club)
    db.flush()

    if admin:
        admin.role = UserRole.club_admin
        admin.club_id = club.club_id

    db.commit()
    db.refresh(club)
    logger.info("Created club '%s' (%s) with admin %s", club.name, club.club_id, payload.admin_id)
    return club


def toggle_membership(db: Session, club_id: str, user_id: str) -> User:
    """Flip ``club_id`` in the user's ``joined_club_ids`` and return the user."""
    get_club_or_404(db, club_id)
    user = db.query(User).filter(User.user_id == user_id).with_for_update().first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    joined = list(dict.fromkeys(user.joined_club_ids or []))
    if club_id in joined:
        joined.remove(club_id)
        action = "left"
    else:
        joined.append(club_id)
        action = "joined"

    user.joined_club_ids = joined
    db.commit()
    db.refresh(user)
    logger.info("User %s %s club %s", user_id, action, club_id)
    return user


def adjust_member_count(db: Session, club_id: str, delta: int) -> Club:
    """Move the counter by ``delta``, never below zero."""
    club = get_club_or_404(db, club_id, for_update=True)
    club.member_count = max(0, (club.member_count or 0) + delta)
    db.commit()
    db.refresh(club)
    logger.info("Club %s member_count %+d -> %d", club_id, delta, club.member_count)
    return club


def list_members(db: Session, club_id: str) -> list[User]:
    """Users whose ``joined_club_ids`` contain ``club_id``."""
    get_club_or_404(db, club_id)
    # JSON containment differs per dialect; the roster is small enough to filter here
    users = db.query(User).order_by(User.name).all()
    return [u for u in users if club_id in (u.joined_club_ids or [])]
