"""Club announcement API routes."""
import logging
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from clix.database import get_db
from clix.models.announcement import Announcement
from clix.models.club import Club
from clix.schemas.community import AnnouncementCreate, AnnouncementOut
from clix.services.access import require_club_admin

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=list[AnnouncementOut])
def list_announcements(club_id: str = Query(...), db: Session = Depends(get_db)):
    """A club's announcements, newest first."""
    return (
        db.query(Announcement)
        .filter(Announcement.club_id == club_id)
        .order_by(Announcement.date.desc())
        .all()
    )


@router.post("/", response_model=AnnouncementOut, status_code=status.HTTP_201_CREATED)
def create_announcement(
    payload: AnnouncementCreate,
    actor_user_id: str = Query(..., description="Admin of the club"),
    db: Session = Depends(get_db),
):
    if not db.query(Club).filter(Club.club_id == payload.club_id).first():
        raise HTTPException(status_code=404, detail="Club not found")
    require_club_admin(db, actor_user_id, payload.club_id)

    announcement = Announcement(**payload.model_dump(exclude_none=True))
    db.add(announcement)
    db.commit()
    db.refresh(announcement)
    logger.info("Announcement %s posted to club %s", announcement.announcement_id, payload.club_id)
    return announcement
