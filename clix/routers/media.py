"""Media gallery API routes — event photos, likes and comments."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from clix.database import get_db
from clix.models.club import Club
from clix.models.post import MediaPost
from clix.schemas.post import Comment, LikeToggle, MediaCreate, MediaOut
from clix.services import interaction_service
from clix.services.access import require_club_admin

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=list[MediaOut])
def list_media(club_id: Optional[str] = Query(None), db: Session = Depends(get_db)):
    query = db.query(MediaPost)
    if club_id:
        query = query.filter(MediaPost.club_id == club_id)
    return query.order_by(MediaPost.created_at.desc()).all()


@router.post("/", response_model=MediaOut, status_code=status.HTTP_201_CREATED)
def create_media(
    payload: MediaCreate,
    actor_user_id: str = Query(..., description="Admin of the owning club"),
    db: Session = Depends(get_db),
):
    """Publish a photo to the gallery (club admin only)."""
    if not db.query(Club).filter(Club.club_id == payload.club_id).first():
        raise HTTPException(status_code=404, detail="Club not found")
    require_club_admin(db, actor_user_id, payload.club_id)
    if payload.media_id and db.query(MediaPost).filter(MediaPost.media_id == payload.media_id).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Media id already exists")

    media = MediaPost(**payload.model_dump(exclude_none=True), liked_by=[], comments=[])
    db.add(media)
    db.commit()
    db.refresh(media)
    logger.info("Media %s published for club %s", media.media_id, media.club_id)
    return media


@router.post("/{media_id}/like", response_model=MediaOut)
def toggle_like(media_id: str, payload: LikeToggle, db: Session = Depends(get_db)):
    return interaction_service.toggle_like(db, MediaPost, media_id, payload.user_id)


@router.post("/{media_id}/comments", response_model=MediaOut)
def add_comment(media_id: str, payload: Comment, db: Session = Depends(get_db)):
    return interaction_service.append_comment(db, MediaPost, media_id, payload.model_dump(mode="json"))
