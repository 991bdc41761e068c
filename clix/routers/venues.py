"""Venue API routes."""
import logging
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from clix.database import get_db
from clix.models.club import Venue
from clix.models.user import UserRole
from clix.schemas.club import VenueCreate, VenueOut
from clix.services.access import require_role

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=list[VenueOut])
def list_venues(db: Session = Depends(get_db)):
    return db.query(Venue).order_by(Venue.name).all()


@router.post("/", response_model=VenueOut, status_code=status.HTTP_201_CREATED)
def create_venue(
    payload: VenueCreate,
    actor_user_id: str = Query(..., description="College admin adding the venue"),
    db: Session = Depends(get_db),
):
    require_role(db, actor_user_id, UserRole.college_admin)
    venue = Venue(**payload.model_dump(exclude_none=True))
    db.add(venue)
    db.commit()
    db.refresh(venue)
    logger.info("Venue %s (%s) added", venue.name, venue.venue_id)
    return venue
