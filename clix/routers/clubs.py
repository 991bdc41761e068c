"""Club API routes — CRUD, roster, membership toggle and member counter."""
import logging
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from clix.database import get_db
from clix.models.club import Club
from clix.schemas.club import ClubCreate, ClubUpdate, ClubOut, MemberToggle, MemberCountAdjust
from clix.schemas.user import UserOut
from clix.services import club_service
from clix.services.access import require_club_admin

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=ClubOut, status_code=status.HTTP_201_CREATED)
def create_club(
    payload: ClubCreate,
    actor_user_id: str = Query(..., description="College admin creating the club"),
    db: Session = Depends(get_db),
):
    """Create a club (college admin only)."""
    return club_service.create_club(db, payload, actor_user_id)


@router.get("/", response_model=list[ClubOut])
def list_clubs(db: Session = Depends(get_db)):
    return db.query(Club).order_by(Club.name).all()


@router.get("/{club_id}", response_model=ClubOut)
def get_club(club_id: str, db: Session = Depends(get_db)):
    return club_service.get_club_or_404(db, club_id)


@router.patch("/{club_id}", response_model=ClubOut)
def update_club(
    club_id: str,
    payload: ClubUpdate,
    actor_user_id: str = Query(..., description="Admin of this club"),
    db: Session = Depends(get_db),
):
    """Edit club profile fields (club admin only)."""
    club = club_service.get_club_or_404(db, club_id)
    require_club_admin(db, actor_user_id, club_id)
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(club, field, value)
    db.commit()
    db.refresh(club)
    logger.info("Updated club %s", club_id)
    return club


@router.get("/{club_id}/members", response_model=list[UserOut])
def list_members(club_id: str, db: Session = Depends(get_db)):
    return club_service.list_members(db, club_id)


@router.post("/{club_id}/members/toggle", response_model=UserOut)
def toggle_membership(club_id: str, payload: MemberToggle, db: Session = Depends(get_db)):
    """Join or leave; the server flips membership from its own copy of the user."""
    return club_service.toggle_membership(db, club_id, payload.user_id)


@router.post("/{club_id}/member-count", response_model=ClubOut)
def adjust_member_count(club_id: str, payload: MemberCountAdjust, db: Session = Depends(get_db)):
    return club_service.adjust_member_count(db, club_id, payload.delta)
