"""Volunteer application API routes."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from clix.database import get_db
from clix.models.volunteer import VolunteerApplication, VolunteerStatus
from clix.schemas.community import VolunteerApply, VolunteerOut, VolunteerStatusUpdate
from clix.services import event_service
from clix.services.access import get_user_or_404, require_club_admin

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=VolunteerOut, status_code=status.HTTP_201_CREATED)
def apply(payload: VolunteerApply, db: Session = Depends(get_db)):
    """Apply to volunteer at an event; one application per user and event."""
    event = event_service.get_event_or_404(db, payload.event_id)
    if not event.volunteers_needed:
        raise HTTPException(status_code=400, detail="This event is not looking for volunteers")
    user = get_user_or_404(db, payload.user_id)

    existing = (
        db.query(VolunteerApplication)
        .filter(
            VolunteerApplication.event_id == payload.event_id,
            VolunteerApplication.user_id == payload.user_id,
        )
        .first()
    )
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Already applied")

    application = VolunteerApplication(
        **payload.model_dump(exclude_none=True),
        user_name=user.name,
        user_avatar=user.avatar,
        status=VolunteerStatus.pending,
    )
    db.add(application)
    db.commit()
    db.refresh(application)
    logger.info("User %s applied to volunteer at event %s", payload.user_id, payload.event_id)
    return application


@router.get("/", response_model=list[VolunteerOut])
def list_applications(
    event_id: Optional[str] = Query(None),
    user_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """List applications by event and/or by applicant."""
    query = db.query(VolunteerApplication)
    if event_id:
        query = query.filter(VolunteerApplication.event_id == event_id)
    if user_id:
        query = query.filter(VolunteerApplication.user_id == user_id)
    return query.order_by(VolunteerApplication.applied_at).all()


@router.patch("/{application_id}/status", response_model=VolunteerOut)
def update_status(
    application_id: str,
    payload: VolunteerStatusUpdate,
    actor_user_id: str = Query(..., description="Admin of the event's club"),
    db: Session = Depends(get_db),
):
    """Accept or reject an application (club admin only)."""
    application = (
        db.query(VolunteerApplication)
        .filter(VolunteerApplication.application_id == application_id)
        .first()
    )
    if not application:
        raise HTTPException(status_code=404, detail="Application not found")

    event = event_service.get_event_or_404(db, application.event_id)
    require_club_admin(db, actor_user_id, event.club_id)

    try:
        application.status = VolunteerStatus(payload.status)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid volunteer status: {payload.status}")

    db.commit()
    db.refresh(application)
    logger.info("Application %s marked %s", application_id, payload.status)
    return application
