"""Event API routes — delegates to event_service for lifecycle rules."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from clix.database import get_db
from clix.models.event import Event, EventStatus
from clix.schemas.event import (
    EventCreate, EventUpdate, EventOut, EventStatusUpdate,
    FeedbackIn, RegistrationRequest, RegistrationOut, WinnersIn,
)
from clix.schemas.user import UserOut
from clix.services import event_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=EventOut, status_code=status.HTTP_201_CREATED)
def propose_event(
    payload: EventCreate,
    actor_user_id: str = Query(..., description="Admin of the proposing club"),
    db: Session = Depends(get_db),
):
    """Propose a new event; it starts PENDING until a college admin decides."""
    return event_service.propose_event(db, payload, actor_user_id)


@router.get("/", response_model=list[EventOut])
def list_events(
    club_id: Optional[str] = Query(None),
    status_filter: Optional[str] = Query(None, alias="status"),
    db: Session = Depends(get_db),
):
    """List events with optional club and status filters, soonest first."""
    query = db.query(Event)
    if club_id:
        query = query.filter(Event.club_id == club_id)
    if status_filter:
        try:
            query = query.filter(Event.status == EventStatus(status_filter))
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Invalid event status: {status_filter}")
    return query.order_by(Event.date, Event.time).all()


@router.get("/{event_id}", response_model=EventOut)
def get_event(event_id: str, db: Session = Depends(get_db)):
    return event_service.get_event_or_404(db, event_id)


@router.patch("/{event_id}", response_model=EventOut)
def update_event(
    event_id: str,
    payload: EventUpdate,
    actor_user_id: str = Query(..., description="Admin of the owning club"),
    db: Session = Depends(get_db),
):
    """Edit an event; a rejected proposal goes back to PENDING."""
    updates = payload.model_dump(exclude_unset=True)
    return event_service.update_event(db, event_id, actor_user_id, updates)


@router.post("/{event_id}/status", response_model=EventOut)
def set_status(
    event_id: str,
    payload: EventStatusUpdate,
    actor_user_id: str = Query(..., description="User performing the transition"),
    db: Session = Depends(get_db),
):
    """Approve, reject (with reason) or complete an event."""
    return event_service.set_status(db, event_id, actor_user_id, payload.status, payload.reason)


@router.post("/{event_id}/register", response_model=RegistrationOut)
def register(event_id: str, payload: RegistrationRequest, db: Session = Depends(get_db)):
    """Register a user for an approved event (idempotent)."""
    event, event_ids = event_service.register(db, event_id, payload.user_id)
    return RegistrationOut(event=EventOut.model_validate(event), event_ids=event_ids)


@router.get("/{event_id}/registrations", response_model=list[UserOut])
def registered_users(event_id: str, db: Session = Depends(get_db)):
    return event_service.registered_users(db, event_id)


@router.post("/{event_id}/feedback", response_model=EventOut)
def add_feedback(event_id: str, payload: FeedbackIn, db: Session = Depends(get_db)):
    return event_service.add_feedback(db, event_id, payload)


@router.post("/{event_id}/certificates", response_model=EventOut)
def issue_certificates(
    event_id: str,
    actor_user_id: str = Query(..., description="Admin of the owning club"),
    db: Session = Depends(get_db),
):
    return event_service.issue_certificates(db, event_id, actor_user_id)


@router.put("/{event_id}/winners", response_model=EventOut)
def save_winners(
    event_id: str,
    payload: WinnersIn,
    actor_user_id: str = Query(..., description="Admin of the owning club"),
    db: Session = Depends(get_db),
):
    return event_service.save_winners(db, event_id, actor_user_id, payload.winners)
