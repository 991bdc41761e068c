"""Core event service — proposals, approvals and the event lifecycle.

Responsibilities:
- Authorization hook: only the owning club's admin may propose/update/run an
  event; only college admins may approve or reject a proposal
- Status transitions (PENDING -> APPROVED | REJECTED, REJECTED -> PENDING on
  resubmission, APPROVED -> COMPLETED)
- Registration with capacity checks; the counter moves in the same
  transaction as the registration row
- Feedback log, certificates and winners
"""
import logging
from typing import Any, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from clix.models.club import Club, Venue
from clix.models.event import Event, EventStatus, Registration
from clix.models.user import User, UserRole
from clix.schemas.event import EventCreate, FeedbackIn, Winner
from clix.services.access import get_user_or_404, require_club_admin, require_role

logger = logging.getLogger(__name__)

# target status -> (allowed source statuses, role that may perform it)
TRANSITIONS: dict[EventStatus, tuple[set[EventStatus], UserRole]] = {
    EventStatus.approved: ({EventStatus.pending}, UserRole.college_admin),
    EventStatus.rejected: ({EventStatus.pending}, UserRole.college_admin),
    EventStatus.completed: ({EventStatus.approved}, UserRole.club_admin),
}

OPEN_STATUSES = {EventStatus.approved, EventStatus.completed}


def get_event_or_404(db: Session, event_id: str, for_update: bool = False) -> Event:
    query = db.query(Event).filter(Event.event_id == event_id)
    if for_update:
        query = query.with_for_update()
    event = query.first()
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


def _check_venue(db: Session, venue_id: Optional[str], capacity: int) -> None:
    if not venue_id:
        return
    venue = db.query(Venue).filter(Venue.venue_id == venue_id).first()
    if not venue:
        raise HTTPException(status_code=404, detail="Venue not found")
    if capacity > venue.capacity:
        raise HTTPException(
            status_code=400,
            detail=f"Capacity {capacity} exceeds venue '{venue.name}' capacity of {venue.capacity}",
        )


def propose_event(db: Session, payload: EventCreate, actor_user_id: str) -> Event:
    """Create a PENDING event on behalf of its club."""
    club = db.query(Club).filter(Club.club_id == payload.club_id).first()
    if not club:
        raise HTTPException(status_code=404, detail="Club not found")
    require_club_admin(db, actor_user_id, club.club_id)

    if payload.event_id and db.query(Event).filter(Event.event_id == payload.event_id).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Event id already exists")
    _check_venue(db, payload.venue_id, payload.capacity)

    event = Event(
        **payload.model_dump(exclude_none=True),
        organizer=club.name,
        status=EventStatus.pending,
        registered_count=0,
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    logger.info("Event '%s' (%s) proposed by club %s", event.title, event.event_id, club.club_id)
    return event


def update_event(db: Session, event_id: str, actor_user_id: str, updates: dict[str, Any]) -> Event:
    """Edit an event; editing a rejected proposal resubmits it for approval."""
    event = get_event_or_404(db, event_id)
    require_club_admin(db, actor_user_id, event.club_id)

    if event.status == EventStatus.completed:
        raise HTTPException(status_code=400, detail="Completed events cannot be edited")

    capacity = updates.get("capacity", event.capacity)
    if capacity < event.registered_count:
        raise HTTPException(status_code=400, detail="Capacity cannot drop below current registrations")
    _check_venue(db, updates.get("venue_id", event.venue_id), capacity)

    for field, value in updates.items():
        if hasattr(event, field) and field not in ("event_id", "status", "club_id", "registered_count"):
            setattr(event, field, value)

    if event.status == EventStatus.rejected:
        event.status = EventStatus.pending
        event.rejection_reason = None
        logger.info("Event %s resubmitted for approval", event_id)

    db.commit()
    db.refresh(event)
    logger.info("Updated event %s", event_id)
    return event


def set_status(
    db: Session,
    event_id: str,
    actor_user_id: str,
    new_status: str,
    reason: Optional[str] = None,
) -> Event:
    """Apply one status transition after checking source status and role."""
    try:
        target = EventStatus(new_status)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid event status: {new_status}")

    event = get_event_or_404(db, event_id)
    if target not in TRANSITIONS:
        raise HTTPException(status_code=400, detail=f"Events cannot be moved to {target.value} directly")

    sources, role = TRANSITIONS[target]
    if role == UserRole.club_admin:
        require_club_admin(db, actor_user_id, event.club_id)
    else:
        require_role(db, actor_user_id, role)

    if event.status not in sources:
        raise HTTPException(
            status_code=400,
            detail=f"Cannot move event from {event.status.value} to {target.value}",
        )
    if target == EventStatus.rejected and not (reason and reason.strip()):
        raise HTTPException(status_code=400, detail="A rejection reason is required")

    event.status = target
    event.rejection_reason = reason.strip() if target == EventStatus.rejected else None
    db.commit()
    db.refresh(event)
    logger.info("Event %s moved to %s by %s", event_id, target.value, actor_user_id)
    return event


def register(db: Session, event_id: str, user_id: str) -> tuple[Event, list[str]]:
    """Register a user; repeating a registration is a no-op.

    Returns the event and the user's full list of registered event ids.
    """
    get_user_or_404(db, user_id)
    event = get_event_or_404(db, event_id, for_update=True)

    if event.status != EventStatus.approved:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Event is not open for registration")

    existing = (
        db.query(Registration)
        .filter(Registration.event_id == event_id, Registration.user_id == user_id)
        .first()
    )
    if existing:
        logger.info("User %s already registered for event %s", user_id, event_id)
    else:
        if event.registered_count >= event.capacity:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Event is full")
        db.add(Registration(event_id=event_id, user_id=user_id))
        event.registered_count += 1
        db.commit()
        db.refresh(event)
        logger.info("User %s registered for event %s (%d/%d)", user_id, event_id, event.registered_count, event.capacity)

    return event, user_registrations(db, user_id)


def user_registrations(db: Session, user_id: str) -> list[str]:
    rows = (
        db.query(Registration.event_id)
        .filter(Registration.user_id == user_id)
        .order_by(Registration.registered_at)
        .all()
    )
    return [row.event_id for row in rows]


def registered_users(db: Session, event_id: str) -> list[User]:
    get_event_or_404(db, event_id)
    return (
        db.query(User)
        .join(Registration, Registration.user_id == User.user_id)
        .filter(Registration.event_id == event_id)
        .order_by(User.name)
        .all()
    )


def add_feedback(db: Session, event_id: str, feedback: FeedbackIn) -> Event:
    """Append one rating per registered attendee to the event's feedback log."""
    event = get_event_or_404(db, event_id, for_update=True)
    if event.status not in OPEN_STATUSES:
        raise HTTPException(status_code=400, detail="Feedback is only accepted for approved or completed events")

    registered = (
        db.query(Registration)
        .filter(Registration.event_id == event_id, Registration.user_id == feedback.user_id)
        .first()
    )
    if not registered:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only registered attendees may leave feedback")

    entries = list(event.feedback or [])
    if any(entry.get("user_id") == feedback.user_id for entry in entries):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Feedback already submitted")

    event.feedback = entries + [feedback.model_dump()]
    db.commit()
    db.refresh(event)
    logger.info("Feedback (%d/5) recorded for event %s by %s", feedback.rating, event_id, feedback.user_id)
    return event


def issue_certificates(db: Session, event_id: str, actor_user_id: str) -> Event:
    event = get_event_or_404(db, event_id)
    require_club_admin(db, actor_user_id, event.club_id)
    if event.status not in OPEN_STATUSES:
        raise HTTPException(status_code=400, detail="Certificates can only be issued for approved or completed events")

    event.certificates_issued = True
    db.commit()
    db.refresh(event)
    logger.info("Certificates issued for event %s (%d participants)", event_id, event.registered_count)
    return event


def save_winners(db: Session, event_id: str, actor_user_id: str, winners: list[Winner]) -> Event:
    event = get_event_or_404(db, event_id)
    require_club_admin(db, actor_user_id, event.club_id)
    if event.status not in OPEN_STATUSES:
        raise HTTPException(status_code=400, detail="Winners can only be announced for approved or completed events")

    ranks = [w.rank for w in winners]
    if len(ranks) != len(set(ranks)):
        raise HTTPException(status_code=400, detail="Winner ranks must be unique")

    event.winners = [w.model_dump() for w in sorted(winners, key=lambda w: w.rank)]
    db.commit()
    db.refresh(event)
    logger.info("Saved %d winners for event %s", len(winners), event_id)
    return event
