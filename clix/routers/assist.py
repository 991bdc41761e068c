"""Generative assist API routes — always answer, even when the model cannot."""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from clix.database import get_db
from clix.schemas.assist import ImageOut, ImageRequest, TextOut, TextRequest
from clix.services import assist_service, event_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/text", response_model=TextOut)
def generate_text(payload: TextRequest):
    """Event description, tagline or poster concept for a topic."""
    return TextOut(text=assist_service.generate_text(payload.prompt, payload.kind))


@router.post("/image", response_model=ImageOut)
def generate_image(payload: ImageRequest):
    """Poster or certificate art; ``image`` is null when generation fails."""
    return ImageOut(image=assist_service.generate_image(payload.prompt))


@router.post("/report/{event_id}", response_model=TextOut)
def generate_report(event_id: str, db: Session = Depends(get_db)):
    """Markdown post-event report built from registrations, revenue and feedback."""
    event = event_service.get_event_or_404(db, event_id)
    return TextOut(text=assist_service.generate_event_report(event))
