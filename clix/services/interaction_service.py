"""Likes and comments on posts and media — server-side read-modify-write.

The client never sends a computed ``liked_by`` or ``comments`` array. Each
request names one actor or one entry; the row is read under a write lock,
changed, and written back in one transaction, so concurrent requests from
different clients cannot overwrite each other's changes.
"""
import logging
from typing import Any, Union

from fastapi import HTTPException
from sqlalchemy.orm import Session

from clix.models.post import Post, MediaPost
from clix.services.access import get_user_or_404

logger = logging.getLogger(__name__)

Target = Union[Post, MediaPost]


def _load_for_update(db: Session, model: type, target_id: str) -> Target:
    pk = model.__mapper__.primary_key[0]
    target = db.query(model).filter(pk == target_id).with_for_update().first()
    if not target:
        label = "Media post" if model is MediaPost else "Post"
        raise HTTPException(status_code=404, detail=f"{label} not found")
    return target


def toggle_like(db: Session, model: type, target_id: str, user_id: str) -> Target:
    """Flip ``user_id`` in the target's ``liked_by`` set and return the row."""
    get_user_or_404(db, user_id)
    target = _load_for_update(db, model, target_id)

    # dict.fromkeys drops any duplicates a legacy row may carry
    liked_by = list(dict.fromkeys(target.liked_by or []))
    if user_id in liked_by:
        liked_by.remove(user_id)
        action = "unliked"
    else:
        liked_by.append(user_id)
        action = "liked"

    target.liked_by = liked_by
    db.commit()
    db.refresh(target)
    logger.info("User %s %s %s %s (%d likes)", user_id, action, model.__tablename__, target_id, len(liked_by))
    return target


def append_comment(db: Session, model: type, target_id: str, comment: dict[str, Any]) -> Target:
    """Append ``comment`` to the target's log unless its id is already there."""
    get_user_or_404(db, comment["user_id"])
    target = _load_for_update(db, model, target_id)

    comments = list(target.comments or [])
    if any(existing.get("id") == comment["id"] for existing in comments):
        # A retried append; the entry already landed.
        db.rollback()
        logger.info("Comment %s already on %s %s", comment["id"], model.__tablename__, target_id)
        return target

    target.comments = comments + [comment]
    db.commit()
    db.refresh(target)
    logger.info("Comment %s appended to %s %s by %s", comment["id"], model.__tablename__, target_id, comment["user_id"])
    return target
