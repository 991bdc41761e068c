"""Value types the client core passes around."""
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional


class Role(str, Enum):
    student = "STUDENT"
    club_admin = "CLUB_ADMIN"
    college_admin = "COLLEGE_ADMIN"


class MutationClass(str, Enum):
    """How a failed optimistic write is treated."""

    social = "social"          # likes and comments; rollback is configurable
    confirmed = "confirmed"    # join/leave, registration, post creation; always rolled back


@dataclass(frozen=True)
class Actor:
    """The user performing a mutation."""

    id: str
    name: str
    avatar: Optional[str] = None

    @classmethod
    def from_user(cls, user: dict[str, Any]) -> "Actor":
        return cls(id=user["user_id"], name=user["name"], avatar=user.get("avatar"))


def new_id(prefix: str) -> str:
    # uuid4, not a timestamp: two submissions in the same millisecond must not collide
    return f"{prefix}-{uuid.uuid4().hex}"


def new_comment(actor: Actor, text: str, comment_id: Optional[str] = None) -> dict[str, Any]:
    return {
        "id": comment_id or new_id("c"),
        "user_id": actor.id,
        "user_name": actor.name,
        "text": text,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
