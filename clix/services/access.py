"""Role checks shared by the service layer.

Role-gated writes name their actor explicitly (``actor_user_id``); the
checks here resolve that actor and raise 403 when it lacks the role.
"""
from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from clix.models.user import User, UserRole


def get_user_or_404(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def require_role(db: Session, user_id: str, *roles: UserRole) -> User:
    """Return the actor if it holds one of ``roles``, else 403."""
    user = get_user_or_404(db, user_id)
    if user.role not in roles:
        allowed = ", ".join(r.value for r in roles)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"This action requires one of the roles: {allowed}",
        )
    return user


def require_club_admin(db: Session, user_id: str, club_id: str) -> User:
    """Only the admin of ``club_id`` may run that club's events and feed."""
    user = require_role(db, user_id, UserRole.club_admin)
    if user.club_id != club_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only this club's admin may perform this action",
        )
    return user
