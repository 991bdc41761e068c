"""User API routes."""
import logging
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from werkzeug.security import generate_password_hash

from clix.database import get_db
from clix.models.user import User, UserRole
from clix.schemas.user import UserCreate, UserUpdate, UserOut
from clix.services import event_service
from clix.services.access import get_user_or_404, require_role

logger = logging.getLogger(__name__)
router = APIRouter()


def insert_user(db: Session, payload: UserCreate) -> User:
    """Validate and insert a user row; shared by signup and admin creation."""
    try:
        role = UserRole(payload.role)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid role: {payload.role}")

    email = payload.email.strip().lower()
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")
    if payload.user_id and db.query(User).filter(User.user_id == payload.user_id).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User id already exists")

    fields = payload.model_dump(exclude={"password", "email", "role"}, exclude_none=True)
    user = User(
        **fields,
        email=email,
        role=role,
        password_hash=generate_password_hash(payload.password),
        joined_club_ids=[payload.club_id] if payload.club_id else [],
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Created user %s (%s, %s)", user.user_id, user.name, role.value)
    return user


@router.post("/", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserCreate,
    actor_user_id: str = Query(..., description="College admin creating the account"),
    db: Session = Depends(get_db),
):
    """Create an account of any role (college admin only)."""
    require_role(db, actor_user_id, UserRole.college_admin)
    return insert_user(db, payload)


@router.get("/", response_model=list[UserOut])
def list_users(role: str | None = None, db: Session = Depends(get_db)):
    """List users, optionally filtered by role."""
    query = db.query(User)
    if role:
        try:
            query = query.filter(User.role == UserRole(role))
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Invalid role: {role}")
    return query.order_by(User.name).all()


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: str, db: Session = Depends(get_db)):
    """Fetch a single user by ID."""
    return get_user_or_404(db, user_id)


@router.patch("/{user_id}", response_model=UserOut)
def update_user(
    user_id: str,
    payload: UserUpdate,
    actor_user_id: str = Query(..., description="Must be the profile owner"),
    db: Session = Depends(get_db),
):
    """Update profile fields (partial update, own profile only)."""
    user = get_user_or_404(db, user_id)
    if actor_user_id != user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Users may only edit their own profile")
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(user, field, value)
    db.commit()
    db.refresh(user)
    logger.info("Updated user %s", user_id)
    return user


@router.get("/{user_id}/registrations", response_model=list[str])
def get_registrations(user_id: str, db: Session = Depends(get_db)):
    """Event ids the user is registered for."""
    get_user_or_404(db, user_id)
    return event_service.user_registrations(db, user_id)
