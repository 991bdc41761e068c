"""Auth API routes — email/password login, signup and demo login by role."""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from werkzeug.security import check_password_hash

from clix.database import get_db
from clix.models.user import User, UserRole
from clix.routers.users import insert_user
from clix.schemas.user import LoginRequest, UserCreate, UserOut

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/login", response_model=UserOut)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    """Return the user for valid credentials; 401 otherwise."""
    user = db.query(User).filter(User.email == payload.email.strip().lower()).first()
    if not user or not check_password_hash(user.password_hash, payload.password):
        logger.info("Failed login for %s", payload.email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    logger.info("User %s logged in", user.user_id)
    return user


@router.post("/signup", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def signup(payload: UserCreate, db: Session = Depends(get_db)):
    """Self-service signup always creates a student account."""
    return insert_user(db, payload.model_copy(update={"role": UserRole.student.value, "club_id": None}))


@router.post("/demo/{role}", response_model=UserOut)
def login_as_role(role: str, db: Session = Depends(get_db)):
    """Log in as the first user holding ``role`` (demo mode)."""
    try:
        wanted = UserRole(role.upper())
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid role: {role}")
    user = db.query(User).filter(User.role == wanted).order_by(User.created_at).first()
    if not user:
        raise HTTPException(status_code=404, detail=f"No user found with role {wanted.value}")
    return user
