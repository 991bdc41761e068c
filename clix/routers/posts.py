"""Club feed API routes — posts, likes and comments."""
import logging
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from clix.database import get_db
from clix.models.club import Club
from clix.models.post import Post
from clix.schemas.post import Comment, LikeToggle, PostCreate, PostOut
from clix.services import interaction_service
from clix.services.access import get_user_or_404

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=list[PostOut])
def list_posts(club_id: str = Query(...), db: Session = Depends(get_db)):
    """A club's feed, newest first."""
    return (
        db.query(Post)
        .filter(Post.club_id == club_id)
        .order_by(Post.timestamp.desc())
        .all()
    )


@router.post("/", response_model=PostOut, status_code=status.HTTP_201_CREATED)
def create_post(payload: PostCreate, db: Session = Depends(get_db)):
    """Create a post with an empty like set and empty comment log."""
    author = get_user_or_404(db, payload.user_id)
    if not db.query(Club).filter(Club.club_id == payload.club_id).first():
        raise HTTPException(status_code=404, detail="Club not found")
    if payload.post_id and db.query(Post).filter(Post.post_id == payload.post_id).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Post id already exists")

    post = Post(
        **payload.model_dump(exclude_none=True),
        user_name=author.name,
        user_avatar=author.avatar,
        liked_by=[],
        comments=[],
    )
    db.add(post)
    db.commit()
    db.refresh(post)
    logger.info("Post %s created in club %s by %s", post.post_id, post.club_id, post.user_id)
    return post


@router.post("/{post_id}/like", response_model=PostOut)
def toggle_like(post_id: str, payload: LikeToggle, db: Session = Depends(get_db)):
    return interaction_service.toggle_like(db, Post, post_id, payload.user_id)


@router.post("/{post_id}/comments", response_model=PostOut)
def add_comment(post_id: str, payload: Comment, db: Session = Depends(get_db)):
    return interaction_service.append_comment(db, Post, post_id, payload.model_dump(mode="json"))
