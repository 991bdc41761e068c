"""FastAPI application entry point."""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from clix.config import settings
from clix.database import Base, engine

# Import routers
from clix.routers import (
    auth, users, clubs, events, posts, media, volunteers, announcements, venues, assist,
)

# Import all models so Base.metadata knows about them
from clix.models.user import User                              # noqa: F401
from clix.models.club import Club, Venue                       # noqa: F401
from clix.models.event import Event, Registration              # noqa: F401
from clix.models.post import Post, MediaPost                   # noqa: F401
from clix.models.volunteer import VolunteerApplication         # noqa: F401
from clix.models.announcement import Announcement              # noqa: F401

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = FastAPI(
    title="Clix",
    description="Campus events — students register, clubs propose and run events, college admins approve",
    version="0.1.0",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(clubs.router, prefix="/api/clubs", tags=["Clubs"])
app.include_router(events.router, prefix="/api/events", tags=["Events"])
app.include_router(posts.router, prefix="/api/posts", tags=["Posts"])
app.include_router(media.router, prefix="/api/media", tags=["Media"])
app.include_router(volunteers.router, prefix="/api/volunteers", tags=["Volunteers"])
app.include_router(announcements.router, prefix="/api/announcements", tags=["Announcements"])
app.include_router(venues.router, prefix="/api/venues", tags=["Venues"])
app.include_router(assist.router, prefix="/api/assist", tags=["Assist"])


@app.on_event("startup")
def on_startup():
    """Create database tables on startup (for SQLite dev mode)."""
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok"}
