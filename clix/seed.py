"""Load the demo campus: venues, clubs, one user per role, events, posts and media.

Usage:
  export DATABASE_URL="sqlite:///./clix.db"  # or your DB string
  python -m clix.seed

Rows whose id already exists are left alone, so re-running is safe.
Every demo account uses the password ``password123``.
"""
import datetime
import logging

from sqlalchemy.orm import Session
from werkzeug.security import generate_password_hash

from clix.config import settings
from clix.database import Base, SessionLocal, engine
from clix.models.announcement import Announcement
from clix.models.club import Club, Venue
from clix.models.event import Event, EventStatus
from clix.models.post import MediaPost, Post
from clix.models.user import User, UserRole
from clix.models.volunteer import VolunteerApplication  # noqa: F401

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"

_now = datetime.datetime.now(datetime.timezone.utc)


def _ago(**delta) -> datetime.datetime:
    return _now - datetime.timedelta(**delta)


def _avatar(seed: str) -> str:
    return f"https://api.dicebear.com/7.x/avataaars/svg?seed={seed}"


VENUES = [
    {"venue_id": "v1", "name": "Main Auditorium", "capacity": 1000, "features": ["Stage", "Sound System", "AC"]},
    {"venue_id": "v2", "name": "Seminar Hall A", "capacity": 200, "features": ["Projector", "Whiteboard"]},
    {"venue_id": "v3", "name": "Open Air Theatre", "capacity": 2000, "features": ["Outdoor", "Lighting"]},
    {"venue_id": "v4", "name": "Computer Lab 3", "capacity": 60, "features": ["Computers", "High-speed Internet"]},
]

CLUBS = [
    {
        "club_id": "c1",
        "name": "Coding Club",
        "description": "Building the future, one line of code at a time.",
        "logo": "https://api.dicebear.com/7.x/identicon/svg?seed=coding",
        "banner": "https://picsum.photos/800/200?random=20",
        "admin_id": "u2",
        "member_count": 450,
    },
    {
        "club_id": "c2",
        "name": "Music Society",
        "description": "Orchestrating harmony on campus.",
        "logo": "https://api.dicebear.com/7.x/identicon/svg?seed=music",
        "banner": "https://picsum.photos/800/200?random=21",
        "admin_id": "u4",
        "member_count": 230,
    },
    {
        "club_id": "c3",
        "name": "Debating Society",
        "description": "Voices that matter. Arguments that win.",
        "logo": "https://api.dicebear.com/7.x/identicon/svg?seed=debate",
        "banner": "https://picsum.photos/800/200?random=22",
        "admin_id": "u5",
        "member_count": 120,
    },
    {
        "club_id": "c4",
        "name": "Robotics Club",
        "description": "Automating the world.",
        "logo": "https://api.dicebear.com/7.x/identicon/svg?seed=robot",
        "banner": "https://picsum.photos/800/200?random=23",
        "admin_id": "u6",
        "member_count": 180,
    },
]

USERS = [
    {
        "user_id": "u1",
        "name": "Alex Student",
        "email": "alex@college.edu",
        "role": UserRole.student,
        "avatar": _avatar("Alex"),
        "bio": "CS Major. Coffee enthusiast. Always looking for the next hackathon.",
        "joined_club_ids": ["c1"],
        "year": "3rd Year",
        "branch": "CSE",
    },
    {
        "user_id": "u2",
        "name": "Coding Club Admin",
        "email": "coding@college.edu",
        "role": UserRole.club_admin,
        "club_id": "c1",
        "avatar": _avatar("Admin"),
        "bio": "Leading the tech revolution on campus.",
        "joined_club_ids": ["c1"],
        "year": "4th Year",
        "branch": "CSE",
    },
    {
        "user_id": "u3",
        "name": "Dean of Affairs",
        "email": "dean@college.edu",
        "role": UserRole.college_admin,
        "avatar": _avatar("Dean"),
        "bio": "Overseeing campus activities and student welfare.",
        "joined_club_ids": [],
    },
    {
        "user_id": "u4",
        "name": "Music Society Admin",
        "email": "music@college.edu",
        "role": UserRole.club_admin,
        "club_id": "c2",
        "avatar": _avatar("music"),
        "joined_club_ids": ["c2"],
    },
    {
        "user_id": "u5",
        "name": "Debating Society Admin",
        "email": "debate@college.edu",
        "role": UserRole.club_admin,
        "club_id": "c3",
        "avatar": _avatar("debate"),
        "joined_club_ids": ["c3"],
    },
    {
        "user_id": "u6",
        "name": "Robotics Club Admin",
        "email": "robotics@college.edu",
        "role": UserRole.club_admin,
        "club_id": "c4",
        "avatar": _avatar("robot"),
        "joined_club_ids": ["c4"],
    },
]

EVENTS = [
    {
        "event_id": "e1",
        "title": "Hackathon 2024",
        "description": "A 24-hour coding marathon to solve real-world problems.",
        "organizer": "Coding Club",
        "club_id": "c1",
        "date": datetime.date(2024, 5, 15),
        "time": "09:00",
        "venue_id": "v1",
        "status": EventStatus.approved,
        "capacity": 200,
        "registered_count": 150,
        "image": "https://picsum.photos/800/400?random=10",
        "tags": ["Tech", "Coding", "Competition"],
        "price": 0,
        "volunteers_needed": True,
    },
    {
        "event_id": "e2",
        "title": "Music Fest",
        "description": "An evening of classical and modern music performances.",
        "organizer": "Music Society",
        "club_id": "c2",
        "date": datetime.date(2024, 5, 20),
        "time": "18:00",
        "venue_id": "v3",
        "status": EventStatus.approved,
        "capacity": 1000,
        "registered_count": 850,
        "image": "https://picsum.photos/800/400?random=11",
        "tags": ["Music", "Art", "Fun"],
        "price": 150,
        "volunteers_needed": True,
    },
    {
        "event_id": "e3",
        "title": "AI Workshop",
        "description": "Introduction to Generative AI and LLMs.",
        "organizer": "Coding Club",
        "club_id": "c1",
        "date": datetime.date(2024, 6, 1),
        "time": "14:00",
        "venue_id": "v2",
        "status": EventStatus.pending,
        "capacity": 50,
        "registered_count": 0,
        "image": "https://picsum.photos/800/400?random=12",
        "tags": ["Workshop", "AI", "Learning"],
        "price": 50,
        "volunteers_needed": False,
    },
]

POSTS = [
    {
        "post_id": "p1",
        "club_id": "c1",
        "user_id": "u2",
        "user_name": "Coding Club Admin",
        "user_avatar": _avatar("Admin"),
        "content": "Welcome to the new semester! We have some great workshops planned. "
                   "What topics are you interested in?",
        "timestamp": _ago(hours=2),
        "liked_by": ["u1", "u3", "u4", "u5", "u6"],
        "comments": [
            {"id": "c-seed-1", "user_id": "u1", "user_name": "Alex", "text": "React Native please!",
             "timestamp": _ago(hours=1).isoformat()},
        ],
    },
    {
        "post_id": "p2",
        "club_id": "c1",
        "user_id": "u1",
        "user_name": "Alex Student",
        "user_avatar": _avatar("Alex"),
        "content": "I would love a session on React and Tailwind CSS!",
        "timestamp": _ago(hours=1),
        "liked_by": ["u2"],
        "comments": [],
    },
    {
        "post_id": "p3",
        "club_id": "c2",
        "user_id": "u4",
        "user_name": "Music Society Admin",
        "user_avatar": _avatar("music"),
        "content": "Auditions for the annual fest will begin next week. Get your instruments ready!",
        "timestamp": _ago(hours=5),
        "liked_by": ["u1", "u5"],
        "comments": [],
    },
]

MEDIA = [
    {
        "media_id": "m1",
        "club_id": "c1",
        "event_id": "e1",
        "image_url": "https://picsum.photos/800/600?random=50",
        "caption": "Winners of Hackathon 2023!",
        "liked_by": ["u1", "u3"],
        "comments": [
            {"id": "c-seed-2", "user_id": "u1", "user_name": "Alex", "text": "Great event!",
             "timestamp": datetime.datetime(2023, 5, 16, tzinfo=datetime.timezone.utc).isoformat()},
        ],
    },
    {
        "media_id": "m2",
        "club_id": "c2",
        "event_id": "e2",
        "image_url": "https://picsum.photos/800/600?random=51",
        "caption": "Jamming session at the OAT",
        "liked_by": ["u1", "u2", "u5"],
        "comments": [],
    },
]

ANNOUNCEMENTS = [
    {
        "announcement_id": "a1",
        "club_id": "c1",
        "content": "General Body Meeting this Friday at 5 PM in the Main Auditorium. "
                   "Attendance is mandatory for core members.",
        "date": datetime.datetime(2024, 5, 10, tzinfo=datetime.timezone.utc),
    },
    {
        "announcement_id": "a2",
        "club_id": "c2",
        "content": "Practice sessions for the upcoming fest have been rescheduled to 6 PM.",
        "date": datetime.datetime(2024, 5, 12, tzinfo=datetime.timezone.utc),
    },
]


def _insert_missing(db: Session, model, key: str, rows: list[dict]) -> int:
    column = getattr(model, key)
    existing = {row[0] for row in db.query(column).filter(column.in_([r[key] for r in rows]))}
    added = 0
    for row in rows:
        if row[key] in existing:
            continue
        db.add(model(**row))
        added += 1
    db.flush()
    logger.info("%s: %d added, %d already present", model.__tablename__, added, len(rows) - added)
    return added


def seed(db: Session) -> int:
    """Insert every demo row not yet present; returns how many were added."""
    hashed = generate_password_hash(DEMO_PASSWORD)
    users = [{**u, "password_hash": hashed} for u in USERS]

    # parents before children
    added = sum([
        _insert_missing(db, Venue, "venue_id", VENUES),
        _insert_missing(db, Club, "club_id", CLUBS),
        _insert_missing(db, User, "user_id", users),
        _insert_missing(db, Event, "event_id", EVENTS),
        _insert_missing(db, Post, "post_id", POSTS),
        _insert_missing(db, MediaPost, "media_id", MEDIA),
        _insert_missing(db, Announcement, "announcement_id", ANNOUNCEMENTS),
    ])
    db.commit()
    return added


def main() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        added = seed(db)
    except Exception:
        db.rollback()
        logger.exception("Seeding failed")
        raise
    finally:
        db.close()
    logger.info("Seeding complete: %d rows added", added)


if __name__ == "__main__":
    main()
