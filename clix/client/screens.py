"""Per-role screen controllers.

Controllers are glue: they read through the Gateway into the shared store,
route toggle/append actions through the optimistic protocol, and turn
failures into one-shot notifications. Reads never raise; a failed read
logs and leaves the screen with empty state.
"""
import logging
from typing import Any, Awaitable, Optional, TypeVar

from clix.client.entities import Role, new_comment
from clix.client.errors import ClixError
from clix.client.notifications import Notifier
from clix.client.optimistic import OptimisticProtocol
from clix.client.session import SessionContext
from clix.client.store import record_id

logger = logging.getLogger(__name__)

T = TypeVar("T")

OPEN_STATUSES = ("APPROVED", "COMPLETED")


class Screen:
    roles: tuple[Role, ...] = tuple(Role)

    def __init__(self, session: SessionContext, protocol: OptimisticProtocol, notifier: Notifier):
        session.require(*self.roles)
        self.session = session
        self.protocol = protocol
        self.notifier = notifier
        self.store = protocol.store
        self.gateway = protocol.gateway
        self.drafts: dict[str, str] = {}

    @property
    def user_id(self) -> str:
        return self.session.user_id

    def set_draft(self, key: str, text: str) -> None:
        self.drafts[key] = text

    def take_draft(self, key: str) -> str:
        """Return the draft and clear its input."""
        return self.drafts.pop(key, "").strip()

    async def _read(self, call: Awaitable[T], default: T) -> T:
        try:
            return await call
        except ClixError as e:
            logger.warning("%s read failed: %s", type(self).__name__, e)
            return default

    async def _write(self, call: Awaitable[T], success: Optional[str] = None) -> Optional[T]:
        try:
            result = await call
        except ClixError as e:
            self.notifier.error(str(e))
            return None
        if success:
            self.notifier.info(success)
        return result

    def _invalid(self, message: str) -> None:
        # nothing is sent; the form stays as the user left it
        self.notifier.error(message)

    def _records(self, kind: str, ids: list[str]) -> list[dict[str, Any]]:
        return [r for r in (self.store.get(kind, rid) for rid in ids) if r is not None]

    async def _load(self, kind: str, **filters: Any) -> list[str]:
        seq = self.protocol.next_seq()
        records = await self._read(self.gateway.list_records(kind, **filters), [])
        return self.protocol.load(kind, records, seq)

    async def _fetch(self, kind: str, rid: str) -> Optional[dict[str, Any]]:
        seq = self.protocol.next_seq()
        record = await self._read(self.gateway.get_record(kind, rid), None)
        if record is not None:
            self.protocol.refresh(kind, record, seq)
        return record

    async def _save(self, kind: str, call: Awaitable[dict[str, Any]], success: Optional[str] = None):
        """Send a write whose answer is the record's new state, and adopt that state."""
        seq = self.protocol.next_seq()
        record = await self._write(call, success)
        if record:
            self.protocol.refresh(kind, record, seq)
        return record


class StudentDashboard(Screen):
    roles = (Role.student,)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.event_ids: list[str] = []
        self.club_ids: list[str] = []
        self.applications: list[dict[str, Any]] = []

    async def load(self) -> None:
        self.event_ids = await self._load("events")
        self.club_ids = await self._load("clubs")
        await self._load("venues")
        seq = self.protocol.next_seq()
        event_ids = await self._read(self.gateway.registrations(self.user_id), None)
        if event_ids is not None:
            self.protocol.refresh("registrations", {"user_id": self.user_id, "event_ids": event_ids}, seq)
        self.applications = await self._read(self.gateway.list_records("volunteers", user_id=self.user_id), [])

    @property
    def events(self) -> list[dict[str, Any]]:
        """Events open to students."""
        return [e for e in self._records("events", self.event_ids) if e["status"] in OPEN_STATUSES]

    @property
    def tickets(self) -> list[dict[str, Any]]:
        registrations = self.store.get("registrations", self.user_id) or {"event_ids": []}
        return self._records("events", registrations["event_ids"])

    @property
    def certificates(self) -> list[dict[str, Any]]:
        return [e for e in self.tickets if e.get("certificates_issued")]

    def is_registered(self, event_id: str) -> bool:
        return any(e["event_id"] == event_id for e in self.tickets)

    async def register(self, event_id: str) -> Optional[dict[str, Any]]:
        return await self._write(
            self.protocol.register_for_event(self.user_id, event_id), "Successfully registered!"
        )

    async def apply_volunteer(self, event_id: str) -> Optional[dict[str, Any]]:
        application = await self._write(
            self.gateway.create_record("volunteers", {"event_id": event_id, "user_id": self.user_id}),
            "Application submitted!",
        )
        if application:
            self.applications.append(application)
        return application

    async def submit_feedback(self, event_id: str, rating: int, comment: str = "") -> Optional[dict[str, Any]]:
        if not isinstance(rating, int) or not 1 <= rating <= 5:
            self._invalid("Rating must be between 1 and 5")
            return None
        return await self._save(
            "events",
            self.gateway.add_feedback(event_id, self.user_id, rating, comment.strip()),
            "Feedback submitted!",
        )

    async def update_profile(self, **fields: Any) -> Optional[dict[str, Any]]:
        if "name" in fields and not str(fields["name"]).strip():
            self._invalid("Name cannot be empty")
            return None
        return await self._save(
            "users",
            self.gateway.update_record("users", self.user_id, fields, actor_id=self.user_id),
            "Profile updated",
        )


class ClubScreen(Screen):
    """A club's page: membership, feed, announcements and upcoming events."""

    def __init__(self, session: SessionContext, protocol: OptimisticProtocol, notifier: Notifier, club_id: str):
        super().__init__(session, protocol, notifier)
        self.club_id = club_id
        self.announcements: list[dict[str, Any]] = []
        self.event_ids: list[str] = []

    async def load(self) -> None:
        await self._fetch("clubs", self.club_id)
        feed_seq = self.protocol.next_seq()
        post_ids = await self._load("posts", club_id=self.club_id)
        self.protocol.refresh("feeds", {"club_id": self.club_id, "post_ids": post_ids}, feed_seq)
        self.announcements = await self._read(
            self.gateway.list_records("announcements", club_id=self.club_id), []
        )
        self.event_ids = await self._load("events", club_id=self.club_id, status="APPROVED")

    @property
    def club(self) -> Optional[dict[str, Any]]:
        return self.store.get("clubs", self.club_id)

    @property
    def posts(self) -> list[dict[str, Any]]:
        feed = self.store.get("feeds", self.club_id) or {"post_ids": []}
        return self._records("posts", feed["post_ids"])

    @property
    def events(self) -> list[dict[str, Any]]:
        return self._records("events", self.event_ids)

    @property
    def is_member(self) -> bool:
        return self.club_id in (self.session.user.get("joined_club_ids") or [])

    async def toggle_join(self) -> Optional[dict[str, Any]]:
        message = "Left club" if self.is_member else "Joined club"
        return await self._write(self.protocol.join_or_leave_club(self.user_id, self.club_id), message)

    async def create_post(self) -> Optional[dict[str, Any]]:
        content = self.take_draft("post")
        if not content:
            self._invalid("Post cannot be empty")
            return None
        return await self._write(self.protocol.create_post(self.session.actor, self.club_id, content))

    async def like_post(self, post_id: str) -> Optional[dict[str, Any]]:
        return await self._write(self.protocol.toggle_membership("posts", post_id, self.user_id))

    async def comment_on_post(self, post_id: str, comment_id: Optional[str] = None) -> Optional[dict[str, Any]]:
        text = self.take_draft(f"comment:{post_id}")
        if not text:
            return None
        entry = new_comment(self.session.actor, text, comment_id)
        return await self._write(self.protocol.append_entry("posts", post_id, entry))


class MediaGallery(Screen):
    def __init__(
        self,
        session: SessionContext,
        protocol: OptimisticProtocol,
        notifier: Notifier,
        club_id: Optional[str] = None,
    ):
        super().__init__(session, protocol, notifier)
        self.club_id = club_id
        self.media_ids: list[str] = []

    async def load(self) -> None:
        self.media_ids = await self._load("media", club_id=self.club_id)

    @property
    def media(self) -> list[dict[str, Any]]:
        return self._records("media", self.media_ids)

    async def like(self, media_id: str) -> Optional[dict[str, Any]]:
        return await self._write(self.protocol.toggle_membership("media", media_id, self.user_id))

    async def comment(self, media_id: str, comment_id: Optional[str] = None) -> Optional[dict[str, Any]]:
        text = self.take_draft(f"comment:{media_id}")
        if not text:
            return None
        entry = new_comment(self.session.actor, text, comment_id)
        return await self._write(self.protocol.append_entry("media", media_id, entry))


class ClubAdminDashboard(Screen):
    roles = (Role.club_admin,)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.club_id: str = self.session.user["club_id"]
        self.event_ids: list[str] = []
        self.media_ids: list[str] = []
        self.venue_ids: list[str] = []
        self.announcements: list[dict[str, Any]] = []

    async def load(self) -> None:
        await self._fetch("clubs", self.club_id)
        self.event_ids = await self._load("events", club_id=self.club_id)
        self.venue_ids = await self._load("venues")
        self.media_ids = await self._load("media", club_id=self.club_id)
        self.announcements = await self._read(
            self.gateway.list_records("announcements", club_id=self.club_id), []
        )

    @property
    def events(self) -> list[dict[str, Any]]:
        return self._records("events", self.event_ids)

    def stats(self) -> dict[str, Any]:
        """Reach, average rating and revenue across this club's events."""
        events = self.events
        ratings = [f["rating"] for e in events for f in (e.get("feedback") or [])]
        return {
            "events": len(events),
            "reach": sum(e["registered_count"] for e in events),
            "avg_rating": round(sum(ratings) / len(ratings), 1) if ratings else 0.0,
            "revenue": sum(e["price"] * e["registered_count"] for e in events),
        }

    # ── Proposals ─────────────────────────────────────────────────
    async def propose_event(self, **fields: Any) -> Optional[dict[str, Any]]:
        if not str(fields.get("title", "")).strip():
            self._invalid("Title is required")
            return None
        if not fields.get("date") or not fields.get("time"):
            self._invalid("Date and time are required")
            return None
        description = fields.pop("description", None) or self.drafts.pop("description", "")
        record = {**fields, "description": description, "club_id": self.club_id}
        event = await self._save(
            "events",
            self.gateway.create_record("events", record, actor_id=self.user_id),
            "Proposal submitted for College Admin approval.",
        )
        if event:
            self.event_ids.append(record_id("events", event))
        return event

    async def resubmit_event(self, event_id: str, **changes: Any) -> Optional[dict[str, Any]]:
        return await self._save(
            "events",
            self.gateway.update_record("events", event_id, changes, actor_id=self.user_id),
            "Proposal updated and re-submitted for approval.",
        )

    async def complete_event(self, event_id: str) -> Optional[dict[str, Any]]:
        return await self._save("events", self.gateway.set_event_status(event_id, "COMPLETED", self.user_id))

    # ── Running events ────────────────────────────────────────────
    async def volunteers(self, event_id: str) -> list[dict[str, Any]]:
        applications = await self._read(self.gateway.list_records("volunteers", event_id=event_id), [])
        self.store.put_many("volunteers", applications)
        return applications

    async def decide_volunteer(self, application_id: str, status: str) -> Optional[dict[str, Any]]:
        application = await self._write(self.gateway.set_volunteer_status(application_id, status, self.user_id))
        if application:
            self.store.put("volunteers", application_id, application)
        return application

    async def registered_users(self, event_id: str) -> list[dict[str, Any]]:
        return await self._read(self.gateway.registered_users(event_id), [])

    async def issue_certificates(self, event_id: str) -> Optional[dict[str, Any]]:
        return await self._save(
            "events",
            self.gateway.issue_certificates(event_id, self.user_id),
            "Certificates issued! Students can now view them in their profiles.",
        )

    async def save_winners(self, event_id: str, winners: list[dict[str, Any]]) -> Optional[dict[str, Any]]:
        if any(not str(w.get("name", "")).strip() for w in winners):
            self._invalid("Every winner needs a name")
            return None
        return await self._save("events", self.gateway.save_winners(event_id, winners, self.user_id))

    # ── Club content ──────────────────────────────────────────────
    async def post_announcement(self) -> Optional[dict[str, Any]]:
        content = self.take_draft("announcement")
        if not content:
            self._invalid("Announcement cannot be empty")
            return None
        announcement = await self._write(
            self.gateway.create_record(
                "announcements", {"club_id": self.club_id, "content": content}, actor_id=self.user_id
            ),
            "Announcement posted!",
        )
        if announcement:
            self.announcements.insert(0, announcement)
        return announcement

    async def publish_media(self, event_id: str, image_url: str, caption: str = "") -> Optional[dict[str, Any]]:
        if not image_url:
            self._invalid("Pick an image to upload")
            return None
        media = await self._save(
            "media",
            self.gateway.create_record(
                "media",
                {
                    "club_id": self.club_id,
                    "event_id": event_id,
                    "image_url": image_url,
                    "caption": caption or "Event Highlights",
                },
                actor_id=self.user_id,
            ),
            "Media uploaded!",
        )
        if media:
            self.media_ids.append(record_id("media", media))
        return media

    # ── Generative assist ─────────────────────────────────────────
    async def generate_description(self, topic: str) -> str:
        """Draft a description for the proposal form."""
        if not topic.strip():
            return ""
        text = await self.gateway.generate_text(topic, "description")
        self.drafts["description"] = text
        return text

    async def generate_report(self, event_id: str) -> str:
        return await self.gateway.generate_report(event_id)

    async def generate_poster(self, event_id: str) -> Optional[str]:
        event = self.store.get("events", event_id)
        if event is None:
            return None
        concept = await self.gateway.generate_text(event["title"], "poster_idea")
        return await self.gateway.generate_image(concept)

    async def generate_certificate_design(self, event_id: str) -> Optional[str]:
        event = self.store.get("events", event_id)
        if event is None:
            return None
        image = await self.gateway.generate_image(
            f'A sophisticated, elegant certificate background design for "{event["title"]}". '
            "Minimalist, gold and white theme, academic and prestigious style. "
            "No text, just the border and background pattern."
        )
        if image is None:
            self.notifier.error("Failed to generate certificate design.")
        return image


class CollegeAdminDashboard(Screen):
    roles = (Role.college_admin,)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.event_ids: list[str] = []
        self.club_ids: list[str] = []
        self.venue_ids: list[str] = []

    async def load(self) -> None:
        self.event_ids = await self._load("events")
        self.club_ids = await self._load("clubs")
        self.venue_ids = await self._load("venues")

    @property
    def events(self) -> list[dict[str, Any]]:
        return self._records("events", self.event_ids)

    @property
    def pending(self) -> list[dict[str, Any]]:
        return [e for e in self.events if e["status"] == "PENDING"]

    @property
    def clubs(self) -> list[dict[str, Any]]:
        return self._records("clubs", self.club_ids)

    def club_stats(self) -> list[dict[str, Any]]:
        """Registrations per club."""
        return [
            {
                "name": club["name"],
                "registrations": sum(
                    e["registered_count"] for e in self.events if e["club_id"] == club["club_id"]
                ),
            }
            for club in self.clubs
        ]

    async def approve(self, event_id: str) -> Optional[dict[str, Any]]:
        return await self._save(
            "events", self.gateway.set_event_status(event_id, "APPROVED", self.user_id), "Event approved"
        )

    async def reject(self, event_id: str, reason: str) -> Optional[dict[str, Any]]:
        if not reason.strip():
            self._invalid("A rejection needs a reason")
            return None
        return await self._save(
            "events",
            self.gateway.set_event_status(event_id, "REJECTED", self.user_id, reason.strip()),
            "Event rejected",
        )

    async def create_user(self, **fields: Any) -> Optional[dict[str, Any]]:
        return await self._write(self.gateway.create_record("users", fields, actor_id=self.user_id), "User created")

    async def create_club(
        self,
        name: str,
        admin_name: str,
        admin_email: str,
        admin_password: str,
        description: str = "",
        logo: Optional[str] = None,
        banner: Optional[str] = None,
    ) -> Optional[dict[str, Any]]:
        """Create the club's admin account, then the club itself."""
        if not name.strip() or not admin_name.strip() or not admin_email.strip():
            self._invalid("Club name, admin name and admin email are required")
            return None
        admin = await self.create_user(
            name=admin_name, email=admin_email, password=admin_password, role=Role.club_admin.value
        )
        if admin is None:
            return None
        club = await self._save(
            "clubs",
            self.gateway.create_record(
                "clubs",
                {
                    "name": name,
                    "description": description,
                    "logo": logo,
                    "banner": banner,
                    "admin_id": admin["user_id"],
                },
                actor_id=self.user_id,
            ),
            "Club and admin created successfully!",
        )
        if club:
            self.club_ids.append(record_id("clubs", club))
        return club

    async def add_venue(
        self, name: str, capacity: int, features: Optional[list[str]] = None
    ) -> Optional[dict[str, Any]]:
        if not name.strip() or capacity <= 0:
            self._invalid("A venue needs a name and a positive capacity")
            return None
        venue = await self._save(
            "venues",
            self.gateway.create_record(
                "venues", {"name": name, "capacity": capacity, "features": features or []}, actor_id=self.user_id
            ),
            "Venue added",
        )
        if venue:
            self.venue_ids.append(record_id("venues", venue))
        return venue
