"""Async client for the Clix HTTP API (the Persistence Gateway).

Every method is one request. Non-2xx responses become typed
``GatewayError`` subclasses; transport failures become ``GatewayError``
with no status. The generative assist wrappers are the exception: they
never raise and return the same fallbacks the server would.
"""
import logging
from typing import Any, Optional

import httpx

from clix.client.errors import STATUS_ERRORS, GatewayError
from clix.config import settings

logger = logging.getLogger(__name__)

ENDPOINTS = {
    "users": "/api/users",
    "clubs": "/api/clubs",
    "events": "/api/events",
    "posts": "/api/posts",
    "media": "/api/media",
    "volunteers": "/api/volunteers",
    "announcements": "/api/announcements",
    "venues": "/api/venues",
}

# kinds whose like/comment endpoints exist
INTERACTIVE_KINDS = ("posts", "media")

ASSIST_UNAVAILABLE = "AI generation unavailable right now."


def _error_message(detail: Any, status_code: int) -> str:
    if isinstance(detail, str):
        return detail
    if isinstance(detail, dict) and "message" in detail:
        return str(detail["message"])
    if isinstance(detail, list) and detail:
        # pydantic validation errors
        return "; ".join(str(item.get("msg", item)) for item in detail if isinstance(item, dict)) or str(detail)
    return f"Request failed with status {status_code}"


class Gateway:
    """Thin async wrapper over the REST endpoints."""

    def __init__(
        self,
        http: Optional[httpx.AsyncClient] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(
            base_url=base_url or settings.API_BASE_URL,
            timeout=timeout or settings.REQUEST_TIMEOUT_SECONDS,
        )

    async def __aenter__(self) -> "Gateway":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        try:
            response = await self._http.request(method, path, json=json, params=params or None)
        except httpx.HTTPError as e:
            logger.error("%s %s failed: %s", method, path, e)
            raise GatewayError(f"Could not reach the server: {e}") from e

        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = response.text
            detail = body.get("detail", body) if isinstance(body, dict) else body
            error_cls = STATUS_ERRORS.get(response.status_code, GatewayError)
            logger.info("%s %s -> %d", method, path, response.status_code)
            raise error_cls(_error_message(detail, response.status_code), response.status_code, detail)

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.error("%s %s returned a non-JSON body", method, path)
            raise GatewayError(f"Malformed response from the server: {e}", response.status_code) from e

    @staticmethod
    def _path(kind: str, *parts: str) -> str:
        try:
            base = ENDPOINTS[kind]
        except KeyError:
            raise ValueError(f"Unknown entity kind: {kind}")
        return "/".join([base, *parts]) if parts else f"{base}/"

    # ── Entity CRUD ───────────────────────────────────────────────
    async def list_records(self, kind: str, **filters: Any) -> list[dict[str, Any]]:
        return await self._request("GET", self._path(kind), params=filters)

    async def get_record(self, kind: str, record_id: str) -> dict[str, Any]:
        return await self._request("GET", self._path(kind, record_id))

    async def create_record(
        self, kind: str, record: dict[str, Any], actor_id: Optional[str] = None
    ) -> dict[str, Any]:
        return await self._request("POST", self._path(kind), json=record, params={"actor_user_id": actor_id})

    async def update_record(
        self, kind: str, record_id: str, partial: dict[str, Any], actor_id: Optional[str] = None
    ) -> dict[str, Any]:
        return await self._request(
            "PATCH", self._path(kind, record_id), json=partial, params={"actor_user_id": actor_id}
        )

    # ── Membership sets and append logs ───────────────────────────
    async def toggle_member(self, kind: str, target_id: str, actor_id: str) -> dict[str, Any]:
        """Flip ``actor_id`` in the target's like set; returns the server's record."""
        if kind not in INTERACTIVE_KINDS:
            raise ValueError(f"{kind} has no membership set")
        return await self._request("POST", self._path(kind, target_id, "like"), json={"user_id": actor_id})

    async def append_entry(self, kind: str, target_id: str, entry: dict[str, Any]) -> dict[str, Any]:
        """Append ``entry`` to the target's comment log; returns the server's record."""
        if kind not in INTERACTIVE_KINDS:
            raise ValueError(f"{kind} has no append log")
        return await self._request("POST", self._path(kind, target_id, "comments"), json=entry)

    async def toggle_club_membership(self, club_id: str, user_id: str) -> dict[str, Any]:
        return await self._request(
            "POST", self._path("clubs", club_id, "members", "toggle"), json={"user_id": user_id}
        )

    async def adjust_member_count(self, club_id: str, delta: int) -> dict[str, Any]:
        return await self._request("POST", self._path("clubs", club_id, "member-count"), json={"delta": delta})

    async def club_members(self, club_id: str) -> list[dict[str, Any]]:
        return await self._request("GET", self._path("clubs", club_id, "members"))

    # ── Events ────────────────────────────────────────────────────
    async def register(self, event_id: str, user_id: str) -> dict[str, Any]:
        """Returns ``{"event": ..., "event_ids": [...]}``."""
        return await self._request("POST", self._path("events", event_id, "register"), json={"user_id": user_id})

    async def registrations(self, user_id: str) -> list[str]:
        return await self._request("GET", self._path("users", user_id, "registrations"))

    async def registered_users(self, event_id: str) -> list[dict[str, Any]]:
        return await self._request("GET", self._path("events", event_id, "registrations"))

    async def set_event_status(
        self, event_id: str, status: str, actor_id: str, reason: Optional[str] = None
    ) -> dict[str, Any]:
        return await self._request(
            "POST",
            self._path("events", event_id, "status"),
            json={"status": status, "reason": reason},
            params={"actor_user_id": actor_id},
        )

    async def add_feedback(self, event_id: str, user_id: str, rating: int, comment: str) -> dict[str, Any]:
        return await self._request(
            "POST",
            self._path("events", event_id, "feedback"),
            json={"user_id": user_id, "rating": rating, "comment": comment},
        )

    async def issue_certificates(self, event_id: str, actor_id: str) -> dict[str, Any]:
        return await self._request(
            "POST", self._path("events", event_id, "certificates"), params={"actor_user_id": actor_id}
        )

    async def save_winners(self, event_id: str, winners: list[dict[str, Any]], actor_id: str) -> dict[str, Any]:
        return await self._request(
            "PUT",
            self._path("events", event_id, "winners"),
            json={"winners": winners},
            params={"actor_user_id": actor_id},
        )

    async def set_volunteer_status(self, application_id: str, status: str, actor_id: str) -> dict[str, Any]:
        return await self._request(
            "PATCH",
            self._path("volunteers", application_id, "status"),
            json={"status": status},
            params={"actor_user_id": actor_id},
        )

    # ── Auth ──────────────────────────────────────────────────────
    async def login(self, email: str, password: str) -> dict[str, Any]:
        return await self._request("POST", "/api/auth/login", json={"email": email, "password": password})

    async def signup(self, record: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", "/api/auth/signup", json=record)

    async def login_as_role(self, role: str) -> dict[str, Any]:
        return await self._request("POST", f"/api/auth/demo/{role}")

    # ── Generative assist (never raises) ──────────────────────────
    async def generate_text(self, prompt: str, kind: str = "description") -> str:
        try:
            body = await self._request("POST", "/api/assist/text", json={"prompt": prompt, "kind": kind})
        except GatewayError as e:
            logger.warning("Text generation failed: %s", e)
            return ASSIST_UNAVAILABLE
        return body["text"]

    async def generate_report(self, event_id: str) -> str:
        try:
            body = await self._request("POST", f"/api/assist/report/{event_id}")
        except GatewayError as e:
            logger.warning("Report generation failed: %s", e)
            return ASSIST_UNAVAILABLE
        return body["text"]

    async def generate_image(self, prompt: str) -> Optional[str]:
        try:
            body = await self._request("POST", "/api/assist/image", json={"prompt": prompt})
        except GatewayError as e:
            logger.warning("Image generation failed: %s", e)
            return None
        return body.get("image")
