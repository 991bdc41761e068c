"""Session and role context: who is logged in and what they may reach."""
import logging
from typing import Any, Optional

from clix.client.entities import Actor, Role
from clix.client.errors import ClixError, PermissionDenied, ValidationError
from clix.client.gateway import Gateway
from clix.client.store import EntityStore

logger = logging.getLogger(__name__)


class SessionContext:
    """Holds the current identity. The user record itself lives in the store,
    so optimistic changes to it (joined clubs, profile edits) show up here too.
    """

    def __init__(self, gateway: Gateway, store: EntityStore):
        self.gateway = gateway
        self.store = store
        self.user_id: Optional[str] = None

    async def login(self, email: str, password: str) -> dict[str, Any]:
        if not email.strip() or not password:
            raise ValidationError("Email and password are required")
        return await self._adopt(await self.gateway.login(email, password))

    async def login_as(self, role: Role) -> dict[str, Any]:
        """Demo login as the first user holding ``role``."""
        return await self._adopt(await self.gateway.login_as_role(Role(role).value))

    async def signup(self, name: str, email: str, password: str, **profile: Any) -> dict[str, Any]:
        if not name.strip() or not email.strip() or not password:
            raise ValidationError("Name, email and password are required")
        user = await self.gateway.signup({"name": name, "email": email, "password": password, **profile})
        return await self._adopt(user)

    def logout(self) -> None:
        logger.info("User %s logged out", self.user_id)
        self.user_id = None

    async def _adopt(self, user: dict[str, Any]) -> dict[str, Any]:
        self.store.put("users", user["user_id"], user)
        try:
            event_ids = await self.gateway.registrations(user["user_id"])
        except ClixError as e:
            logger.warning("Could not load registrations for %s: %s", user["user_id"], e)
            event_ids = []
        self.store.put("registrations", user["user_id"], {"user_id": user["user_id"], "event_ids": event_ids})
        self.user_id = user["user_id"]
        logger.info("Session started for %s (%s)", user["user_id"], user["role"])
        return user

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @property
    def user(self) -> dict[str, Any]:
        if self.user_id is None:
            raise PermissionDenied("Not logged in", 401)
        return self.store.get("users", self.user_id)

    @property
    def actor(self) -> Actor:
        return Actor.from_user(self.user)

    @property
    def role(self) -> Role:
        return Role(self.user["role"])

    def require(self, *roles: Role) -> dict[str, Any]:
        """Return the current user if it holds one of ``roles``."""
        user = self.user
        if Role(user["role"]) not in roles:
            raise PermissionDenied(f"{user['role']} cannot open this screen", 403)
        return user
