"""Optimistic mutation protocol.

Every toggle/append the user triggers goes through one routine:

1. ``begin``: record an intent and apply its delta to the shared store
   synchronously, before any request is sent.
2. ``commit``: send the request. Requests for the same ``(kind, id)`` are
   serialized, so the server applies them in trigger order.
3. ``confirm``: adopt the server's snapshot as the confirmed state and
   re-apply any deltas still in flight. A snapshot only replaces the
   confirmed state if its request was sent after the one that produced the
   current state; an older one just folds its own delta in.
   or ``fail``: roll the delta back, or, for social mutations with rollback
   disabled, leave it on screen ("stranded") until the target
   is reloaded.

The displayed record is always ``confirmed`` with the live intents applied
in trigger order. Reads go through ``refresh`` with a sequence number taken
before the request is sent, so a slow read never overwrites a newer write.
Membership and append deltas are idempotent, so folding one into a snapshot
that already contains it changes nothing.
"""
import asyncio
import itertools
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Optional

from clix.client.entities import Actor, MutationClass, new_id
from clix.client.errors import ClixError, GatewayError
from clix.client.gateway import Gateway
from clix.client.store import EntityStore, record_id
from clix.config import settings

logger = logging.getLogger(__name__)

Key = tuple[str, str]
Record = dict[str, Any]


# ── Pure deltas ────────────────────────────────────────────────────
def with_member(record: Record, field_name: str, member_id: str, present: bool) -> Record:
    """Put ``member_id`` in (or take it out of) a membership set, without duplicates."""
    members = list(dict.fromkeys(record.get(field_name) or []))
    if not present:
        members = [m for m in members if m != member_id]
    elif member_id not in members:
        members.append(member_id)
    return {**record, field_name: members}


def is_member(record: Record, field_name: str, member_id: str) -> bool:
    return member_id in (record.get(field_name) or [])


def appended(record: Record, field_name: str, entry: Record) -> Record:
    """Append ``entry`` to a log unless an entry with its id is already there."""
    log = list(record.get(field_name) or [])
    if any(existing.get("id") == entry["id"] for existing in log):
        return record
    return {**record, field_name: log + [entry]}


def counted(record: Record, field_name: str, delta: int) -> Record:
    return {**record, field_name: max(0, (record.get(field_name) or 0) + delta)}


@dataclass(eq=False)
class Intent:
    """A client-only description of one pending delta."""

    key: Key
    seq: int
    apply: Callable[[Record], Record]
    mutation_class: MutationClass
    label: str
    sent_seq: Optional[int] = None
    stranded: bool = False


@dataclass
class _Tracked:
    confirmed: Record
    intents: list[Intent] = field(default_factory=list)


class OptimisticProtocol:
    def __init__(
        self,
        store: EntityStore,
        gateway: Gateway,
        rollback_social: Optional[bool] = None,
    ):
        self.store = store
        self.gateway = gateway
        self.rollback_social = settings.OPTIMISTIC_ROLLBACK if rollback_social is None else rollback_social
        self._tracked: dict[Key, _Tracked] = {}
        # sequence number of the request behind each key's confirmed state
        self._versions: dict[Key, int] = {}
        self._locks: dict[Key, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._seq = itertools.count(1)

    # ── Reconciliation routine ────────────────────────────────────
    def begin(
        self,
        kind: str,
        rid: str,
        apply: Callable[[Record], Record],
        mutation_class: MutationClass,
        label: str = "",
    ) -> Intent:
        key = (kind, rid)
        tracked = self._tracked.get(key)
        if tracked is None:
            current = self.store.get(kind, rid)
            if current is None:
                raise ClixError(f"{kind} {rid} is not loaded")
            tracked = self._tracked[key] = _Tracked(confirmed=current)

        intent = Intent(key=key, seq=next(self._seq), apply=apply, mutation_class=mutation_class, label=label)
        tracked.intents.append(intent)
        self._render(key)
        return intent

    async def commit(
        self,
        intent: Intent,
        remote: Callable[[], Awaitable[Any]],
        snapshot: Optional[Callable[[Any], Record]] = lambda result: result,
    ) -> Any:
        """Send the intent's request and reconcile with the answer.

        ``snapshot`` maps the response to the target's confirmed record;
        pass ``None`` when the response carries no snapshot and the delta
        should simply be folded into the confirmed state.
        """
        async with self._locks[intent.key]:
            intent.sent_seq = self.next_seq()
            try:
                result = await remote()
            except GatewayError as e:
                self.fail(intent, e)
                raise
        self.confirm(intent, snapshot(result) if snapshot else None)
        return result

    def confirm(self, intent: Intent, confirmed: Optional[Record] = None) -> None:
        key = intent.key
        tracked = self._tracked[key]
        tracked.intents.remove(intent)
        sent_seq = intent.sent_seq or self.next_seq()

        if confirmed is not None and sent_seq > self._versions.get(key, 0):
            tracked.confirmed = confirmed
            self._versions[key] = sent_seq
        else:
            if confirmed is not None:
                # a read sent after this request already replaced the confirmed state
                logger.debug("Folding stale snapshot for %s (seq %d < %d)", key, sent_seq, self._versions[key])
            tracked.confirmed = intent.apply(tracked.confirmed)

        self._render(key)
        self._release(key)

    def abort(self, intent: Intent) -> None:
        """Drop the intent and show the state without it."""
        tracked = self._tracked[intent.key]
        if intent in tracked.intents:
            tracked.intents.remove(intent)
        self._render(intent.key)
        self._release(intent.key)

    def fail(self, intent: Intent, error: ClixError) -> None:
        if intent.mutation_class is MutationClass.social and not self.rollback_social:
            intent.stranded = True
            logger.warning("%s on %s failed; keeping local change until reload: %s", intent.label, intent.key, error)
            return
        logger.warning("%s on %s failed; rolling back: %s", intent.label, intent.key, error)
        self.abort(intent)

    def next_seq(self) -> int:
        """Take a request sequence number; call it before the request is sent."""
        return next(self._seq)

    def refresh(self, kind: str, record: Record, seq: Optional[int] = None) -> str:
        """Adopt a fetched record; stranded deltas on it are dropped.

        ``seq`` is the number taken when the read was sent. A read older
        than the request behind the current confirmed state is ignored.
        """
        rid = record_id(kind, record)
        key = (kind, rid)
        seq = self.next_seq() if seq is None else seq
        if seq < self._versions.get(key, 0):
            logger.debug("Ignoring stale read of %s (seq %d < %d)", key, seq, self._versions[key])
            return rid
        self._versions[key] = seq

        tracked = self._tracked.get(key)
        if tracked is None:
            self.store.put(kind, rid, record)
            return rid

        dropped = [i for i in tracked.intents if i.stranded]
        if dropped:
            logger.info("Reload of %s discards %d unconfirmed change(s)", key, len(dropped))
        tracked.intents = [i for i in tracked.intents if not i.stranded]
        tracked.confirmed = record
        self._render(key)
        self._release(key)
        return rid

    def load(self, kind: str, records: list[Record], seq: Optional[int] = None) -> list[str]:
        seq = self.next_seq() if seq is None else seq
        return [self.refresh(kind, record, seq) for record in records]

    def in_flight(self, kind: str, rid: str) -> int:
        tracked = self._tracked.get((kind, rid))
        return sum(1 for i in tracked.intents if not i.stranded) if tracked else 0

    def stranded(self, kind: str, rid: str) -> int:
        tracked = self._tracked.get((kind, rid))
        return sum(1 for i in tracked.intents if i.stranded) if tracked else 0

    def _render(self, key: Key) -> None:
        tracked = self._tracked[key]
        value = tracked.confirmed
        for intent in sorted(tracked.intents, key=lambda i: i.seq):
            value = intent.apply(value)
        self.store.put(*key, value)

    def _release(self, key: Key) -> None:
        tracked = self._tracked.get(key)
        if tracked is not None and not tracked.intents:
            del self._tracked[key]

    def _require(self, kind: str, rid: str) -> Record:
        record = self.store.get(kind, rid)
        if record is None:
            raise ClixError(f"{kind} {rid} is not loaded")
        return record

    # ── Operations ────────────────────────────────────────────────
    async def toggle_membership(self, kind: str, target_id: str, actor_id: str) -> Record:
        """Like or unlike a post/media item.

        Whether this is a like or an unlike is read from the displayed set;
        the server flips its own copy.
        """
        liked = not is_member(self._require(kind, target_id), "liked_by", actor_id)
        intent = self.begin(
            kind, target_id,
            lambda record: with_member(record, "liked_by", actor_id, liked),
            MutationClass.social,
            label="like" if liked else "unlike",
        )
        return await self.commit(intent, lambda: self.gateway.toggle_member(kind, target_id, actor_id))

    async def append_entry(self, kind: str, target_id: str, entry: Record) -> Record:
        """Append a comment to a post/media item."""
        intent = self.begin(
            kind, target_id,
            lambda record: appended(record, "comments", entry),
            MutationClass.social,
            label="append comment",
        )
        return await self.commit(intent, lambda: self.gateway.append_entry(kind, target_id, entry))

    async def join_or_leave_club(self, actor_id: str, club_id: str) -> Record:
        """Toggle club membership, then move the club's member counter.

        The two writes are separate requests. If the membership write fails
        both local changes are rolled back. If only the counter write fails
        the membership stays and the counter reverts, leaving the displayed
        count out of step with the roster.
        """
        user = self._require("users", actor_id)
        self._require("clubs", club_id)
        was_member = is_member(user, "joined_club_ids", club_id)

        membership = self.begin(
            "users", actor_id,
            lambda record: with_member(record, "joined_club_ids", club_id, not was_member),
            MutationClass.confirmed,
            label="leave club" if was_member else "join club",
        )
        counter = self.begin(
            "clubs", club_id,
            lambda record: counted(record, "member_count", -1 if was_member else 1),
            MutationClass.confirmed,
            label="member count",
        )

        try:
            user = await self.commit(membership, lambda: self.gateway.toggle_club_membership(club_id, actor_id))
        except GatewayError:
            self.abort(counter)
            raise

        # direction follows what the server did, not what the client assumed
        delta = 1 if is_member(user, "joined_club_ids", club_id) else -1
        await self.commit(counter, lambda: self.gateway.adjust_member_count(club_id, delta))
        return user

    async def register_for_event(self, actor_id: str, event_id: str) -> Record:
        """Take a ticket: bump the event's count and add it to the user's tickets."""
        tickets = self._require("registrations", actor_id)
        self._require("events", event_id)
        if is_member(tickets, "event_ids", event_id):
            return self.store.get("events", event_id)

        count = self.begin(
            "events", event_id,
            lambda record: counted(record, "registered_count", 1),
            MutationClass.confirmed,
            label="register",
        )
        ticket = self.begin(
            "registrations", actor_id,
            lambda record: with_member(record, "event_ids", event_id, True),
            MutationClass.confirmed,
            label="ticket",
        )

        try:
            result = await self.commit(
                count,
                lambda: self.gateway.register(event_id, actor_id),
                snapshot=lambda body: body["event"],
            )
        except GatewayError:
            self.abort(ticket)
            raise

        ticket.sent_seq = count.sent_seq
        self.confirm(ticket, {"user_id": actor_id, "event_ids": result["event_ids"]})
        return result["event"]

    async def create_post(self, actor: Actor, club_id: str, content: str) -> Record:
        """Show a new post at the top of the club feed, then create it remotely."""
        self._require("feeds", club_id)
        post_id = new_id("p")
        self.store.put("posts", post_id, {
            "post_id": post_id,
            "club_id": club_id,
            "user_id": actor.id,
            "user_name": actor.name,
            "user_avatar": actor.avatar,
            "content": content,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "liked_by": [],
            "comments": [],
        })
        intent = self.begin(
            "feeds", club_id,
            lambda feed: {**feed, "post_ids": [post_id, *[p for p in feed["post_ids"] if p != post_id]]},
            MutationClass.confirmed,
            label="create post",
        )

        try:
            created = await self.commit(
                intent,
                lambda: self.gateway.create_record(
                    "posts", {"post_id": post_id, "club_id": club_id, "user_id": actor.id, "content": content}
                ),
                snapshot=None,
            )
        except GatewayError:
            self.store.discard("posts", post_id)
            raise

        self.store.put("posts", post_id, created)
        return created
