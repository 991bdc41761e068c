"""Shared client-side entity store.

One normalized cache per session, keyed by ``(kind, id)``. Every screen
reads from it and subscribes to it, so a change made from one screen is
visible in all of them without a reload.

Records are plain dicts and are replaced wholesale; callers must treat
what ``get`` returns as read-only and ``put`` a new dict instead.
"""
import copy
import logging
from collections import defaultdict
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

ID_FIELDS = {
    "users": "user_id",
    "clubs": "club_id",
    "events": "event_id",
    "posts": "post_id",
    "media": "media_id",
    "volunteers": "application_id",
    "announcements": "announcement_id",
    "venues": "venue_id",
    # client-only records
    "feeds": "club_id",            # {"club_id", "post_ids"}: a club's posts, newest first
    "registrations": "user_id",    # {"user_id", "event_ids"}: a user's tickets
}

Listener = Callable[[str, str, Optional[dict[str, Any]]], None]


def record_id(kind: str, record: dict[str, Any]) -> str:
    return record[ID_FIELDS[kind]]


class EntityStore:
    def __init__(self):
        self._records: dict[str, dict[str, dict[str, Any]]] = defaultdict(dict)
        self._listeners: dict[tuple[str, Optional[str]], list[Listener]] = defaultdict(list)

    def get(self, kind: str, rid: str) -> Optional[dict[str, Any]]:
        return self._records[kind].get(rid)

    def all(self, kind: str) -> list[dict[str, Any]]:
        return list(self._records[kind].values())

    def put(self, kind: str, rid: str, record: dict[str, Any]) -> None:
        self._records[kind][rid] = copy.deepcopy(record)
        self._notify(kind, rid, self._records[kind][rid])

    def put_many(self, kind: str, records: list[dict[str, Any]]) -> list[str]:
        """Store fetched records; returns their ids in the order given."""
        ids = []
        for record in records:
            rid = record_id(kind, record)
            self.put(kind, rid, record)
            ids.append(rid)
        return ids

    def discard(self, kind: str, rid: str) -> None:
        if self._records[kind].pop(rid, None) is not None:
            self._notify(kind, rid, None)

    def subscribe(self, kind: str, listener: Listener, rid: Optional[str] = None) -> Callable[[], None]:
        """Call ``listener(kind, id, record)`` on every change; returns an unsubscribe function.

        With ``rid`` the listener only hears about that record, otherwise
        about every record of ``kind``. ``record`` is ``None`` on discard.
        """
        key = (kind, rid)
        self._listeners[key].append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners[key]:
                self._listeners[key].remove(listener)

        return unsubscribe

    def _notify(self, kind: str, rid: str, record: Optional[dict[str, Any]]) -> None:
        for listener in [*self._listeners[(kind, rid)], *self._listeners[(kind, None)]]:
            listener(kind, rid, record)
