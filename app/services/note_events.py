"""
Note change feed.

NoteEventBroker fans note insert/delete events out to the live dashboard
connections of the note's owner. It is process-local: every subscriber is
an asyncio.Queue bound to the event loop of the websocket that created it,
so publishing is safe from any thread. A subscriber that falls more than
MAX_PENDING_EVENTS behind is marked overflowed and dropped; its socket is
closed so the client reconnects and starts again from a fresh snapshot.

NoteFeed is the merge side of one connection: it starts from the notes
loaded when the socket opened and applies broker events on top, dropping
an insert for an id it already holds and a delete for an id it never saw.
"""
import asyncio
import logging
import threading
from collections import defaultdict
from datetime import datetime
from typing import Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)

INSERT = "insert"
DELETE = "delete"
SNAPSHOT = "snapshot"

MAX_PENDING_EVENTS = 100


class Subscription:
    def __init__(self, user_id: int, loop: asyncio.AbstractEventLoop, maxsize: int = MAX_PENDING_EVENTS):
        self.user_id = user_id
        self.loop = loop
        self.queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self.overflowed = False

    def push(self, event: dict):
        self.loop.call_soon_threadsafe(self._deliver, event)

    def _deliver(self, event: dict):
        if self.overflowed:
            return
        try:
            self.queue.put_nowait(event)
        except asyncio.QueueFull:
            self.overflowed = True
            logger.warning("Note feed for user %s fell behind; dropping subscriber", self.user_id)

    async def get(self) -> dict:
        return await self.queue.get()


class NoteEventBroker:
    """Per-user publish/subscribe for note change events."""

    def __init__(self):
        self._subscribers: Dict[int, List[Subscription]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, user_id: int, maxsize: int = MAX_PENDING_EVENTS) -> Subscription:
        subscription = Subscription(user_id, asyncio.get_running_loop(), maxsize)
        with self._lock:
            self._subscribers[user_id].append(subscription)
        logger.debug("Note feed subscriber added for user %s", user_id)
        return subscription

    def unsubscribe(self, subscription: Subscription):
        with self._lock:
            subscribers = self._subscribers.get(subscription.user_id, [])
            if subscription in subscribers:
                subscribers.remove(subscription)
            if not subscribers:
                self._subscribers.pop(subscription.user_id, None)

    def subscriber_count(self, user_id: int) -> int:
        with self._lock:
            return len(self._subscribers.get(user_id, []))

    def publish(self, user_id: int, event: str, note: dict):
        """Deliver an event to the owner's subscribers only."""
        with self._lock:
            subscribers = list(self._subscribers.get(user_id, []))
        message = {"event": event, "note": note}
        for subscription in subscribers:
            if subscription.overflowed:
                self.unsubscribe(subscription)
                continue
            try:
                subscription.push(message)
            except RuntimeError:
                # Loop already closed; the websocket is gone
                self.unsubscribe(subscription)

    def publish_inserted(self, note):
        self.publish(note.user_id, INSERT, note.to_dict())

    def publish_deleted(self, user_id: int, note_ids: Iterable[int]):
        for note_id in note_ids:
            self.publish(user_id, DELETE, {"id": note_id})


# Global broker instance
broker = NoteEventBroker()


def _sort_key(note: dict):
    created_at = note.get("created_at")
    if isinstance(created_at, str):
        created_at = datetime.fromisoformat(created_at)
    return (created_at or datetime.min, note.get("id") or 0)


class NoteFeed:
    """Ordered set of notes keyed by id, fed by a loaded snapshot and change events."""

    def __init__(self, notes: Optional[Iterable[dict]] = None):
        self._notes: Dict[int, dict] = {}
        for note in notes or []:
            self.add(note)

    def add(self, note: dict) -> bool:
        """Add a note; returns False if that id is already present."""
        if note["id"] in self._notes:
            return False
        self._notes[note["id"]] = note
        return True

    def remove(self, note_id) -> bool:
        return self._notes.pop(note_id, None) is not None

    def clear(self):
        self._notes.clear()

    def apply(self, message: dict) -> bool:
        """Apply a broker message; returns True if it should be forwarded."""
        event = message.get("event")
        note = message.get("note") or {}
        if event == INSERT:
            return self.add(note)
        if event == DELETE:
            return self.remove(note.get("id"))
        logger.warning("Ignoring unknown note event %r", event)
        return False

    @property
    def notes(self) -> List[dict]:
        return sorted(self._notes.values(), key=_sort_key)

    def __len__(self):
        return len(self._notes)

    def __contains__(self, note_id):
        return note_id in self._notes
