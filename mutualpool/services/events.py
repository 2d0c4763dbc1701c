from typing import Any, List, Optional

from mutualpool.core.logging import get_logger
from mutualpool.models.enums import EventType
from mutualpool.models.events import LedgerEvent
from mutualpool.storage.base import JSONFile

logger = get_logger(__name__)


class EventLog:
    """Append-only event log. Emitted events stay pending until commit."""

    def __init__(self, data_dir: Optional[str] = None):
        self._file = JSONFile(data_dir, "events.json")
        self._events: List[LedgerEvent] = [
            LedgerEvent(**e) for e in self._file.load(default=[])
        ]
        self._pending: List[LedgerEvent] = []

    def emit(self, event_type: EventType, timestamp: int, actor: str, **data: Any) -> LedgerEvent:
        event = LedgerEvent(
            sequence=len(self._events) + len(self._pending) + 1,
            event_type=event_type,
            timestamp=timestamp,
            actor=actor,
            data=data
        )
        self._pending.append(event)
        return event

    def begin(self):
        self._pending = []

    def flush(self):
        """Write committed and pending events. The file is the log of record."""
        if not self._pending:
            return
        self._save(self._events + self._pending)

    def persist(self):
        """Rewrite the file with committed events only."""
        self._save(self._events)

    def commit(self):
        if not self._pending:
            return
        self._events = self._events + self._pending
        for event in self._pending:
            logger.info(f"Event {event.event_type.value}", sequence=event.sequence, **event.data)
        self._pending = []

    def rollback(self):
        if self._pending:
            logger.debug(f"Discarding {len(self._pending)} unpublished events")
        self._pending = []

    def _save(self, events: List[LedgerEvent]):
        self._file.save([e.model_dump(mode='json') for e in events])

    def list_events(self, event_type: Optional[EventType] = None, skip: int = 0, limit: int = 100) -> List[LedgerEvent]:
        events = self._events
        if event_type:
            events = [e for e in events if e.event_type == event_type]
        return events[skip:skip + limit]

    def count(self) -> int:
        return len(self._events)
