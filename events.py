"""
The telephone records an event every time its state changes, in a bounded
history that can be filtered by type and time window.
"""

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Deque, Iterator, Optional

from settings import DEFAULT_MAX_HISTORY_SIZE


class EventKind(str, Enum):
    ADD = "add"
    REMOVE = "remove"
    DIAL = "dial"
    OBSERVER_ADDED = "observerAdded"
    OBSERVER_REMOVED = "observerRemoved"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_aware(moment: datetime) -> datetime:
    """Naive datetimes are taken as local time and converted to UTC."""
    if moment.tzinfo is None:
        return moment.astimezone(timezone.utc)
    return moment


@dataclass(frozen=True)
class PhoneEvent:
    """A single history entry.

    For observer lifecycle events ``phone_number`` holds the observer id.
    """
    type: EventKind
    phone_number: str
    timestamp: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        object.__setattr__(self, "timestamp", as_aware(self.timestamp))


@dataclass(frozen=True)
class EventFilter:
    """Criteria for EventLog.query; ``None`` fields impose no constraint."""
    event_type: Optional[EventKind] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    def __post_init__(self) -> None:
        # Stored timestamps are aware, so the bounds must be too.
        if self.start_date is not None:
            object.__setattr__(self, "start_date", as_aware(self.start_date))
        if self.end_date is not None:
            object.__setattr__(self, "end_date", as_aware(self.end_date))

    def matches(self, event: PhoneEvent) -> bool:
        if self.event_type is not None and event.type != self.event_type:
            return False
        # Both bounds are inclusive.
        if self.start_date is not None and event.timestamp < self.start_date:
            return False
        if self.end_date is not None and event.timestamp > self.end_date:
            return False
        return True


class EventLog:
    """Append-only history that evicts its oldest entry once full."""

    def __init__(self, max_size: int = DEFAULT_MAX_HISTORY_SIZE) -> None:
        if not isinstance(max_size, int) or isinstance(max_size, bool) or max_size < 1:
            raise ValueError("max_size must be an integer >= 1.")
        self._max_size = max_size
        self._events: Deque[PhoneEvent] = deque(maxlen=max_size)

    @property
    def max_size(self) -> int:
        return self._max_size

    def append(self, event: PhoneEvent) -> None:
        # deque(maxlen=...) drops from the left when full.
        self._events.append(event)

    def query(self, event_filter: Optional[EventFilter] = None) -> list[PhoneEvent]:
        """Return matching events, oldest first, as a new list."""
        if event_filter is None:
            return list(self._events)
        return [e for e in self._events if event_filter.matches(e)]

    def clear(self) -> None:
        self._events.clear()

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[PhoneEvent]:
        return iter(list(self._events))
