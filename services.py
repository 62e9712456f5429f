"""
Service layer
"""

import asyncio
import logging
from datetime import datetime
from typing import Callable, Optional

from events import EventFilter, EventKind, EventLog, PhoneEvent, utc_now
from observers import NotificationError, PhoneNumberObserver
from phone_number import PhoneNumberError, validate_phone_number
from settings import DEFAULT_MAX_HISTORY_SIZE
from settings import logger as package_logger


class Telephone:
    def __init__(
        self,
        max_history_size: int = DEFAULT_MAX_HISTORY_SIZE,
        *,
        clock: Optional[Callable[[], datetime]] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        # Telephone owns the number set and history and coordinates observer fan-out.
        self._phone_numbers: set[str] = set()
        self._observers: set[PhoneNumberObserver] = set()
        self._history = EventLog(max_history_size)
        self._clock = clock or utc_now
        self._log = logger or package_logger.getChild("telephone")

    @property
    def max_history_size(self) -> int:
        return self._history.max_size

    @property
    def phone_numbers(self) -> frozenset[str]:
        return frozenset(self._phone_numbers)

    @property
    def observers(self) -> frozenset[PhoneNumberObserver]:
        return frozenset(self._observers)

    def _record(self, kind: EventKind, subject: str) -> None:
        self._history.append(PhoneEvent(kind, subject, self._clock()))

    def has_phone_number(self, phone_number: str) -> bool:
        return validate_phone_number(phone_number) in self._phone_numbers

    def add_phone_number(self, phone_number: str) -> str:
        """Validates, stores and records a number; returns the normalized form."""
        try:
            normalized = validate_phone_number(phone_number)
        except PhoneNumberError as e:
            self._log.error("Failed to add phone number: %s", e)
            raise

        # Re-adding a known number is a no-op for the set but still recorded.
        self._phone_numbers.add(normalized)
        self._record(EventKind.ADD, normalized)
        self._log.info("Phone number %s added.", normalized)
        return normalized

    def remove_phone_number(self, phone_number: str) -> bool:
        try:
            normalized = validate_phone_number(phone_number)
        except PhoneNumberError as e:
            self._log.error("Failed to remove phone number: %s", e)
            raise

        if normalized not in self._phone_numbers:
            self._log.info("Phone number %s was not found.", normalized)
            return False

        self._phone_numbers.remove(normalized)
        self._record(EventKind.REMOVE, normalized)
        self._log.info("Phone number %s removed.", normalized)
        return True

    async def dial_phone_number(self, phone_number: str) -> bool:
        """
        Dial a known number and wait until every observer has been notified.

        Returns False (and records nothing) when the number is unknown.
        Observer failures are logged by notify_observers and do not affect
        the result.
        """
        try:
            normalized = validate_phone_number(phone_number)
        except PhoneNumberError as e:
            self._log.error("Failed to dial number: %s", e)
            raise

        if normalized not in self._phone_numbers:
            self._log.info("Phone number %s not found. Please add the number first.", normalized)
            return False

        self._log.info("Dialing %s...", normalized)
        self._record(EventKind.DIAL, normalized)
        await self.notify_observers(normalized)
        return True

    def add_observer(self, observer: PhoneNumberObserver) -> None:
        self._observers.add(observer)
        self._record(EventKind.OBSERVER_ADDED, observer.id)
        self._log.info("Observer %s added.", observer.id)

    def remove_observer(self, observer: PhoneNumberObserver) -> bool:
        if observer not in self._observers:
            self._log.info("Observer %s not found.", observer.id)
            return False

        self._observers.remove(observer)
        self._record(EventKind.OBSERVER_REMOVED, observer.id)
        self._log.info("Observer %s removed.", observer.id)
        return True

    async def notify_observers(self, phone_number: str) -> list[NotificationError]:
        """Notify all observers concurrently; returns the failures, one per failed observer."""
        # Snapshot so observers added/removed by a handler don't affect this round.
        observers = list(self._observers)
        results = await asyncio.gather(
            *(observer.notify(phone_number) for observer in observers),
            return_exceptions=True,
        )

        failures: list[NotificationError] = []
        for observer, result in zip(observers, results):
            if not isinstance(result, BaseException):
                continue
            error = result if isinstance(result, NotificationError) else NotificationError(observer.id, [result])
            self._log.error("Failed to notify observer %s: %s", observer.id, error)
            failures.append(error)
        return failures

    def get_event_history(self, event_filter: Optional[EventFilter] = None) -> list[PhoneEvent]:
        return self._history.query(event_filter)
