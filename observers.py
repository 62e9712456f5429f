"""
Observers that get notified when the telephone dials a number.

An observer subscribes to built-in notification types ("simple", "detailed")
and may register custom handlers keyed by event type. Handlers can be plain
functions or coroutine functions.
"""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Optional, Union

from settings import BUILTIN_NOTIFICATION_TYPES, DEFAULT_EVENT_TYPE, DETAILED, SIMPLE
from settings import logger as package_logger

NotificationHandler = Callable[[str], Union[None, Awaitable[None]]]


class NotificationError(Exception):
    """One or more of an observer's notification actions failed."""

    def __init__(self, observer_id: str, errors: list[BaseException]) -> None:
        self.observer_id = observer_id
        self.errors = list(errors)
        first = self.errors[0] if self.errors else None
        detail = str(first) if first is not None else "unknown error"
        if len(self.errors) > 1:
            detail += f" (+{len(self.errors) - 1} more)"
        super().__init__(detail)


class PhoneNumberObserver:
    def __init__(self, id: str, *types: str, logger: Optional[logging.Logger] = None) -> None:
        if not isinstance(id, str) or not id.strip():
            raise ValueError("Observer id must be a non-empty string.")
        self.id = id
        self.types: set[str] = set(types)
        self.custom_handlers: dict[str, NotificationHandler] = {}
        # Tags that exist only because a custom handler was registered for them.
        self._handler_only_tags: set[str] = set()
        self._log = logger or package_logger.getChild("observers")

    def __repr__(self) -> str:
        return f"PhoneNumberObserver(id={self.id!r}, types={sorted(self.types)!r})"

    def subscribes_to(self, tag: str) -> bool:
        return tag in self.types

    def add_custom_notification(self, event_type: str, handler: NotificationHandler) -> None:
        """Register (or replace) the handler for ``event_type`` and subscribe to it."""
        if not isinstance(event_type, str) or not event_type.strip():
            raise ValueError("event_type must be a non-empty string.")
        if not callable(handler):
            raise TypeError("handler must be callable.")
        if event_type not in self.types:
            self._handler_only_tags.add(event_type)
            self.types.add(event_type)
        self.custom_handlers[event_type] = handler

    def remove_custom_notification(self, event_type: str) -> bool:
        if self.custom_handlers.pop(event_type, None) is None:
            return False
        if event_type in self._handler_only_tags:
            self._handler_only_tags.discard(event_type)
            self.types.discard(event_type)
        return True

    async def notify(self, phone_number: str, event_type: str = DEFAULT_EVENT_TYPE) -> None:
        """
        Run every applicable notification action concurrently.

        Built-in actions fire for any ``event_type`` as long as their tag is
        subscribed; custom handlers only fire on an exact ``event_type`` match.

        Raises:
            NotificationError: after all actions finished, if any of them failed.
        """
        builtin = {SIMPLE: self._notify_simple, DETAILED: self._notify_detailed}
        actions: list[Callable[[str], Any]] = [
            builtin[tag] for tag in BUILTIN_NOTIFICATION_TYPES if tag in self.types
        ]
        handler = self.custom_handlers.get(event_type)
        if handler is not None:
            actions.append(handler)

        results = await asyncio.gather(
            *(_run_action(action, phone_number) for action in actions),
            return_exceptions=True,
        )
        errors = [r for r in results if isinstance(r, BaseException)]
        if errors:
            raise NotificationError(self.id, errors) from errors[0]

    def _notify_simple(self, phone_number: str) -> None:
        self._log.info("%s", phone_number)

    def _notify_detailed(self, phone_number: str) -> None:
        self._log.info("Now Dialing %s...", phone_number)


async def _run_action(action: Callable[[str], Any], phone_number: str) -> None:
    result = action(phone_number)
    if inspect.isawaitable(result):
        await result
