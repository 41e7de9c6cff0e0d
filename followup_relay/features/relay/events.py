"""Event kinds, keep-alive events and the handler registry."""
import asyncio
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional

from followup_relay.features.relay.effects import Effect
from followup_relay.features.relay.host import HostSurface

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    INSTALL = "install"
    ACTIVATE = "activate"
    PUSH = "push"
    NOTIFICATION_CLICK = "notificationclick"


# (event payload, host) -> effects to perform
EventHandler = Callable[[Any, HostSurface], List[Effect]]


class ExtendableEvent:
    """
    One event being handled.

    Asynchronous work started while handling the event is anchored with
    wait_until(); the event isn't finished until settle() has seen all of
    it complete, so nothing the handler started is dropped mid-flight.
    """

    def __init__(self, kind: EventKind, payload: Any = None):
        self.kind = kind
        self.payload = payload
        self.effects: List[Effect] = []
        self._pending: List[asyncio.Future] = []

    def wait_until(self, awaitable: Awaitable[Any]) -> asyncio.Future:
        future = asyncio.ensure_future(awaitable)
        self._pending.append(future)
        return future

    @property
    def pending(self) -> int:
        return sum(1 for future in self._pending if not future.done())

    async def settle(self) -> None:
        """Wait for all anchored work, including work anchored meanwhile"""
        while self._pending:
            batch, self._pending = self._pending, []
            results = await asyncio.gather(*batch, return_exceptions=True)
            for result in results:
                if isinstance(result, asyncio.CancelledError):
                    logger.debug(f"Anchored work cancelled for {self.kind.value} event")
                elif isinstance(result, BaseException):
                    logger.error(f"Anchored work failed for {self.kind.value} event: {result}")


class EventRegistry:
    """Manages registration and retrieval of event handlers."""

    def __init__(self):
        self._handlers: Dict[EventKind, EventHandler] = {}

    def register(self, kind: EventKind, handler: EventHandler):
        """Register the handler for an event kind (replaces any previous one)."""
        self._handlers[kind] = handler
        logger.info(f"Event handler registered: {kind.value}")

    def get_handler(self, kind: EventKind) -> Optional[EventHandler]:
        return self._handlers.get(kind)

    def has_handler(self, kind: EventKind) -> bool:
        return kind in self._handlers

    def get_event_kinds(self) -> List[EventKind]:
        return list(self._handlers.keys())
