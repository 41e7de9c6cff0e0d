"""Relay agent service - wires the components and dispatches events"""

import asyncio
import logging
from typing import Any, Callable, List, Optional, Set, Union

from followup_relay.config import CONFIRMATION_CLOSE_MS
from followup_relay.features.relay.broadcaster import ClientBroadcaster
from followup_relay.features.relay.domain import ClientInfo, DisplayedNotification, InteractionEvent
from followup_relay.features.relay.effects import Effect, ShowNotification
from followup_relay.features.relay.events import EventKind, EventRegistry, ExtendableEvent
from followup_relay.features.relay.exceptions import (
    HostSurfaceError,
    MalformedPushPayloadError,
    NotificationNotFoundError,
)
from followup_relay.features.relay.executor import EffectExecutor
from followup_relay.features.relay.host import HostSurface
from followup_relay.features.relay.lifecycle import LifecycleManager
from followup_relay.features.relay.parser import PushPayloadParser
from followup_relay.features.relay.presenter import NotificationPresenter
from followup_relay.features.relay.router import ActionRouter
from followup_relay.features.relay.timers import Sleep
from followup_relay.features.relay.window_resolver import WindowFocusResolver

logger = logging.getLogger(__name__)


class RelayAgentService:
    """
    The background relay agent.

    Events are dispatched to the handler registered for their kind. Handlers
    are pure: they return effects, which the executor then performs against
    the host surface.
    """

    def __init__(
        self,
        host: HostSurface,
        confirmation_close_ms: int = CONFIRMATION_CLOSE_MS,
        sleep: Sleep = asyncio.sleep,
        window_order_key: Optional[Callable[[ClientInfo], Any]] = None,
    ):
        self.host = host
        self.parser = PushPayloadParser()
        self.presenter = NotificationPresenter(host)
        self.broadcaster = ClientBroadcaster(host)
        self.window_resolver = WindowFocusResolver(host, order_key=window_order_key)
        self.router = ActionRouter(confirmation_close_ms)
        self.lifecycle = LifecycleManager()
        self.executor = EffectExecutor(
            host, self.presenter, self.broadcaster, self.window_resolver, sleep=sleep
        )

        self.registry = EventRegistry()
        self.registry.register(EventKind.INSTALL, self.lifecycle.on_install)
        self.registry.register(EventKind.ACTIVATE, self.lifecycle.on_activate)
        self.registry.register(EventKind.PUSH, self.on_push)
        self.registry.register(EventKind.NOTIFICATION_CLICK, self.router.route)

        self._inflight: Set[asyncio.Task] = set()

    def on_push(self, raw: Optional[Union[bytes, str]], host: Optional[HostSurface] = None) -> List[Effect]:
        """Push handler: show the decoded notification, or nothing"""
        try:
            request = self.parser.parse(raw)
        except MalformedPushPayloadError as e:
            logger.warning(f"Dropping malformed push payload: {e}")
            return []

        if request is None:
            logger.info("Push received without data, nothing to show")
            return []
        return [ShowNotification(request=request)]

    async def dispatch(self, kind: EventKind, payload: Any = None, settle: bool = True) -> ExtendableEvent:
        """
        Handle one event.

        Args:
            kind: Event kind
            payload: Event payload handed to the handler
            settle: Wait for all work anchored to the event before
                returning. When False, the remaining work keeps running
                and is tracked until drain().

        Returns:
            The handled event, with the effects that were performed
        """
        event = ExtendableEvent(kind, payload)
        handler = self.registry.get_handler(kind)
        if handler is None:
            logger.warning(f"No handler registered for event: {kind.value}")
            return event

        try:
            event.effects = handler(payload, self.host)
        except Exception as e:
            logger.error(f"Handler failed for {kind.value} event: {e}")
            return event

        await self.executor.execute(event, event.effects)

        if settle:
            await event.settle()
        elif event.pending:
            task = asyncio.ensure_future(event.settle())
            self._inflight.add(task)
            task.add_done_callback(self._inflight.discard)
        return event

    async def start(self) -> None:
        """Run install, then activate once installation allows it"""
        await self.dispatch(EventKind.INSTALL)
        if not await self.host.complete_install():
            logger.info("Relay agent installed and waiting for existing instances")
            return
        await self.dispatch(EventKind.ACTIVATE)
        await self.host.complete_activation()
        logger.info("Relay agent active")

    async def handle_push(self, raw: Optional[Union[bytes, str]], settle: bool = True) -> ExtendableEvent:
        return await self.dispatch(EventKind.PUSH, raw, settle=settle)

    async def _find_notification(self, notification_id: str) -> DisplayedNotification:
        try:
            notifications = await self.host.get_notifications()
        except Exception as e:
            logger.error(f"Failed to list notifications while looking up {notification_id}: {e}")
            raise HostSurfaceError(f"Notifications unavailable: {e}") from e

        notification = next((n for n in notifications if n.id == notification_id), None)
        if notification is None:
            raise NotificationNotFoundError(f"Notification {notification_id} not found")
        return notification

    async def handle_click(
        self,
        notification_id: str,
        action_id: Optional[str] = None,
        settle: bool = True,
    ) -> ExtendableEvent:
        """
        Handle a click on a visible notification or one of its actions.

        Raises:
            NotificationNotFoundError: If no visible notification has this id
            HostSurfaceError: If the visible notifications can't be listed
        """
        notification = await self._find_notification(notification_id)
        event = InteractionEvent.for_notification(notification, action_id=action_id)
        return await self.dispatch(EventKind.NOTIFICATION_CLICK, event, settle=settle)

    async def dismiss(self, notification_id: str) -> None:
        """User closed a notification without interacting with it"""
        await self._find_notification(notification_id)
        await self.presenter.close(notification_id)

    async def drain(self) -> None:
        """Wait for every event still settling in the background"""
        if self._inflight:
            logger.info(f"Waiting for {len(self._inflight)} in-flight event(s)")
            await asyncio.gather(*list(self._inflight), return_exceptions=True)


_relay_agent: Optional[RelayAgentService] = None


def get_relay_agent() -> RelayAgentService:
    """Get or create the relay agent singleton"""
    global _relay_agent

    if _relay_agent is None:
        from followup_relay.infra.host import get_host_surface

        _relay_agent = RelayAgentService(get_host_surface())

    return _relay_agent


def reset_relay_agent():
    """Reset the relay agent singleton (useful for testing)"""
    global _relay_agent
    _relay_agent = None
