"""Effect Executor - carries out handler effects against the host surface."""
import asyncio
import logging
from typing import List

from followup_relay.features.relay.broadcaster import ClientBroadcaster
from followup_relay.features.relay.effects import (
    ClaimClients,
    CloseNotification,
    CloseNotificationsByTag,
    Effect,
    FocusOrOpenWindow,
    RelayQuickResponse,
    ScheduleClose,
    ShowNotification,
    SkipWaiting,
)
from followup_relay.features.relay.events import ExtendableEvent
from followup_relay.features.relay.host import HostSurface
from followup_relay.features.relay.presenter import NotificationPresenter
from followup_relay.features.relay.timers import ScheduledClose, Sleep
from followup_relay.features.relay.window_resolver import WindowFocusResolver

logger = logging.getLogger(__name__)


class EffectExecutor:
    """
    Runs effects in order. Effects whose completion the next step must not
    wait on (relay fan-out, window focus/open, the auto-close timer) are
    started and anchored to the event instead of awaited.
    """

    def __init__(
        self,
        host: HostSurface,
        presenter: NotificationPresenter,
        broadcaster: ClientBroadcaster,
        window_resolver: WindowFocusResolver,
        sleep: Sleep = asyncio.sleep,
    ):
        self._host = host
        self._presenter = presenter
        self._broadcaster = broadcaster
        self._window_resolver = window_resolver
        self._sleep = sleep

    async def execute(self, event: ExtendableEvent, effects: List[Effect]) -> None:
        for effect in effects:
            try:
                await self._apply(event, effect)
            except Exception as e:
                logger.error(f"Effect failed: {effect.kind}, event={event.kind.value}, error={e}")

    async def _apply(self, event: ExtendableEvent, effect: Effect) -> None:
        if isinstance(effect, CloseNotification):
            await self._presenter.close(effect.notification_id)
        elif isinstance(effect, CloseNotificationsByTag):
            await self._presenter.close_by_tag(effect.tag)
        elif isinstance(effect, ShowNotification):
            await self._presenter.show(effect.request)
        elif isinstance(effect, RelayQuickResponse):
            event.wait_until(self._broadcaster.relay(effect.response))
        elif isinstance(effect, ScheduleClose):
            timer = ScheduledClose(self._presenter, effect.tag, effect.delay_ms, sleep=self._sleep)
            event.wait_until(timer.start())
        elif isinstance(effect, FocusOrOpenWindow):
            event.wait_until(self._window_resolver.focus_or_open(effect.data))
        elif isinstance(effect, SkipWaiting):
            await self._host.skip_waiting()
        elif isinstance(effect, ClaimClients):
            event.wait_until(self._host.claim_clients())
        else:
            logger.warning(f"No executor for effect: {effect.kind}")
