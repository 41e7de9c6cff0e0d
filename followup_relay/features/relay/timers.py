"""Delayed close-by-tag used for self-expiring confirmations"""
import asyncio
import logging
from typing import Awaitable, Callable, Optional

from followup_relay.features.relay.presenter import NotificationPresenter

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class ScheduledClose:
    """
    Closes every notification carrying `tag` once `delay_ms` has passed.

    Cancelling is allowed but nothing in the relay needs to: closing by tag
    is idempotent, so a close after a manual dismiss is harmless.
    """

    def __init__(
        self,
        presenter: NotificationPresenter,
        tag: str,
        delay_ms: int,
        sleep: Sleep = asyncio.sleep,
    ):
        self.tag = tag
        self.delay_ms = delay_ms
        self._presenter = presenter
        self._sleep = sleep
        self._task: Optional[asyncio.Task] = None

    def start(self) -> asyncio.Task:
        if self._task is None:
            self._task = asyncio.ensure_future(self._run())
        return self._task

    def cancel(self) -> bool:
        if self._task is None or self._task.done():
            return False
        return self._task.cancel()

    @property
    def done(self) -> bool:
        return self._task is not None and self._task.done()

    async def _run(self) -> None:
        await self._sleep(self.delay_ms / 1000)
        closed = await self._presenter.close_by_tag(self.tag)
        logger.debug(f"Auto-close fired for tag {self.tag}: closed={closed}")
