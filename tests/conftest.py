"""tests/conftest.py: Fake host surface and simulated clock shared by the relay tests."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from followup_relay.features.relay.domain import (
    AgentState,
    ClientInfo,
    ClientType,
    DisplayedNotification,
    NotificationRequest,
)
from followup_relay.features.relay.exceptions import HostSurfaceError
from followup_relay.infra.host.notification_center import NotificationCenter

ORIGIN = "https://app.example.com"


class FakeHost:
    """Host surface double that records every call."""

    def __init__(self, origin: str = ORIGIN, can_open_windows: bool = True) -> None:
        self.origin = origin
        self.can_open_windows = can_open_windows
        self.lifecycle_state = AgentState.INSTALLING
        self.notifications = NotificationCenter()
        self.clients: list[ClientInfo] = []

        self.posted: list[tuple[str, dict[str, Any]]] = []
        self.focused: list[str] = []
        self.opened: list[str] = []
        self.closed: list[str] = []
        self.match_calls: list[tuple[ClientType | None, bool]] = []
        self.skip_waiting_calls = 0
        self.claim_calls = 0

        self.failing_clients: set[str] = set()
        self.fail_show = False
        self.fail_enumeration = False
        self.fail_open = False
        self.fail_close = False
        self.fail_list = False
        self.hold_install = False

    def add_client(
        self,
        client_id: str,
        path: str = "/",
        client_type: ClientType = ClientType.WINDOW,
        controlled: bool = True,
        origin: str | None = None,
    ) -> ClientInfo:
        info = ClientInfo(
            id=client_id,
            url=f"{origin or self.origin}{path}",
            type=client_type,
            controlled=controlled,
        )
        self.clients.append(info)
        return info

    async def show_notification(self, request: NotificationRequest) -> DisplayedNotification:
        if self.fail_show:
            raise HostSurfaceError("show failed")
        return self.notifications.show(request)

    async def get_notifications(self, tag: str | None = None) -> list[DisplayedNotification]:
        if self.fail_list:
            raise HostSurfaceError("listing failed")
        return self.notifications.find(tag)

    async def close_notification(self, notification_id: str) -> None:
        if self.fail_close:
            raise HostSurfaceError("close failed")
        self.closed.append(notification_id)
        self.notifications.close(notification_id)

    async def match_clients(
        self,
        client_type: ClientType | None = ClientType.WINDOW,
        include_uncontrolled: bool = False,
    ) -> list[ClientInfo]:
        self.match_calls.append((client_type, include_uncontrolled))
        if self.fail_enumeration:
            raise HostSurfaceError("enumeration failed")
        return [
            client
            for client in self.clients
            if (client_type is None or client.type == client_type)
            and (include_uncontrolled or client.controlled)
        ]

    async def post_message(self, client_id: str, message: dict[str, Any]) -> None:
        if client_id in self.failing_clients:
            raise HostSurfaceError(f"client {client_id} gone")
        self.posted.append((client_id, message))

    async def focus_client(self, client_id: str) -> None:
        self.focused.append(client_id)

    async def open_window(self, url: str) -> None:
        if self.fail_open:
            raise HostSurfaceError("open failed")
        self.opened.append(url)

    async def skip_waiting(self) -> None:
        self.skip_waiting_calls += 1

    async def claim_clients(self) -> None:
        self.claim_calls += 1
        for client in self.clients:
            client.controlled = True

    def controls_new_clients(self) -> bool:
        return self.lifecycle_state == AgentState.ACTIVATED

    def connect_client(
        self,
        connection: Any,
        client_id: str,
        url: str,
        client_type: ClientType = ClientType.WINDOW,
    ) -> ClientInfo:
        self.clients = [client for client in self.clients if client.id != client_id]
        info = ClientInfo(id=client_id, url=url, type=client_type, controlled=self.controls_new_clients())
        self.clients.insert(0, info)
        return info

    def disconnect_client(self, client_id: str, connection: Any = None) -> None:
        self.clients = [client for client in self.clients if client.id != client_id]

    async def complete_install(self) -> bool:
        if self.hold_install:
            self.lifecycle_state = AgentState.INSTALLED
            return False
        self.lifecycle_state = AgentState.ACTIVATING
        return True

    async def complete_activation(self) -> None:
        self.lifecycle_state = AgentState.ACTIVATED


class FakeClock:
    """Simulated clock: sleeps are recorded and held until advance()."""

    def __init__(self) -> None:
        self.delays: list[float] = []
        self._released = asyncio.Event()

    async def sleep(self, seconds: float) -> None:
        self.delays.append(seconds)
        await self._released.wait()

    def advance(self) -> None:
        self._released.set()


async def instant_sleep(seconds: float) -> None:
    return None


@pytest.fixture
def host() -> FakeHost:
    return FakeHost()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
