"""Tests for the in-process host surface."""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from followup_relay.features.relay.domain import AgentState, ClientType, NotificationRequest
from followup_relay.features.relay.exceptions import HostSurfaceError
from followup_relay.infra.host import (
    AgentHost,
    ClientRegistry,
    NotificationCenter,
    WindowLauncher,
    get_host_surface,
    reset_host_surface,
)


class _StubWebSocket:
    """Records JSON frames; optionally fails every send."""

    def __init__(self, fail: bool = False) -> None:
        self.sent: list[dict[str, Any]] = []
        self.fail = fail

    async def send_json(self, message: dict[str, Any]) -> None:
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(message)


def test_notification_center_replaces_by_tag() -> None:
    center = NotificationCenter()
    first = center.show(NotificationRequest(title="a", tag="t"))
    other = center.show(NotificationRequest(title="b", tag="u"))
    second = center.show(NotificationRequest(title="c", tag="t"))

    assert [n.id for n in center.find("t")] == [second.id]
    assert center.get(first.id) is None
    assert len(center) == 2

    assert center.close(other.id) is True
    assert center.close(other.id) is False


def test_notification_center_keeps_data() -> None:
    center = NotificationCenter()
    shown = center.show(
        NotificationRequest.model_validate(
            {"title": "a", "data": {"incidentId": "abc", "followUpIndex": 1, "extra": "x"}}
        )
    )

    assert shown.data.incident_id == "abc"
    assert shown.data.follow_up_index == 1
    assert shown.data.to_wire()["extra"] == "x"


def test_client_registry_match_order_and_filters() -> None:
    registry = ClientRegistry()
    registry.connect(_StubWebSocket(), "old", "https://app.example.com/", controlled=True)
    registry.connect(_StubWebSocket(), "new", "https://app.example.com/x", controlled=True)
    registry.connect(_StubWebSocket(), "fresh", "https://app.example.com/y")
    registry.connect(
        _StubWebSocket(), "worker", "https://app.example.com/w.js", client_type=ClientType.WORKER, controlled=True
    )

    assert [c.id for c in registry.match()] == ["new", "old"]
    assert [c.id for c in registry.match(include_uncontrolled=True)] == ["fresh", "new", "old"]
    assert [c.id for c in registry.match(client_type=None, include_uncontrolled=True)] == [
        "worker",
        "fresh",
        "new",
        "old",
    ]

    assert registry.claim_all() == 1
    assert [c.id for c in registry.match()] == ["fresh", "new", "old"]


@pytest.mark.asyncio
async def test_client_registry_send_and_focus() -> None:
    registry = ClientRegistry()
    socket = _StubWebSocket()
    registry.connect(socket, "tab", "https://app.example.com/")

    await registry.send("tab", {"type": "FOLLOWUP_QUICK_RESPONSE"})
    await registry.focus("tab")

    assert socket.sent == [{"type": "FOLLOWUP_QUICK_RESPONSE"}, {"type": "FOCUS"}]

    with pytest.raises(HostSurfaceError):
        await registry.send("missing", {})


@pytest.mark.asyncio
async def test_client_registry_drops_broken_connection() -> None:
    registry = ClientRegistry()
    registry.connect(_StubWebSocket(fail=True), "tab", "https://app.example.com/")

    with pytest.raises(HostSurfaceError):
        await registry.send("tab", {})
    assert len(registry) == 0


def test_stale_disconnect_keeps_replacement() -> None:
    registry = ClientRegistry()
    old, new = _StubWebSocket(), _StubWebSocket()
    registry.connect(old, "tab", "https://app.example.com/")
    registry.connect(new, "tab", "https://app.example.com/")

    registry.disconnect("tab", old)

    assert registry.active_connections["tab"] is new


@pytest.mark.asyncio
async def test_window_launcher_posts_to_window_manager() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"opened": True})

    launcher = WindowLauncher("http://wm.local/", transport=httpx.MockTransport(handler))
    await launcher.open("https://app.example.com/?followup=xyz&index=0")

    assert str(requests[0].url) == "http://wm.local/open"
    assert json.loads(requests[0].content) == {"url": "https://app.example.com/?followup=xyz&index=0"}


@pytest.mark.asyncio
async def test_window_launcher_errors() -> None:
    rejecting = WindowLauncher(
        "http://wm.local", transport=httpx.MockTransport(lambda request: httpx.Response(503, text="busy"))
    )
    with pytest.raises(HostSurfaceError):
        await rejecting.open("https://app.example.com/")

    unconfigured = WindowLauncher(None)
    assert unconfigured.available is False
    with pytest.raises(HostSurfaceError):
        await unconfigured.open("https://app.example.com/")


@pytest.mark.asyncio
async def test_agent_host_lifecycle() -> None:
    host = AgentHost("https://app.example.com/")
    host.clients.connect(_StubWebSocket(), "tab", "https://app.example.com/", controlled=True)

    assert host.origin == "https://app.example.com"
    assert host.can_open_windows is False
    assert host.controls_new_clients() is False

    assert await host.complete_install() is False
    assert host.lifecycle_state == AgentState.INSTALLED

    await host.skip_waiting()
    assert await host.complete_install() is True
    await host.complete_activation()
    assert host.lifecycle_state == AgentState.ACTIVATED
    assert host.controls_new_clients() is True


def test_host_surface_singleton() -> None:
    reset_host_surface()
    try:
        assert get_host_surface() is get_host_surface()
    finally:
        reset_host_surface()


@pytest.mark.asyncio
async def test_agent_host_connects_clients_controlled_once_active() -> None:
    host = AgentHost("https://app.example.com")
    early, late = _StubWebSocket(), _StubWebSocket()

    before = host.connect_client(early, "early", "https://app.example.com/")
    await host.complete_install()
    await host.complete_activation()
    after = host.connect_client(late, "late", "https://app.example.com/", client_type=ClientType.WINDOW)

    assert before.controlled is False
    assert after.controlled is True
    assert [c.id for c in await host.match_clients()] == ["late"]

    host.disconnect_client("early", _StubWebSocket())
    assert len(host.clients) == 2
    host.disconnect_client("early", early)
    assert [c.id for c in await host.match_clients(include_uncontrolled=True)] == ["late"]
