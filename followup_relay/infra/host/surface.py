"""Agent host surface and its process-wide singleton"""
import logging
from typing import Any, Dict, List, Optional

from followup_relay.config import RELAY_ORIGIN, WINDOW_MANAGER_TIMEOUT, WINDOW_MANAGER_URL
from followup_relay.features.relay.domain import (
    AgentState,
    ClientInfo,
    ClientType,
    DisplayedNotification,
    NotificationRequest,
)
from followup_relay.infra.host.client_registry import ClientRegistry
from followup_relay.infra.host.notification_center import NotificationCenter
from followup_relay.infra.host.window_launcher import WindowLauncher

logger = logging.getLogger(__name__)


class AgentHost:
    """
    Host surface backed by in-process notification state, WebSocket
    clients and an HTTP window manager.
    """

    def __init__(
        self,
        origin: str,
        notifications: Optional[NotificationCenter] = None,
        clients: Optional[ClientRegistry] = None,
        windows: Optional[WindowLauncher] = None,
    ):
        self._origin = origin.rstrip("/")
        self.notifications = notifications or NotificationCenter()
        self.clients = clients or ClientRegistry()
        self.windows = windows or WindowLauncher(None)
        self._state = AgentState.INSTALLING
        self._skip_waiting = False

    @property
    def origin(self) -> str:
        return self._origin

    @property
    def can_open_windows(self) -> bool:
        return self.windows.available

    @property
    def lifecycle_state(self) -> AgentState:
        return self._state

    # Notifications

    async def show_notification(self, request: NotificationRequest) -> DisplayedNotification:
        return self.notifications.show(request)

    async def get_notifications(self, tag: Optional[str] = None) -> List[DisplayedNotification]:
        return self.notifications.find(tag)

    async def close_notification(self, notification_id: str) -> None:
        self.notifications.close(notification_id)

    # Clients and windows

    async def match_clients(
        self,
        client_type: Optional[ClientType] = ClientType.WINDOW,
        include_uncontrolled: bool = False,
    ) -> List[ClientInfo]:
        return self.clients.match(client_type, include_uncontrolled)

    async def post_message(self, client_id: str, message: Dict[str, Any]) -> None:
        await self.clients.send(client_id, message)

    async def focus_client(self, client_id: str) -> None:
        await self.clients.focus(client_id)

    async def open_window(self, url: str) -> None:
        await self.windows.open(url)

    def connect_client(
        self,
        connection: Any,
        client_id: str,
        url: str,
        client_type: ClientType = ClientType.WINDOW,
    ) -> ClientInfo:
        return self.clients.connect(
            connection,
            client_id,
            url,
            client_type=client_type,
            controlled=self.controls_new_clients(),
        )

    def disconnect_client(self, client_id: str, connection: Any = None) -> None:
        self.clients.disconnect(client_id, connection)

    # Lifecycle

    def controls_new_clients(self) -> bool:
        """Instances connecting now start out controlled"""
        return self._state == AgentState.ACTIVATED

    async def skip_waiting(self) -> None:
        self._skip_waiting = True
        logger.info("Skip waiting requested")

    async def claim_clients(self) -> None:
        self.clients.claim_all()

    async def complete_install(self) -> bool:
        if self._skip_waiting or not self.clients.match(include_uncontrolled=False):
            self._state = AgentState.ACTIVATING
            return True
        self._state = AgentState.INSTALLED
        return False

    async def complete_activation(self) -> None:
        self._state = AgentState.ACTIVATED


_host_surface: Optional[AgentHost] = None


def get_host_surface() -> AgentHost:
    """Get or create the host surface singleton"""
    global _host_surface

    if _host_surface is None:
        _host_surface = AgentHost(
            RELAY_ORIGIN,
            windows=WindowLauncher(WINDOW_MANAGER_URL, timeout=WINDOW_MANAGER_TIMEOUT),
        )

    return _host_surface


def reset_host_surface():
    """Reset the host surface singleton (useful for testing)"""
    global _host_surface
    _host_surface = None
