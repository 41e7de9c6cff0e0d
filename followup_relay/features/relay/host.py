"""Host surface capability consumed by the relay components"""

from typing import Any, Dict, List, Optional, Protocol

from followup_relay.features.relay.domain import (
    AgentState,
    ClientInfo,
    ClientType,
    DisplayedNotification,
    NotificationRequest,
)


class HostSurface(Protocol):
    """
    Everything the relay needs from its host: the notification surface,
    live application instances, window management and agent lifecycle.

    Every call may suspend. Implementations raise on failure; callers on
    the interaction path catch and log.
    """

    @property
    def origin(self) -> str:
        """Origin shared by the agent and its application instances"""

    @property
    def can_open_windows(self) -> bool:
        """False when the host has no way to open a new window"""

    @property
    def lifecycle_state(self) -> AgentState:
        ...

    async def show_notification(self, request: NotificationRequest) -> DisplayedNotification:
        """Display a notification, replacing any visible one with the same tag"""

    async def get_notifications(self, tag: Optional[str] = None) -> List[DisplayedNotification]:
        """Visible notifications, optionally only those with an exact tag"""

    async def close_notification(self, notification_id: str) -> None:
        """Close one notification; closing an unknown id is a no-op"""

    async def match_clients(
        self,
        client_type: Optional[ClientType] = ClientType.WINDOW,
        include_uncontrolled: bool = False,
    ) -> List[ClientInfo]:
        """Live instances of this origin in host order (None = every type)"""

    async def post_message(self, client_id: str, message: Dict[str, Any]) -> None:
        ...

    async def focus_client(self, client_id: str) -> None:
        ...

    async def open_window(self, url: str) -> None:
        ...

    async def skip_waiting(self) -> None:
        """Activate as soon as installation finishes"""

    async def claim_clients(self) -> None:
        """Take control of every existing instance of this origin"""

    async def complete_install(self) -> bool:
        """Finish installation; True when activation may proceed now"""

    async def complete_activation(self) -> None:
        ...

    def controls_new_clients(self) -> bool:
        """Instances connecting now start out controlled"""

    def connect_client(
        self,
        connection: Any,
        client_id: str,
        url: str,
        client_type: ClientType = ClientType.WINDOW,
    ) -> ClientInfo:
        """Register a live instance reachable over the given connection"""

    def disconnect_client(self, client_id: str, connection: Any = None) -> None:
        """Forget an instance; a stale connection leaves its replacement alone"""
