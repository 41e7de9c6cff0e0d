"""Live application instances connected over WebSockets"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import WebSocket

from followup_relay.features.relay.domain import ClientInfo, ClientType
from followup_relay.features.relay.exceptions import HostSurfaceError

logger = logging.getLogger(__name__)

FOCUS_MESSAGE = {"type": "FOCUS"}


class ClientRegistry:
    """
    Tracks live application instances and delivers messages to them.

    Clients are kept in connection order, most recent last; enumeration
    returns the most recently connected first.
    """

    def __init__(self):
        self.active_connections: Dict[str, WebSocket] = {}
        self.clients: Dict[str, ClientInfo] = {}
        self.connected_at: Dict[str, datetime] = {}

    def connect(
        self,
        websocket: WebSocket,
        client_id: str,
        url: str,
        client_type: ClientType = ClientType.WINDOW,
        controlled: bool = False,
    ) -> ClientInfo:
        if client_id in self.active_connections:
            logger.info(f"Client {client_id} reconnected, replacing previous connection")
            self.disconnect(client_id)

        info = ClientInfo(id=client_id, url=url, type=client_type, controlled=controlled)
        self.active_connections[client_id] = websocket
        self.clients[client_id] = info
        self.connected_at[client_id] = datetime.now()
        logger.info(f"Client connected: {client_id} ({client_type.value}, controlled={controlled}) at {url}")
        return info

    def disconnect(self, client_id: str, websocket: Optional[WebSocket] = None):
        """Forget a client; with `websocket`, only if that is still its connection"""
        if websocket is not None and self.active_connections.get(client_id) is not websocket:
            return
        self.active_connections.pop(client_id, None)
        self.clients.pop(client_id, None)
        self.connected_at.pop(client_id, None)

    def match(
        self,
        client_type: Optional[ClientType] = ClientType.WINDOW,
        include_uncontrolled: bool = False,
    ) -> List[ClientInfo]:
        matched = []
        for info in reversed(list(self.clients.values())):
            if client_type is not None and info.type != client_type:
                continue
            if not include_uncontrolled and not info.controlled:
                continue
            matched.append(info)
        return matched

    def claim_all(self) -> int:
        """Mark every connected client as controlled"""
        claimed = 0
        for info in self.clients.values():
            if not info.controlled:
                info.controlled = True
                claimed += 1
        logger.info(f"Claimed {claimed} client(s), {len(self.clients)} connected")
        return claimed

    async def send(self, client_id: str, message: Dict[str, Any]):
        websocket = self.active_connections.get(client_id)
        if websocket is None:
            raise HostSurfaceError(f"Client {client_id} is not connected")
        try:
            await websocket.send_json(message)
        except Exception as e:
            logger.warning(f"Send to client {client_id} failed, dropping connection: {e}")
            self.disconnect(client_id)
            raise HostSurfaceError(f"Send to client {client_id} failed: {e}") from e

    async def focus(self, client_id: str):
        await self.send(client_id, FOCUS_MESSAGE)

    def __len__(self) -> int:
        return len(self.clients)
