"""Window Focus Resolver - default handling for plain notification clicks"""
import logging
from typing import Any, Callable, Optional
from urllib.parse import urlsplit

from followup_relay.features.relay.broadcaster import build_launch_url
from followup_relay.features.relay.domain import ClientInfo, ClientType, NotificationData
from followup_relay.features.relay.host import HostSurface

logger = logging.getLogger(__name__)


def _same_origin(url: str, origin: str) -> bool:
    client_url, expected = urlsplit(url), urlsplit(origin)
    return (client_url.scheme, client_url.netloc) == (expected.scheme, expected.netloc)


class WindowFocusResolver:
    """
    Focuses an existing window of the origin, or opens a new one.

    The first matching window wins. Window order comes from the host and
    isn't guaranteed (usually most recently used first); pass `order_key`
    to impose one.
    """

    def __init__(
        self,
        host: HostSurface,
        order_key: Optional[Callable[[ClientInfo], Any]] = None,
    ):
        self._host = host
        self._order_key = order_key

    async def focus_or_open(self, data: NotificationData) -> None:
        try:
            clients = await self._host.match_clients(client_type=ClientType.WINDOW)
            if self._order_key is not None:
                clients = sorted(clients, key=self._order_key)

            for client in clients:
                if _same_origin(client.url, self._host.origin):
                    await self._host.focus_client(client.id)
                    logger.info(f"Focused existing window {client.id} ({client.url})")
                    return

            if not self._host.can_open_windows:
                logger.warning("No window to focus and the host cannot open windows")
                return

            url = build_launch_url(self._host.origin, data)
            await self._host.open_window(url)
            logger.info(f"Opened new window at {url}")
        except Exception as e:
            logger.error(f"Error focusing or opening window for incident {data.incident_id}: {e}")
