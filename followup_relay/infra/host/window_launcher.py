"""
Window Launcher

Opens application windows through the host window manager's HTTP API
"""

import logging
from typing import Optional

import httpx

from followup_relay.features.relay.exceptions import HostSurfaceError

logger = logging.getLogger(__name__)


class WindowLauncher:
    """Asks the host window manager to open a window at a URL"""

    def __init__(
        self,
        base_url: Optional[str],
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/") if base_url else None
        self.timeout = timeout
        self._transport = transport

    @property
    def available(self) -> bool:
        return self.base_url is not None

    async def open(self, url: str) -> None:
        """
        Open a new window.

        Args:
            url: Address the new window should load

        Raises:
            HostSurfaceError: If no window manager is configured or it
                rejected the request
        """
        if not self.available:
            raise HostSurfaceError("No window manager configured")

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.post(
                    f"{self.base_url}/open",
                    json={"url": url},
                    headers={"Content-Type": "application/json"},
                    timeout=self.timeout,
                )
        except httpx.HTTPError as e:
            raise HostSurfaceError(f"Window manager unreachable: {e}") from e

        if response.status_code >= 400:
            raise HostSurfaceError(
                f"Window manager error {response.status_code}: {response.text}"
            )
        logger.debug(f"Window manager opened {url}")
