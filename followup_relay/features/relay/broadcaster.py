"""
Client Broadcaster

Relays a quick response to every live application instance of the origin.
When none is open, a new instance is launched with the response encoded in
its URL so the application can pick it up on load.
"""

import asyncio
import logging
from typing import Optional
from urllib.parse import parse_qs, quote, urlencode, urlsplit

from pydantic import ValidationError

from followup_relay.features.relay.domain import (
    ClientInfo,
    ClientMessage,
    NotificationData,
    QuickResponse,
    RelayResult,
)
from followup_relay.features.relay.host import HostSurface

logger = logging.getLogger(__name__)


def build_fallback_url(origin: str, response: QuickResponse) -> str:
    """`<origin>/?followup=..&effectiveness=..&index=..`, percent-encoded"""
    query = urlencode(
        {
            "followup": response.incident_id or "",
            "effectiveness": response.effectiveness.value,
            "index": response.follow_up_index,
        },
        quote_via=quote,
    )
    return f"{origin.rstrip('/')}/?{query}"


def build_launch_url(origin: str, data: NotificationData) -> str:
    """Default-click URL; the bare origin when there is no incident"""
    origin = origin.rstrip("/")
    if not data.incident_id:
        return origin
    query = urlencode(
        {"followup": data.incident_id, "index": data.follow_up_index},
        quote_via=quote,
    )
    return f"{origin}/?{query}"


def parse_launch_params(url: str) -> Optional[QuickResponse]:
    """
    Rebuild the quick response a fallback launch URL carries.

    Returns None for URLs that don't carry one (e.g. default-click URLs
    without `effectiveness`).
    """
    params = parse_qs(urlsplit(url).query, keep_blank_values=True)
    if "effectiveness" not in params:
        return None
    try:
        return QuickResponse(
            incident_id=params.get("followup", [""])[0] or None,
            effectiveness=params["effectiveness"][0],
            follow_up_index=params.get("index", ["0"])[0],
        )
    except ValidationError as e:
        logger.warning(f"Ignoring launch URL with invalid quick response: {e}")
        return None


class ClientBroadcaster:
    """Fan-out of quick responses to live instances. Never raises."""

    def __init__(self, host: HostSurface):
        self._host = host

    async def relay(self, response: QuickResponse) -> RelayResult:
        """
        Post a FOLLOWUP_QUICK_RESPONSE message to every live instance,
        including ones the agent doesn't control yet. With no instance
        open, launch one at the fallback URL instead.

        Args:
            response: Quick response to relay

        Returns:
            RelayResult with delivery counts
        """
        result = RelayResult()
        try:
            clients = await self._host.match_clients(client_type=None, include_uncontrolled=True)
        except Exception as e:
            logger.error(f"Error enumerating clients for incident {response.incident_id}: {e}")
            return result

        if not clients:
            result.fallback_opened = await self._open_fallback(response)
            return result

        message = ClientMessage(payload=response).to_wire()
        outcomes = await asyncio.gather(*(self._post(client, message) for client in clients))
        result.delivered = sum(1 for ok in outcomes if ok)
        result.failed = len(outcomes) - result.delivered

        logger.info(
            f"Quick response relayed for incident {response.incident_id}: "
            f"delivered={result.delivered}, failed={result.failed}"
        )
        return result

    async def _post(self, client: ClientInfo, message: dict) -> bool:
        try:
            await self._host.post_message(client.id, message)
            return True
        except Exception as e:
            logger.error(f"Error posting quick response to client {client.id} ({client.url}): {e}")
            return False

    async def _open_fallback(self, response: QuickResponse) -> bool:
        if not self._host.can_open_windows:
            logger.warning(
                f"No live clients and the host cannot open windows; "
                f"quick response for incident {response.incident_id} not delivered"
            )
            return False

        url = build_fallback_url(self._host.origin, response)
        try:
            await self._host.open_window(url)
            logger.info(f"No live clients, opened {url}")
            return True
        except Exception as e:
            logger.error(f"Error opening fallback window {url}: {e}")
            return False
