"""
Relay API Endpoints

Push intake, notification interaction and the live-client WebSocket
"""

import logging
import uuid
from typing import List, Optional

from fastapi import (
    APIRouter,
    BackgroundTasks,
    Depends,
    HTTPException,
    Query,
    Request,
    WebSocket,
    WebSocketDisconnect,
)

from followup_relay.features.relay.domain import ClientType, DisplayedNotification
from followup_relay.features.relay.exceptions import HostSurfaceError, NotificationNotFoundError
from followup_relay.features.relay.schemas import ClickRequest, ClickResponse, PushResponse
from followup_relay.features.relay.service import RelayAgentService, get_relay_agent

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["relay"])


@router.post("/push", response_model=PushResponse)
async def receive_push(
    request: Request,
    agent: RelayAgentService = Depends(get_relay_agent),
):
    """
    Receive a raw push payload from the push channel.

    An empty body means the push carried no data; nothing is shown. A
    malformed body is dropped without an error.
    """
    raw = await request.body()
    event = await agent.handle_push(raw or None)
    effects = [effect.kind for effect in event.effects]
    return PushResponse(shown="show_notification" in effects, effects=effects)


@router.get("/notifications", response_model=List[DisplayedNotification])
async def list_notifications(
    tag: Optional[str] = Query(None, description="Only notifications with this exact tag"),
    agent: RelayAgentService = Depends(get_relay_agent),
):
    """List the notifications currently visible on the host surface"""
    return await agent.host.get_notifications(tag=tag)


@router.post("/notifications/{notification_id}/click", response_model=ClickResponse)
async def click_notification(
    notification_id: str,
    background_tasks: BackgroundTasks,
    request: Optional[ClickRequest] = None,
    agent: RelayAgentService = Depends(get_relay_agent),
):
    """
    Handle a click on a notification body or one of its action buttons.

    The response is returned once the click is classified; relaying and the
    confirmation auto-close finish in the background.

    Raises:
        404: Notification not visible
        503: Host surface unavailable
        500: Unexpected failure
    """
    action = request.action if request else None
    try:
        event = await agent.handle_click(notification_id, action, settle=False)
    except NotificationNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except HostSurfaceError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except Exception as e:
        logger.error(f"Error handling click on notification {notification_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to handle click: {str(e)}")

    background_tasks.add_task(agent.drain)
    return ClickResponse(
        notification_id=notification_id,
        outcome=agent.router.classify(event.payload).value,
        effects=[effect.kind for effect in event.effects],
    )


@router.post("/notifications/{notification_id}/close", status_code=204)
async def close_notification(
    notification_id: str,
    agent: RelayAgentService = Depends(get_relay_agent),
):
    """User dismissed a notification"""
    try:
        await agent.dismiss(notification_id)
    except NotificationNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except HostSurfaceError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.websocket("/clients/ws")
async def client_socket(
    websocket: WebSocket,
    url: str = Query(..., description="Current location of the application instance"),
    client_id: Optional[str] = Query(None),
    client_type: ClientType = Query(ClientType.WINDOW, alias="type"),
    agent: RelayAgentService = Depends(get_relay_agent),
):
    """
    Connection for a live application instance.

    Relayed quick responses arrive as FOLLOWUP_QUICK_RESPONSE messages and
    focus requests as FOCUS messages.
    """
    host = agent.host
    client_id = client_id or uuid.uuid4().hex

    await websocket.accept()
    info = host.connect_client(websocket, client_id, url, client_type=client_type)
    await websocket.send_json({"type": "CONNECTED", "clientId": info.id, "controlled": info.controlled})

    try:
        while True:
            message = await websocket.receive_text()
            logger.debug(f"Ignoring message from client {client_id}: {message[:200]}")
    except WebSocketDisconnect:
        logger.info(f"Client disconnected: {client_id}")
    finally:
        host.disconnect_client(client_id, websocket)
