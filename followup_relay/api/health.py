"""Health check and monitoring endpoints"""

from fastapi import APIRouter, Depends

from followup_relay.features.relay.domain import AgentState
from followup_relay.features.relay.schemas import RelayHealth
from followup_relay.features.relay.service import RelayAgentService, get_relay_agent

router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("/", response_model=RelayHealth)
async def health_check(agent: RelayAgentService = Depends(get_relay_agent)):
    """
    Relay agent health.

    Reports "starting" until the agent has activated and controls its
    application instances.
    """
    state = agent.host.lifecycle_state
    clients = await agent.host.match_clients(client_type=None, include_uncontrolled=True)
    notifications = await agent.host.get_notifications()

    return RelayHealth(
        status="healthy" if state == AgentState.ACTIVATED else "starting",
        service="followup-relay",
        lifecycle_state=state,
        clients=len(clients),
        notifications=len(notifications),
    )
