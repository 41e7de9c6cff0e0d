"""Follow-up relay feature module"""

from followup_relay.features.relay.api import router
from followup_relay.features.relay.broadcaster import (
    ClientBroadcaster,
    build_fallback_url,
    build_launch_url,
    parse_launch_params,
)
from followup_relay.features.relay.domain import (
    CLIENT_MESSAGE_TYPE,
    RECOGNIZED_ACTION_IDS,
    AgentState,
    ClientInfo,
    ClientMessage,
    ClientType,
    DisplayedNotification,
    Effectiveness,
    InteractionEvent,
    NotificationAction,
    NotificationData,
    NotificationRequest,
    QuickResponse,
    RelayResult,
)
from followup_relay.features.relay.events import EventKind, EventRegistry, ExtendableEvent
from followup_relay.features.relay.host import HostSurface
from followup_relay.features.relay.lifecycle import LifecycleManager
from followup_relay.features.relay.parser import PushPayloadParser
from followup_relay.features.relay.presenter import NotificationPresenter
from followup_relay.features.relay.router import ActionRouter, RouteState
from followup_relay.features.relay.service import (
    RelayAgentService,
    get_relay_agent,
    reset_relay_agent,
)
from followup_relay.features.relay.window_resolver import WindowFocusResolver

__all__ = [
    "router",
    "ActionRouter",
    "AgentState",
    "ClientBroadcaster",
    "ClientInfo",
    "ClientMessage",
    "ClientType",
    "CLIENT_MESSAGE_TYPE",
    "DisplayedNotification",
    "Effectiveness",
    "EventKind",
    "EventRegistry",
    "ExtendableEvent",
    "HostSurface",
    "InteractionEvent",
    "LifecycleManager",
    "NotificationAction",
    "NotificationData",
    "NotificationPresenter",
    "NotificationRequest",
    "PushPayloadParser",
    "QuickResponse",
    "RECOGNIZED_ACTION_IDS",
    "RelayAgentService",
    "RelayResult",
    "RouteState",
    "WindowFocusResolver",
    "build_fallback_url",
    "build_launch_url",
    "get_relay_agent",
    "parse_launch_params",
    "reset_relay_agent",
]
