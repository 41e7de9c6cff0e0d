"""
Action Router - classifies notification clicks.

Per interaction event:

    RECEIVED -> CLASSIFIED -> RELAYED | DEFAULT_HANDLED -> DONE

The originating notification is always closed first. A click on one of the
recognized quick-response actions is relayed to the application and
acknowledged with a short-lived confirmation; anything else (a body click
or an action id we don't know) falls back to focusing/opening the app.
No state survives between events.
"""
import logging
from enum import Enum
from typing import List, Optional

from followup_relay.config import CONFIRMATION_CLOSE_MS, DEFAULT_ICON
from followup_relay.features.relay.domain import (
    RECOGNIZED_ACTION_IDS,
    Effectiveness,
    InteractionEvent,
    NotificationRequest,
    QuickResponse,
)
from followup_relay.features.relay.effects import (
    CloseNotification,
    CloseNotificationsByTag,
    Effect,
    FocusOrOpenWindow,
    RelayQuickResponse,
    ScheduleClose,
    ShowNotification,
)
from followup_relay.features.relay.host import HostSurface

logger = logging.getLogger(__name__)

CONFIRMATION_TITLE = "Response Recorded!"
CONFIRMATION_BODY = "Your feedback has been saved. Open the app to see details."


class RouteState(str, Enum):
    RECEIVED = "received"
    CLASSIFIED = "classified"
    RELAYED = "relayed"
    DEFAULT_HANDLED = "default_handled"
    DONE = "done"


def build_quick_response(event: InteractionEvent) -> Optional[QuickResponse]:
    """QuickResponse for a recognized action id, else None"""
    if event.action_id not in RECOGNIZED_ACTION_IDS:
        return None
    data = event.notification_data
    return QuickResponse(
        incident_id=data.incident_id,
        effectiveness=Effectiveness(event.action_id),
        follow_up_index=data.follow_up_index,
    )


def build_confirmation(response: QuickResponse) -> NotificationRequest:
    return NotificationRequest(
        title=CONFIRMATION_TITLE,
        body=CONFIRMATION_BODY,
        icon=DEFAULT_ICON,
        badge=DEFAULT_ICON,
        tag=response.confirmation_tag,
        require_interaction=False,
        actions=[],
    )


class ActionRouter:
    """Turns an interaction event into the effects that handle it."""

    def __init__(self, confirmation_close_ms: int = CONFIRMATION_CLOSE_MS):
        self.confirmation_close_ms = confirmation_close_ms

    def classify(self, event: InteractionEvent) -> RouteState:
        if event.action_id in RECOGNIZED_ACTION_IDS:
            return RouteState.RELAYED
        return RouteState.DEFAULT_HANDLED

    def route(self, event: InteractionEvent, host: Optional[HostSurface] = None) -> List[Effect]:
        """
        Build the effects for one interaction event.

        Args:
            event: The click being handled
            host: Unused; accepted so the router can be registered as an
                event handler directly

        Returns:
            Effects in execution order
        """
        effects: List[Effect] = []

        if event.notification_id:
            effects.append(CloseNotification(notification_id=event.notification_id))
        elif event.tag:
            effects.append(CloseNotificationsByTag(tag=event.tag))

        state = self.classify(event)
        logger.info(
            f"Notification click: action={event.action_id or '<body>'}, "
            f"incident={event.notification_data.incident_id}, state={state.value}"
        )

        if state == RouteState.RELAYED:
            response = build_quick_response(event)
            effects.append(RelayQuickResponse(response=response))
            effects.append(ShowNotification(request=build_confirmation(response)))
            effects.append(ScheduleClose(
                tag=response.confirmation_tag,
                delay_ms=self.confirmation_close_ms,
            ))
        else:
            if event.action_id:
                logger.warning(f"Unrecognized action id {event.action_id!r}, opening the app instead")
            effects.append(FocusOrOpenWindow(data=event.notification_data))

        return effects
