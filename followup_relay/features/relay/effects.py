"""
Side-effect descriptions returned by event handlers.

Handlers never touch the host surface themselves; they return a list of
these and the EffectExecutor carries them out in order.
"""

from typing import Annotated, List, Literal, Union

from pydantic import BaseModel, Field

from followup_relay.features.relay.domain import (
    NotificationData,
    NotificationRequest,
    QuickResponse,
)


class ShowNotification(BaseModel):
    kind: Literal["show_notification"] = "show_notification"
    request: NotificationRequest


class CloseNotification(BaseModel):
    """Close one displayed notification by id"""
    kind: Literal["close_notification"] = "close_notification"
    notification_id: str


class CloseNotificationsByTag(BaseModel):
    kind: Literal["close_by_tag"] = "close_by_tag"
    tag: str


class RelayQuickResponse(BaseModel):
    """Fan a quick response out to live instances (or open one)"""
    kind: Literal["relay_quick_response"] = "relay_quick_response"
    response: QuickResponse


class ScheduleClose(BaseModel):
    """Close every notification with `tag` after `delay_ms`"""
    kind: Literal["schedule_close"] = "schedule_close"
    tag: str
    delay_ms: int


class FocusOrOpenWindow(BaseModel):
    kind: Literal["focus_or_open_window"] = "focus_or_open_window"
    data: NotificationData


class SkipWaiting(BaseModel):
    kind: Literal["skip_waiting"] = "skip_waiting"


class ClaimClients(BaseModel):
    kind: Literal["claim_clients"] = "claim_clients"


Effect = Annotated[
    Union[
        ShowNotification,
        CloseNotification,
        CloseNotificationsByTag,
        RelayQuickResponse,
        ScheduleClose,
        FocusOrOpenWindow,
        SkipWaiting,
        ClaimClients,
    ],
    Field(discriminator="kind"),
]

EffectList = List[Effect]
