"""Domain models for the follow-up relay"""

import math
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Set

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from followup_relay.config import DEFAULT_ICON


CLIENT_MESSAGE_TYPE = "FOLLOWUP_QUICK_RESPONSE"


class Effectiveness(str, Enum):
    """Quick-response action ids a notification may register"""
    RESOLVED = "resolved"
    IMPROVED = "improved"
    NO_CHANGE = "no_change"


# Set of recognized action id strings for quick lookups
RECOGNIZED_ACTION_IDS: Set[str] = {e.value for e in Effectiveness}


class ClientType(str, Enum):
    """Kinds of live application instance"""
    WINDOW = "window"
    WORKER = "worker"


class AgentState(str, Enum):
    """Agent lifecycle states"""
    INSTALLING = "installing"
    INSTALLED = "installed"  # waiting for existing instances to let go
    ACTIVATING = "activating"
    ACTIVATED = "activated"


def coerce_follow_up_index(value: Any) -> int:
    """
    Coerce a follow-up index to a finite non-negative integer.

    Anything that isn't a number (or numeric string) that fits that
    description becomes 0.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(value, 0)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number) or number < 0:
        return 0
    return int(number)


def coerce_incident_id(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _or_default(default: Any):
    """Falsy payload values fall back to the default"""
    def _apply(value: Any) -> Any:
        return value if value else default
    return _apply


def _unless_none(default: Any):
    """Only an absent payload value falls back to the default"""
    def _apply(value: Any) -> Any:
        return default if value is None else value
    return _apply


def _as_text(default: str, falsy_is_default: bool = False):
    """
    Render scalar payload values as text.

    None (or any falsy value, when falsy_is_default) becomes the default;
    objects and arrays are left for validation to reject.
    """
    def _apply(value: Any) -> Any:
        if value is None or (falsy_is_default and not value):
            return default
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float)):
            return str(value)
        return value
    return _apply


FollowUpIndex = Annotated[int, BeforeValidator(coerce_follow_up_index)]
IncidentId = Annotated[Optional[str], BeforeValidator(coerce_incident_id)]
IconRef = Annotated[str, BeforeValidator(_as_text(DEFAULT_ICON, falsy_is_default=True))]
Text = Annotated[str, BeforeValidator(_as_text(""))]


class NotificationAction(BaseModel):
    """Inline action button shown on a notification"""
    model_config = ConfigDict(extra="allow")

    id: str
    label: str = ""


class NotificationData(BaseModel):
    """
    Data bag attached to a notification at display time.

    Unknown keys are carried through untouched.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    incident_id: IncidentId = Field(None, alias="incidentId")
    follow_up_index: FollowUpIndex = Field(0, alias="followUpIndex")

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class NotificationRequest(BaseModel):
    """Normalized notification to display"""
    model_config = ConfigDict(populate_by_name=True)

    title: Text = ""
    body: Text = ""
    icon: IconRef = DEFAULT_ICON
    badge: IconRef = DEFAULT_ICON
    tag: Annotated[str, BeforeValidator(_as_text("default", falsy_is_default=True))] = "default"
    require_interaction: Annotated[bool, BeforeValidator(_unless_none(True))] = Field(
        True, alias="requireInteraction"
    )
    actions: Annotated[List[NotificationAction], BeforeValidator(_or_default([]))] = Field(
        default_factory=list
    )
    data: Annotated[NotificationData, BeforeValidator(_or_default({}))] = Field(
        default_factory=NotificationData
    )


class DisplayedNotification(NotificationRequest):
    """A notification currently visible on the host surface"""
    id: str
    shown_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), alias="shownAt"
    )


class InteractionEvent(BaseModel):
    """User click on a notification body or one of its action buttons"""
    model_config = ConfigDict(populate_by_name=True)

    action_id: Optional[str] = Field(None, alias="action")  # None/"" = body click
    notification_id: Optional[str] = Field(None, alias="notificationId")
    tag: Optional[str] = None
    notification_data: NotificationData = Field(
        default_factory=NotificationData, alias="notificationData"
    )

    @classmethod
    def for_notification(
        cls, notification: DisplayedNotification, action_id: Optional[str] = None
    ) -> "InteractionEvent":
        return cls(
            action_id=action_id,
            notification_id=notification.id,
            tag=notification.tag,
            notification_data=notification.data,
        )


class QuickResponse(BaseModel):
    """Response derived from a recognized action click"""
    model_config = ConfigDict(populate_by_name=True)

    incident_id: IncidentId = Field(None, alias="incidentId")
    effectiveness: Effectiveness
    follow_up_index: FollowUpIndex = Field(0, alias="followUpIndex")

    @property
    def confirmation_tag(self) -> str:
        return confirmation_tag(self.incident_id)


class ClientMessage(BaseModel):
    """Message posted to each live application instance"""
    type: Literal["FOLLOWUP_QUICK_RESPONSE"] = CLIENT_MESSAGE_TYPE
    payload: QuickResponse

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class ClientInfo(BaseModel):
    """Live application instance as seen by the agent"""
    id: str
    url: str
    type: ClientType = ClientType.WINDOW
    controlled: bool = False


class RelayResult(BaseModel):
    """Outcome of a single relay fan-out"""
    delivered: int = 0
    failed: int = 0
    fallback_opened: bool = False


def confirmation_tag(incident_id: Optional[str]) -> str:
    return f"response-{incident_id if incident_id is not None else ''}"
