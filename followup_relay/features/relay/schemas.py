"""Request and response schemas for the relay API"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from followup_relay.features.relay.domain import AgentState


class PushResponse(BaseModel):
    """Response model for an accepted push"""
    model_config = ConfigDict(populate_by_name=True)

    shown: bool
    effects: List[str] = Field(default_factory=list)


class ClickRequest(BaseModel):
    """Request model for a notification click"""
    action: Optional[str] = None  # None = notification body clicked


class ClickResponse(BaseModel):
    """Response model for a handled notification click"""
    model_config = ConfigDict(populate_by_name=True)

    notification_id: str = Field(..., alias="notificationId")
    outcome: str
    effects: List[str] = Field(default_factory=list)


class RelayHealth(BaseModel):
    status: str
    service: str
    lifecycle_state: AgentState = Field(..., alias="lifecycleState")
    clients: int
    notifications: int

    model_config = ConfigDict(populate_by_name=True)
