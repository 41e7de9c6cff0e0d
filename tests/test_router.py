"""Tests for click classification; the router only returns effects."""

from __future__ import annotations

import pytest

from followup_relay.features.relay.domain import InteractionEvent, NotificationData
from followup_relay.features.relay.effects import (
    CloseNotification,
    CloseNotificationsByTag,
    FocusOrOpenWindow,
    RelayQuickResponse,
    ScheduleClose,
    ShowNotification,
)
from followup_relay.features.relay.router import ActionRouter, RouteState


def _click(action: str | None, data: dict | None = None) -> InteractionEvent:
    return InteractionEvent(
        action_id=action,
        notification_id="n-1",
        tag="default",
        notification_data=NotificationData.model_validate(
            data if data is not None else {"incidentId": "abc123", "followUpIndex": 2}
        ),
    )


@pytest.mark.parametrize("action", ["resolved", "improved", "no_change"])
def test_recognized_action_relays_and_confirms(action: str) -> None:
    effects = ActionRouter().route(_click(action))

    assert [type(effect) for effect in effects] == [
        CloseNotification,
        RelayQuickResponse,
        ShowNotification,
        ScheduleClose,
    ]
    assert effects[0].notification_id == "n-1"

    response = effects[1].response
    assert response.incident_id == "abc123"
    assert response.effectiveness.value == action
    assert response.follow_up_index == 2

    confirmation = effects[2].request
    assert confirmation.tag == "response-abc123"
    assert confirmation.actions == []
    assert confirmation.require_interaction is False

    assert effects[3].tag == "response-abc123"
    assert effects[3].delay_ms == 3000


@pytest.mark.parametrize("action", [None, "", "effective", "RESOLVED", "dismiss"])
def test_other_actions_fall_back_to_focus_or_open(action: str | None) -> None:
    effects = ActionRouter().route(_click(action))

    assert [type(effect) for effect in effects] == [CloseNotification, FocusOrOpenWindow]
    assert effects[1].data.incident_id == "abc123"
    assert not any(isinstance(effect, RelayQuickResponse) for effect in effects)


def test_classify() -> None:
    router = ActionRouter()
    assert router.classify(_click("improved")) == RouteState.RELAYED
    assert router.classify(_click(None)) == RouteState.DEFAULT_HANDLED


def test_missing_follow_up_index_defaults_to_zero() -> None:
    effects = ActionRouter().route(_click("resolved", {"incidentId": "abc123"}))
    assert effects[1].response.follow_up_index == 0


def test_missing_incident_id_is_forwarded_as_none() -> None:
    effects = ActionRouter().route(_click("resolved", {}))

    assert effects[1].response.incident_id is None
    assert effects[2].request.tag == "response-"


def test_event_without_notification_id_closes_by_tag() -> None:
    event = InteractionEvent(action_id="resolved", tag="default")
    effects = ActionRouter().route(event)
    assert isinstance(effects[0], CloseNotificationsByTag)
    assert effects[0].tag == "default"


def test_custom_confirmation_delay() -> None:
    effects = ActionRouter(confirmation_close_ms=500).route(_click("resolved"))
    assert effects[-1].delay_ms == 500
