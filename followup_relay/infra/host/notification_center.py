"""In-process notification surface"""
import logging
import uuid
from typing import Dict, List, Optional

from followup_relay.features.relay.domain import DisplayedNotification, NotificationRequest

logger = logging.getLogger(__name__)


class NotificationCenter:
    """
    Set of currently visible notifications.

    Showing a notification replaces any visible one with the same tag, so a
    tag addresses at most one notification at a time.
    """

    def __init__(self):
        self._notifications: Dict[str, DisplayedNotification] = {}

    def show(self, request: NotificationRequest) -> DisplayedNotification:
        replaced = [n.id for n in self._notifications.values() if n.tag == request.tag]
        for notification_id in replaced:
            del self._notifications[notification_id]
        if replaced:
            logger.debug(f"Replaced {len(replaced)} notification(s) with tag {request.tag}")

        notification = DisplayedNotification(
            id=uuid.uuid4().hex,
            **request.model_dump(),
        )
        self._notifications[notification.id] = notification
        return notification

    def find(self, tag: Optional[str] = None) -> List[DisplayedNotification]:
        notifications = list(self._notifications.values())
        if tag is not None:
            notifications = [n for n in notifications if n.tag == tag]
        return notifications

    def get(self, notification_id: str) -> Optional[DisplayedNotification]:
        return self._notifications.get(notification_id)

    def close(self, notification_id: str) -> bool:
        """Close a notification; False if it wasn't visible"""
        return self._notifications.pop(notification_id, None) is not None

    def __len__(self) -> int:
        return len(self._notifications)
