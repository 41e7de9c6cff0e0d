"""Notification Presenter - thin façade over the host notification surface"""
import logging
from typing import Optional

from followup_relay.features.relay.domain import DisplayedNotification, NotificationRequest
from followup_relay.features.relay.host import HostSurface

logger = logging.getLogger(__name__)


class NotificationPresenter:
    """Shows and closes notifications. Never raises."""

    def __init__(self, host: HostSurface):
        self._host = host

    async def show(self, request: NotificationRequest) -> Optional[DisplayedNotification]:
        """
        Show a notification. The tag is passed through untouched so the
        host replaces any visible notification sharing it.

        Returns:
            The displayed notification, or None if the host failed
        """
        try:
            displayed = await self._host.show_notification(request)
            logger.info(f"Notification shown: id={displayed.id}, tag={request.tag}")
            return displayed
        except Exception as e:
            logger.error(f"Error showing notification (tag={request.tag}): {e}")
            return None

    async def close(self, notification_id: str) -> None:
        """Close a single notification"""
        try:
            await self._host.close_notification(notification_id)
        except Exception as e:
            logger.error(f"Error closing notification {notification_id}: {e}")

    async def close_by_tag(self, tag: str) -> int:
        """
        Close every visible notification carrying exactly `tag`.

        Returns:
            Number of notifications closed (0 when none matched)
        """
        try:
            notifications = await self._host.get_notifications(tag=tag)
        except Exception as e:
            logger.error(f"Error listing notifications for tag {tag}: {e}")
            return 0

        closed = 0
        for notification in notifications:
            if notification.tag != tag:
                continue
            try:
                await self._host.close_notification(notification.id)
                closed += 1
            except Exception as e:
                logger.error(f"Error closing notification {notification.id} (tag={tag}): {e}")

        if closed:
            logger.info(f"Closed {closed} notification(s) with tag {tag}")
        return closed
