import logging
from datetime import datetime, timezone

from dental_portal.models.notification import (
    AppointmentNotification,
    PaymentNotification,
    parse_notifications,
)
from dental_portal.services.api_client import envelope_data
from dental_portal.services.errors import ApiError
from dental_portal.services.notify import discard

logger = logging.getLogger(__name__)

FILTERS = ("all", "unread", "appointment", "payment")


class NotificationStore:
    """Inbox of the current actor.

    Mutations are confirm-then-patch: the request goes out first and the
    cached entry is only changed once the server accepted it.
    """

    def __init__(self, api, user_id, notify=None):
        self.api = api
        self.user_id = user_id
        self.notify = notify or discard
        self.notifications = []
        self.is_loading = False
        self.is_stale = True

    @property
    def unread_count(self):
        return sum(1 for notification in self.notifications if not notification.is_read)

    def get(self, notification_id):
        return next((n for n in self.notifications if n.id == str(notification_id)), None)

    def refresh_notifications(self):
        if not self.user_id:
            return False

        self.is_loading = True
        self.is_stale = True
        try:
            payload = self.api.get("/notifications", params={"userId": self.user_id})
        except ApiError as e:
            logger.error(f"Error fetching notifications for {self.user_id}: {e.message}")
            self.notify("Failed to load notifications", "danger")
            return False
        finally:
            self.is_loading = False

        self.notifications = parse_notifications(envelope_data(payload, []))
        self.is_stale = False
        logger.info(f"Fetched {len(self.notifications)} notifications for userId: {self.user_id}")
        return True

    def invalidate(self):
        self.is_stale = True
        return self.refresh_notifications()

    def mark_as_read(self, notification_id):
        try:
            self.api.put(f"/notifications/{notification_id}", json={"isRead": True})
        except ApiError as e:
            logger.error(f"Error marking notification {notification_id} as read: {e.message}")
            self.notify("Failed to update notification", "danger")
            return False

        self.notifications = [
            n.model_copy(update={"is_read": True}) if n.id == str(notification_id) else n
            for n in self.notifications
        ]
        return True

    def delete_notification(self, notification_id):
        try:
            self.api.delete(f"/notifications/{notification_id}")
        except ApiError as e:
            logger.error(f"Error deleting notification {notification_id}: {e.message}")
            self.notify("Failed to delete notification", "danger")
            return False

        self.notifications = [n for n in self.notifications if n.id != str(notification_id)]
        self.notify("Notification deleted", "success")
        return True

    def mark_all_as_read(self):
        if not self.user_id:
            return False

        try:
            self.api.put("/notifications/mark-all-read", params={"userId": self.user_id})
        except ApiError as e:
            logger.error(f"Error marking all notifications read for {self.user_id}: {e.message}")
            self.notify("Failed to update notifications", "danger")
            return False

        self.notifications = [n.model_copy(update={"is_read": True}) for n in self.notifications]
        self.notify("All notifications marked as read", "success")
        return True

    def filtered(self, name="all"):
        if name == "unread":
            return [n for n in self.notifications if not n.is_read]
        if name == "appointment":
            return [n for n in self.notifications if isinstance(n, AppointmentNotification)]
        if name == "payment":
            return [n for n in self.notifications if isinstance(n, PaymentNotification)]
        return list(self.notifications)

    def split_by_age(self, notifications=None, now=None):
        """Split into ("new", "earlier") around the 24 hour mark."""
        now = now or datetime.now(timezone.utc)
        notifications = self.notifications if notifications is None else notifications
        new = [n for n in notifications if n.is_new(now)]
        earlier = [n for n in notifications if not n.is_new(now)]
        return new, earlier
