from models import Notification, NotificationType
from errors import NotFound

import logging
logger = logging.getLogger(__name__)

def notify(store, user_id: str, notification_type: NotificationType, message: str):
    """Record a notification for a user.

    Emission never fails the caller: the state change that triggered it
    has already been committed.
    """
    try:
        notification = Notification(userId=user_id, type=notification_type, message=message)
        return store.add_notification(notification)
    except Exception as exc:
        logger.error(f"Error creating {notification_type.value} notification for {user_id}: {exc}")
        return None

def notify_booking(store, user_id: str, booking_id: str, message: str):
    return notify(store, user_id, NotificationType.BOOKING, f"{message} (booking {booking_id})")

def notify_ride(store, user_id: str, ride_id: str, message: str):
    return notify(store, user_id, NotificationType.RIDE, f"{message} (ride {ride_id})")

async def get_notifications(user_id: str, store):
    """Notifications for a user, newest first"""
    notifications = store.list_notifications(user_id)
    notifications.sort(key=lambda notification: notification.createdAt, reverse=True)
    return notifications

async def mark_notification_read(notification_id: str, user_id: str, store):
    notification = store.get_notification(notification_id)
    # Someone else's notification is reported as missing
    if not notification or notification.userId != user_id:
        raise NotFound(f"Notification {notification_id} not found")

    if not notification.read:
        notification.read = True
        store.save_notification(notification)
    return notification

async def mark_all_notifications_read(user_id: str, store):
    count = store.mark_all_notifications_read(user_id)
    logger.info(f"Marked {count} notifications read for {user_id}")
    return {"status": "success", "updated": count}
