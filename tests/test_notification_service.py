from datetime import datetime
import pytest
from errors import NotFound
from models import Notification, NotificationType
from services.notification_service import (
    notify, get_notifications, mark_notification_read, mark_all_notifications_read,
)
from conftest import RIDER, OTHER_RIDER


def add(store, user_id=RIDER, **overrides):
    notification = Notification(userId=user_id, type=NotificationType.BOOKING, message="hello", **overrides)
    return store.add_notification(notification)


def test_notify_records_notification(store):
    notification = notify(store, RIDER, NotificationType.PAYMENT, "Payment received")
    assert notification.notificationId.startswith("notif_")
    assert not notification.read
    assert store.get_notification(notification.notificationId).message == "Payment received"


def test_notify_swallows_store_errors(store):
    store.fail_notifications = True
    assert notify(store, RIDER, NotificationType.SYSTEM, "lost") is None


async def test_notifications_newest_first(store):
    old = add(store, createdAt=datetime(2024, 1, 1))
    new = add(store, createdAt=datetime(2024, 3, 1))
    add(store, OTHER_RIDER)

    notifications = await get_notifications(RIDER, store)
    assert [n.notificationId for n in notifications] == [new.notificationId, old.notificationId]


async def test_mark_read(store):
    notification = add(store)
    updated = await mark_notification_read(notification.notificationId, RIDER, store)
    assert updated.read
    assert store.get_notification(notification.notificationId).read


async def test_mark_someone_elses_notification(store):
    notification = add(store, OTHER_RIDER)
    with pytest.raises(NotFound):
        await mark_notification_read(notification.notificationId, RIDER, store)
    assert not store.get_notification(notification.notificationId).read


async def test_mark_all_read(store):
    add(store)
    add(store)
    add(store, read=True)
    other = add(store, OTHER_RIDER)

    result = await mark_all_notifications_read(RIDER, store)
    assert result == {"status": "success", "updated": 2}
    assert all(n.read for n in store.list_notifications(RIDER))
    assert not store.get_notification(other.notificationId).read
