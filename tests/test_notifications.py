import logging

import pytest
from django.contrib.auth.models import User

from apps.notifications.adapters.logging_sink import LoggingNotificationSink
from apps.notifications.domain.entities import NotificationEntity, NotificationType
from apps.notifications.services import NotificationService


@pytest.fixture
def service():
    return NotificationService()


@pytest.fixture
def alice(db):
    return User.objects.create_user(username='alice')


@pytest.fixture
def bob(db):
    return User.objects.create_user(username='bob')


@pytest.mark.django_db
class TestNotificationService:
    def test_friend_request(self, service, alice, bob):
        notification = service.notify_friend_request(bob.id, alice.id, "Alice")

        assert notification.user_id == bob.id
        assert notification.type == NotificationType.FRIEND_REQUEST
        assert notification.title == "New Friend Request"
        assert notification.message == "Alice wants to be your friend"
        assert notification.related_user_id == alice.id
        assert notification.is_read is False

    def test_friend_request_accepted(self, service, alice, bob):
        notification = service.notify_friend_request_accepted(alice.id, bob.id, "Bob")

        assert notification.type == NotificationType.FRIEND_REQUEST_ACCEPTED
        assert notification.message == "Bob accepted your friend request"

    def test_inbox_and_read_flags(self, service, alice, bob):
        first = service.notify_friend_request(bob.id, alice.id, "Alice")
        second = service.notify_friend_request_accepted(bob.id, alice.id, "Alice")

        assert service.unread_count(bob.id) == 2
        assert service.mark_as_read(first.id, bob.id) is True
        assert [n.id for n in service.list_for_user(bob.id, unread_only=True)] == [second.id]
        assert service.unread_count(bob.id) == 1

        assert service.mark_all_as_read(bob.id) == 1
        assert service.unread_count(bob.id) == 0
        assert len(service.list_for_user(bob.id)) == 2

    def test_only_the_addressee_can_touch_a_notification(self, service, alice, bob):
        notification = service.notify_friend_request(bob.id, alice.id, "Alice")

        assert service.mark_as_read(notification.id, alice.id) is False
        assert service.delete(notification.id, alice.id) is False
        assert service.delete(notification.id, bob.id) is True
        assert service.list_for_user(bob.id) == []


def test_logging_sink_writes_to_log(caplog):
    notification = NotificationEntity(
        id=None, user_id=7, type=NotificationType.GOAL_UPDATE, title="Goal Update", message="hello",
    )
    with caplog.at_level(logging.INFO):
        LoggingNotificationSink().send(notification)

    assert "Notification [goal_update] for user 7: Goal Update - hello" in caplog.text
