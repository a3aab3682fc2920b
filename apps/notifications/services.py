# apps/notifications/services.py
from typing import Any, List, Optional
from uuid import UUID

from apps.notifications.adapters.orm_repositories import DjangoNotificationRepository
from apps.notifications.domain.entities import NotificationEntity, NotificationType


class NotificationService:
    """Skrzynka powiadomień użytkownika + powiadomienia o akcjach znajomych."""

    def __init__(self, repository: Optional[DjangoNotificationRepository] = None):
        self.repository = repository or DjangoNotificationRepository()

    def list_for_user(self, user_id: Any, unread_only: bool = False) -> List[NotificationEntity]:
        return self.repository.list_for_user(user_id, unread_only=unread_only)

    def unread_count(self, user_id: Any) -> int:
        return self.repository.unread_count(user_id)

    def mark_as_read(self, notification_id: UUID, user_id: Any) -> bool:
        return self.repository.mark_as_read(notification_id, user_id)

    def mark_all_as_read(self, user_id: Any) -> int:
        return self.repository.mark_all_as_read(user_id)

    def delete(self, notification_id: UUID, user_id: Any) -> bool:
        return self.repository.delete(notification_id, user_id)

    def notify_friend_request(self, recipient_id: Any, sender_id: Any, sender_name: str) -> NotificationEntity:
        return self.repository.create(NotificationEntity(
            id=None,
            user_id=recipient_id,
            type=NotificationType.FRIEND_REQUEST,
            title="New Friend Request",
            message=f"{sender_name} wants to be your friend",
            related_user_id=sender_id,
        ))

    def notify_friend_request_accepted(self, recipient_id: Any, accepter_id: Any,
                                       accepter_name: str) -> NotificationEntity:
        return self.repository.create(NotificationEntity(
            id=None,
            user_id=recipient_id,
            type=NotificationType.FRIEND_REQUEST_ACCEPTED,
            title="Friend Request Accepted",
            message=f"{accepter_name} accepted your friend request",
            related_user_id=accepter_id,
        ))
