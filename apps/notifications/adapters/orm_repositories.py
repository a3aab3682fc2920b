# apps/notifications/adapters/orm_repositories.py
from typing import Any, List, Optional
from uuid import UUID

from django.core.exceptions import ValidationError

from apps.notifications.domain.entities import NotificationEntity, NotificationType
from apps.notifications.models import Notification as NotificationModel


class DjangoNotificationRepository:
    def to_entity(self, model: NotificationModel) -> NotificationEntity:
        """Konwertuje Model Django -> Czystą Encję."""
        return NotificationEntity(
            id=model.id,
            user_id=model.user_id,
            type=NotificationType(model.type),
            title=model.title,
            message=model.message,
            related_user_id=model.related_user_id,
            related_goal_id=model.related_goal_id,
            is_read=model.is_read,
            created_at=model.created_at,
        )

    def create(self, notification: NotificationEntity) -> NotificationEntity:
        obj = NotificationModel.objects.create(
            user_id=notification.user_id,
            type=NotificationType(notification.type).value,
            title=notification.title,
            message=notification.message,
            related_user_id=notification.related_user_id,
            related_goal_id=notification.related_goal_id,
            is_read=notification.is_read,
        )
        return self.to_entity(obj)

    def get_by_id(self, notification_id: UUID) -> Optional[NotificationEntity]:
        try:
            return self.to_entity(NotificationModel.objects.get(id=notification_id))
        except (NotificationModel.DoesNotExist, ValidationError):
            return None

    def list_for_user(self, user_id: Any, unread_only: bool = False) -> List[NotificationEntity]:
        qs = NotificationModel.objects.filter(user_id=user_id)
        if unread_only:
            qs = qs.filter(is_read=False)
        return [self.to_entity(n) for n in qs.order_by('-created_at')]

    def unread_count(self, user_id: Any) -> int:
        return NotificationModel.objects.filter(user_id=user_id, is_read=False).count()

    def mark_as_read(self, notification_id: UUID, user_id: Any) -> bool:
        # Tylko adresat może oznaczyć swoje powiadomienie
        updated = NotificationModel.objects.filter(id=notification_id, user_id=user_id).update(is_read=True)
        return updated > 0

    def mark_all_as_read(self, user_id: Any) -> int:
        return NotificationModel.objects.filter(user_id=user_id, is_read=False).update(is_read=True)

    def delete(self, notification_id: UUID, user_id: Any) -> bool:
        deleted, _ = NotificationModel.objects.filter(id=notification_id, user_id=user_id).delete()
        return deleted > 0
