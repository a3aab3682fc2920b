# apps/notifications/models.py
import uuid

from django.conf import settings
from django.db import models

from apps.notifications.domain.entities import NotificationType


class Notification(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='notifications')

    class TypeChoices(models.TextChoices):
        FRIEND_REQUEST = NotificationType.FRIEND_REQUEST.value, 'Friend Request'
        GOAL_UPDATE = NotificationType.GOAL_UPDATE.value, 'Goal Update'
        FRIEND_REQUEST_ACCEPTED = NotificationType.FRIEND_REQUEST_ACCEPTED.value, 'Friend Request Accepted'

    type = models.CharField(max_length=30, choices=TypeChoices.choices)
    title = models.CharField(max_length=200)
    message = models.TextField()

    # Powiązania opcjonalne
    related_user = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL,
                                     related_name='+')
    related_goal = models.ForeignKey('goals.Goal', null=True, blank=True, on_delete=models.CASCADE,
                                     related_name='notifications')

    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'is_read'], name='notificatio_user_id_8a7c3e_idx'),
        ]

    def __str__(self):
        return f"{self.user} - {self.type} - {self.title}"
