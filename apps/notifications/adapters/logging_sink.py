# apps/notifications/adapters/logging_sink.py
import logging

from apps.notifications.domain.entities import NotificationEntity, NotificationType
from apps.notifications.ports.sinks import INotificationSink

logger = logging.getLogger(__name__)


class LoggingNotificationSink(INotificationSink):
    """Domyślny sink: zamiast pusha zapisuje powiadomienie w logu."""

    def send(self, notification: NotificationEntity) -> None:
        logger.info(
            "Notification [%s] for user %s: %s - %s",
            NotificationType(notification.type).value,
            notification.user_id,
            notification.title,
            notification.message,
        )
