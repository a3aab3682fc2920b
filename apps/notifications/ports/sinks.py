# apps/notifications/ports/sinks.py
from abc import ABC, abstractmethod

from apps.notifications.domain.entities import NotificationEntity


class INotificationSink(ABC):
    @abstractmethod
    def send(self, notification: NotificationEntity) -> None:
        """Dostarcza powiadomienie (push/lokalne). Może zawieść niezależnie od bazy."""
        pass
