# apps/goals/ports/repositories.py
from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional
from uuid import UUID

from apps.goals.domain.entities import GoalEntity, GoalProgressEntity, UserId
from apps.notifications.domain.entities import NotificationEntity


class IGoalRepository(ABC):
    @abstractmethod
    def get_goal(self, goal_id: UUID) -> Optional[GoalEntity]:
        pass

    @abstractmethod
    def create_goal(self, goal: GoalEntity) -> GoalEntity:
        """Zapisuje nowy cel i zwraca encję z nadanym ID."""
        pass

    @abstractmethod
    def update_goal(self, goal_id: UUID, fields: dict) -> GoalEntity:
        """Częściowa aktualizacja (tylko podane pola). Brak celu -> GoalNotFound."""
        pass

    @abstractmethod
    def get_progress(self, goal_id: UUID, user_id: UserId) -> Optional[GoalProgressEntity]:
        pass

    @abstractmethod
    def upsert_progress(self, goal_id: UUID, user_id: UserId, fields: dict) -> GoalProgressEntity:
        """Tworzy wiersz (goal, user) albo nadpisuje w nim podane pola."""
        pass

    @abstractmethod
    def list_progress(self, goal_id: UUID) -> List[GoalProgressEntity]:
        pass

    @abstractmethod
    def create_notification(self, notification: NotificationEntity) -> NotificationEntity:
        pass

    @abstractmethod
    def list_expired_challenges(self, day: date) -> List[GoalEntity]:
        """Challenge z end_date <= day, w statusie brak/active/pending_finish."""
        pass
