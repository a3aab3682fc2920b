# apps/goals/adapters/memory_repositories.py
from datetime import date
from typing import Dict, List, Optional, Tuple
from uuid import UUID, uuid4

from apps.goals.adapters.records import (
    goal_from_record,
    goal_to_record,
    progress_from_record,
    progress_to_record,
    utc_now,
)
from apps.goals.domain.entities import GoalEntity, GoalProgressEntity, GoalStatus, UserId
from apps.goals.domain.exceptions import GoalNotFound
from apps.goals.ports.repositories import IGoalRepository
from apps.notifications.domain.entities import NotificationEntity

_OPEN_STATUSES = (None, GoalStatus.ACTIVE.value, GoalStatus.PENDING_FINISH.value)


class InMemoryGoalRepository(IGoalRepository):
    """
    Magazyn w pamięci, trzymający rekordy w tym samym formacie co zdalny backend.
    Do testów i uruchomień bez bazy.
    """

    def __init__(self):
        self.goals: Dict[str, dict] = {}
        self.progress: Dict[Tuple[str, UserId], dict] = {}
        self.notifications: List[NotificationEntity] = []

    def get_goal(self, goal_id: UUID) -> Optional[GoalEntity]:
        record = self.goals.get(str(goal_id))
        return goal_from_record(record) if record else None

    def create_goal(self, goal: GoalEntity) -> GoalEntity:
        now = utc_now()
        goal.id = goal.id or uuid4()
        goal.created_at = goal.created_at or now
        goal.updated_at = now
        self.goals[str(goal.id)] = goal_to_record(goal)
        return self.get_goal(goal.id)

    def update_goal(self, goal_id: UUID, fields: dict) -> GoalEntity:
        goal = self.get_goal(goal_id)
        if goal is None:
            raise GoalNotFound(goal_id)
        for name, value in fields.items():
            if not hasattr(goal, name):
                raise ValueError(f"Unknown goal field: {name}")
            setattr(goal, name, value)
        goal.updated_at = utc_now()
        self.goals[str(goal_id)] = goal_to_record(goal)
        return self.get_goal(goal_id)

    def get_progress(self, goal_id: UUID, user_id: UserId) -> Optional[GoalProgressEntity]:
        record = self.progress.get((str(goal_id), user_id))
        return progress_from_record(record) if record else None

    def upsert_progress(self, goal_id: UUID, user_id: UserId, fields: dict) -> GoalProgressEntity:
        progress = self.get_progress(goal_id, user_id)
        if progress is None:
            progress = GoalProgressEntity(id=uuid4(), goal_id=goal_id, user_id=user_id)
        for name, value in fields.items():
            if not hasattr(progress, name):
                raise ValueError(f"Unknown progress field: {name}")
            setattr(progress, name, value)
        progress.updated_at = utc_now()
        self.progress[(str(goal_id), user_id)] = progress_to_record(progress)
        return self.get_progress(goal_id, user_id)

    def list_progress(self, goal_id: UUID) -> List[GoalProgressEntity]:
        return [
            progress_from_record(record)
            for (stored_goal_id, _), record in self.progress.items()
            if stored_goal_id == str(goal_id)
        ]

    def create_notification(self, notification: NotificationEntity) -> NotificationEntity:
        notification.id = notification.id or uuid4()
        notification.created_at = notification.created_at or utc_now()
        self.notifications.append(notification)
        return notification

    def list_expired_challenges(self, day: date) -> List[GoalEntity]:
        expired = []
        for record in self.goals.values():
            goal = goal_from_record(record)
            if not goal.is_challenge or goal.end_date is None:
                continue
            status = goal.goal_status.value if goal.goal_status else None
            if goal.end_date <= day and status in _OPEN_STATUSES:
                expired.append(goal)
        return expired
