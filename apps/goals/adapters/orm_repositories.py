# apps/goals/adapters/orm_repositories.py
from datetime import date
from typing import List, Optional
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db.models import Q
from django.utils import timezone

from apps.goals.adapters.records import list_entries_from_records, list_entries_to_records
from apps.goals.domain.entities import (
    GoalEntity,
    GoalMode,
    GoalProgressEntity,
    GoalStatus,
    TrackingMethod,
    UserId,
)
from apps.goals.domain.exceptions import GoalNotFound
from apps.goals.models import Goal as GoalModel, GoalProgress as GoalProgressModel
from apps.goals.ports.repositories import IGoalRepository
from apps.notifications.adapters.orm_repositories import DjangoNotificationRepository
from apps.notifications.domain.entities import NotificationEntity

# Pola encji -> kolumny (FK zapisujemy po *_id)
GOAL_FIELDS = (
    'name', 'tracking_method', 'creator_id', 'buddy_id', 'goal_type', 'task_being_tracked',
    'list_items', 'keep_streak', 'track_daily_quantity', 'unit_tracked', 'challenge_or_friendly',
    'winning_condition', 'winning_number', 'end_date', 'winners_prize', 'goal_status',
    'winner_user_id', 'loser_user_id',
)
PROGRESS_FIELDS = ('numeric_value', 'completed_days', 'list_items', 'has_seen_winner_message')


class DjangoGoalRepository(IGoalRepository):
    def __init__(self, notifications: Optional[DjangoNotificationRepository] = None):
        self.notifications = notifications or DjangoNotificationRepository()

    def to_entity(self, model: GoalModel) -> GoalEntity:
        """Konwertuje Model Django -> Czystą Encję."""
        return GoalEntity(
            id=model.id,
            name=model.name,
            tracking_method=TrackingMethod(model.tracking_method),
            creator_id=model.creator_id,
            buddy_id=model.buddy_id,
            goal_type=model.goal_type,
            task_being_tracked=model.task_being_tracked,
            list_items=model.list_items,
            keep_streak=model.keep_streak,
            track_daily_quantity=model.track_daily_quantity,
            unit_tracked=model.unit_tracked,
            challenge_or_friendly=model.challenge_or_friendly,
            winning_condition=model.winning_condition,
            winning_number=model.winning_number,
            end_date=model.end_date,
            winners_prize=model.winners_prize,
            goal_status=GoalStatus(model.goal_status) if model.goal_status else None,
            winner_user_id=model.winner_user_id,
            loser_user_id=model.loser_user_id,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def progress_to_entity(self, model: GoalProgressModel) -> GoalProgressEntity:
        return GoalProgressEntity(
            id=model.id,
            goal_id=model.goal_id,
            user_id=model.user_id,
            numeric_value=model.numeric_value,
            completed_days=list(model.completed_days or []),
            list_items=list_entries_from_records(model.list_items),
            has_seen_winner_message=model.has_seen_winner_message,
            updated_at=model.updated_at,
        )

    def _goal_data(self, fields: dict) -> dict:
        data = {}
        for name, value in fields.items():
            if name not in GOAL_FIELDS:
                raise ValueError(f"Unknown goal field: {name}")
            # Enumy domenowe zapisujemy jako surowe stringi
            data[name] = getattr(value, 'value', value)
        return data

    def _progress_data(self, fields: dict) -> dict:
        data = {}
        for name, value in fields.items():
            if name not in PROGRESS_FIELDS:
                raise ValueError(f"Unknown progress field: {name}")
            if name == 'list_items':
                value = list_entries_to_records(value)
            elif name == 'completed_days':
                value = list(value or [])
            data[name] = value
        return data

    def get_goal(self, goal_id: UUID) -> Optional[GoalEntity]:
        try:
            return self.to_entity(GoalModel.objects.get(id=goal_id))
        except (GoalModel.DoesNotExist, ValidationError):
            return None

    def create_goal(self, goal: GoalEntity) -> GoalEntity:
        data = self._goal_data({name: getattr(goal, name) for name in GOAL_FIELDS})
        if goal.id:
            data['id'] = goal.id
        obj = GoalModel.objects.create(**data)
        return self.to_entity(obj)

    def update_goal(self, goal_id: UUID, fields: dict) -> GoalEntity:
        data = self._goal_data(fields)
        # update() omija auto_now - stemplujemy ręcznie
        data['updated_at'] = timezone.now()
        try:
            updated = GoalModel.objects.filter(id=goal_id).update(**data)
        except ValidationError:
            updated = 0
        if not updated:
            raise GoalNotFound(goal_id)
        return self.get_goal(goal_id)

    def get_progress(self, goal_id: UUID, user_id: UserId) -> Optional[GoalProgressEntity]:
        obj = GoalProgressModel.objects.filter(goal_id=goal_id, user_id=user_id).first()
        return self.progress_to_entity(obj) if obj else None

    def upsert_progress(self, goal_id: UUID, user_id: UserId, fields: dict) -> GoalProgressEntity:
        obj, _ = GoalProgressModel.objects.update_or_create(
            goal_id=goal_id,
            user_id=user_id,
            defaults=self._progress_data(fields),
        )
        return self.progress_to_entity(obj)

    def list_progress(self, goal_id: UUID) -> List[GoalProgressEntity]:
        qs = GoalProgressModel.objects.filter(goal_id=goal_id)
        return [self.progress_to_entity(p) for p in qs]

    def create_notification(self, notification: NotificationEntity) -> NotificationEntity:
        return self.notifications.create(notification)

    def list_expired_challenges(self, day: date) -> List[GoalEntity]:
        qs = GoalModel.objects.filter(
            challenge_or_friendly=GoalMode.CHALLENGE.value,
            end_date__lte=day,
        ).filter(
            Q(goal_status__isnull=True) |
            Q(goal_status__in=[GoalStatus.ACTIVE.value, GoalStatus.PENDING_FINISH.value])
        ).order_by('end_date')
        return [self.to_entity(g) for g in qs]
