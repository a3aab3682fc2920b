# apps/goals/models.py
import uuid

from django.conf import settings
from django.db import models

from apps.goals.domain.entities import GoalMode, GoalStatus, GoalType, TrackingMethod


class Goal(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100)

    class TrackingMethodChoices(models.TextChoices):
        NUMERIC = TrackingMethod.NUMERIC.value, 'Input Numbers'
        DAILY_COMPLETION = TrackingMethod.DAILY_COMPLETION.value, 'Track Days Completed'
        LIST = TrackingMethod.LIST.value, 'Input List'

    tracking_method = models.CharField(max_length=30, choices=TrackingMethodChoices.choices)

    # Uczestnicy (brak buddy'ego = cel solo)
    creator = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE,
                                related_name='created_goals')
    buddy = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL,
                              related_name='buddy_goals')

    # Odpowiedzi z kwestionariusza
    class GoalTypeChoices(models.TextChoices):
        LIST_TRACKER = GoalType.LIST_TRACKER.value, 'List Tracker'
        DAILY_TRACKER = GoalType.DAILY_TRACKER.value, 'Daily Tracker'
        LIST_CREATED_BY_USER = GoalType.LIST_CREATED_BY_USER.value, 'List Created By User'

    goal_type = models.CharField(max_length=30, choices=GoalTypeChoices.choices, null=True, blank=True)
    task_being_tracked = models.CharField(max_length=100, null=True, blank=True)
    list_items = models.JSONField(null=True, blank=True, help_text="Oryginalna lista (list_created_by_user)")
    keep_streak = models.BooleanField(null=True, blank=True)
    track_daily_quantity = models.BooleanField(null=True, blank=True)
    unit_tracked = models.CharField(max_length=20, null=True, blank=True)

    # Challenge
    class ModeChoices(models.TextChoices):
        CHALLENGE = GoalMode.CHALLENGE.value, 'Challenge'
        FRIENDLY = GoalMode.FRIENDLY.value, 'Friendly'

    challenge_or_friendly = models.CharField(max_length=20, choices=ModeChoices.choices, null=True, blank=True)
    winning_condition = models.CharField(max_length=200, null=True, blank=True)
    winning_number = models.PositiveIntegerField(null=True, blank=True)
    end_date = models.DateField(null=True, blank=True)
    winners_prize = models.CharField(max_length=200, null=True, blank=True)

    # Cykl życia (NULL traktujemy jak active)
    class StatusChoices(models.TextChoices):
        ACTIVE = GoalStatus.ACTIVE.value, 'Active'
        PENDING_FINISH = GoalStatus.PENDING_FINISH.value, 'Pending Finish'
        FINISHED = GoalStatus.FINISHED.value, 'Finished'

    goal_status = models.CharField(max_length=20, choices=StatusChoices.choices, null=True, blank=True)
    winner_user = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL,
                                    related_name='won_goals')
    loser_user = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL,
                                   related_name='lost_goals')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-updated_at']
        indexes = [
            models.Index(fields=['challenge_or_friendly', 'end_date'], name='goals_goal_challen_6f1d2a_idx'),
        ]

    def __str__(self):
        return self.name


class GoalProgress(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    goal = models.ForeignKey(Goal, on_delete=models.CASCADE, related_name='progress_entries')
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='goal_progress')

    numeric_value = models.FloatField(null=True, blank=True)
    completed_days = models.JSONField(default=list, blank=True, help_text="Lista dat 'YYYY-MM-DD'")
    # [{"id": ..., "title": ..., "date": ISO-8601}]
    list_items = models.JSONField(default=list, blank=True)

    has_seen_winner_message = models.BooleanField(default=False)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ('goal', 'user')  # Jeden wiersz na uczestnika

    def __str__(self):
        return f"{self.user} @ {self.goal}"
