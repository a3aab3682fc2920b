# apps/goals/domain/entities.py
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, List, Optional
from uuid import UUID, uuid4


class TrackingMethod(str, Enum):
    NUMERIC = 'input_numbers'
    DAILY_COMPLETION = 'track_days_completed'
    LIST = 'input_list'


class GoalType(str, Enum):
    LIST_TRACKER = 'list_tracker'
    DAILY_TRACKER = 'daily_tracker'
    LIST_CREATED_BY_USER = 'list_created_by_user'


class GoalMode(str, Enum):
    CHALLENGE = 'challenge'
    FRIENDLY = 'friendly'


class GoalStatus(str, Enum):
    ACTIVE = 'active'
    PENDING_FINISH = 'pending_finish'
    FINISHED = 'finished'


# Id użytkownika jest dla domeny nieprzezroczysty (w Django to int z auth.User)
UserId = Any


@dataclass
class ListEntry:
    """Pojedynczy wpis listy. Dla daily_tracker z ilością w `title` siedzi liczba."""
    title: str
    date: datetime
    id: UUID = field(default_factory=uuid4)


@dataclass
class GoalEntity:
    id: Optional[UUID]
    name: str
    tracking_method: TrackingMethod
    creator_id: UserId
    buddy_id: Optional[UserId] = None

    # Odpowiedzi z kwestionariusza
    goal_type: Optional[str] = None
    task_being_tracked: Optional[str] = None
    list_items: Optional[List[str]] = None  # oryginalna lista (list_created_by_user)
    keep_streak: Optional[bool] = None
    track_daily_quantity: Optional[bool] = None
    unit_tracked: Optional[str] = None

    # Tryb challenge
    challenge_or_friendly: Optional[str] = None
    winning_condition: Optional[str] = None
    winning_number: Optional[int] = None
    end_date: Optional[date] = None
    winners_prize: Optional[str] = None

    # Cykl życia (None == active)
    goal_status: Optional[GoalStatus] = None
    winner_user_id: Optional[UserId] = None
    loser_user_id: Optional[UserId] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_challenge(self) -> bool:
        return self.challenge_or_friendly == GoalMode.CHALLENGE.value

    @property
    def has_buddy(self) -> bool:
        return self.buddy_id is not None

    @property
    def participant_ids(self) -> List[UserId]:
        if self.buddy_id is None:
            return [self.creator_id]
        return [self.creator_id, self.buddy_id]

    def other_participant(self, user_id: UserId) -> Optional[UserId]:
        if user_id == self.creator_id:
            return self.buddy_id
        if user_id == self.buddy_id:
            return self.creator_id
        return None


@dataclass
class GoalProgressEntity:
    id: Optional[UUID]
    goal_id: UUID
    user_id: UserId
    numeric_value: Optional[float] = None
    completed_days: List[str] = field(default_factory=list)  # 'YYYY-MM-DD'
    list_items: List[ListEntry] = field(default_factory=list)
    has_seen_winner_message: bool = False
    updated_at: Optional[datetime] = None

    @classmethod
    def empty(cls, goal_id: UUID, user_id: UserId) -> 'GoalProgressEntity':
        """Postęp zastępczy dla uczestnika, który jeszcze nic nie zapisał."""
        return cls(id=None, goal_id=goal_id, user_id=user_id)


# Pola, które może nadpisać uczestnik (semantyka replace, nie merge)
PROGRESS_DELTA_FIELDS = ('numeric_value', 'completed_days', 'list_items')


@dataclass
class ProgressDelta:
    numeric_value: Optional[float] = None
    completed_days: Optional[List[str]] = None
    list_items: Optional[List[ListEntry]] = None

    def as_fields(self) -> dict:
        """Tylko pola faktycznie podane - każde zastępuje zapisaną wartość w całości."""
        return {
            name: getattr(self, name)
            for name in PROGRESS_DELTA_FIELDS
            if getattr(self, name) is not None
        }

    def is_empty(self) -> bool:
        return not self.as_fields()
