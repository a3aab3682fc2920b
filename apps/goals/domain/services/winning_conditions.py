# apps/goals/domain/services/winning_conditions.py
"""
Rozstrzyganie challenge'y: kto wygrał (jeśli ktokolwiek).

Warunek zwycięstwa jest zapisany jako tekst (id opcji z kwestionariusza albo
etykieta ze starszych rekordów), więc najpierw mapujemy go na zamkniętą listę
`WinningCondition` luźnym dopasowaniem podciągów, a dopiero potem rozstrzygamy.
Wynik `None` oznacza "jeszcze brak zwycięzcy" - to nie jest błąd.
"""
import math
from datetime import date
from enum import Enum
from typing import Callable, Optional

from apps.goals.domain.entities import (
    GoalEntity,
    GoalProgressEntity,
    GoalType,
    UserId,
)
from apps.goals.domain.services.streaks import calculate_streak, parse_days


class WinningCondition(str, Enum):
    FIRST_TO_REACH_X = 'first_to_reach_x'
    FIRST_TO_FINISH = 'first_to_finish'
    FIRST_TO_COMPLETE_X_AMOUNT = 'first_to_complete_x_amount'
    FIRST_TO_REACH_X_DAYS_STREAK = 'first_to_reach_x_days_streak'
    MOST_BY_END_DATE = 'most_by_end_date'
    MOST_DAYS_BY_END_DATE = 'most_days_by_end_date'
    MOST_AMOUNT_BY_END_DATE = 'most_amount_by_end_date'
    LONGEST_STREAK_BY_END_DATE = 'longest_streak_by_end_date'

    @property
    def requires_target(self) -> bool:
        return self in TARGET_CONDITIONS

    @property
    def requires_end_date(self) -> bool:
        return self in END_DATE_CONDITIONS

    @classmethod
    def from_label(cls, text: Optional[str]) -> Optional['WinningCondition']:
        """
        Luźne dopasowanie (bez wielkości liter, po podciągach) id albo etykiety.
        Kolejność ma znaczenie: najpierw warianty bardziej szczegółowe.
        """
        if not text:
            return None
        lc = text.strip().lower()
        for condition, matches in _LABEL_MATCHERS:
            if matches(lc):
                return condition
        return None


TARGET_CONDITIONS = frozenset({
    WinningCondition.FIRST_TO_REACH_X,
    WinningCondition.FIRST_TO_COMPLETE_X_AMOUNT,
    WinningCondition.FIRST_TO_REACH_X_DAYS_STREAK,
})

END_DATE_CONDITIONS = frozenset({
    WinningCondition.MOST_BY_END_DATE,
    WinningCondition.MOST_DAYS_BY_END_DATE,
    WinningCondition.MOST_AMOUNT_BY_END_DATE,
    WinningCondition.LONGEST_STREAK_BY_END_DATE,
})


def _mentions_end_date(lc: str) -> bool:
    return 'end date' in lc or 'end_date' in lc


_LABEL_MATCHERS = [
    (WinningCondition.FIRST_TO_REACH_X_DAYS_STREAK,
     lambda lc: 'first_to_reach_x_days_streak' in lc or ('first to reach' in lc and 'streak' in lc)),
    (WinningCondition.FIRST_TO_COMPLETE_X_AMOUNT,
     lambda lc: 'first_to_complete_x_amount' in lc or 'first to complete' in lc
     or 'first person to complete' in lc),
    (WinningCondition.FIRST_TO_FINISH,
     lambda lc: 'first_to_finish' in lc or 'first to finish' in lc),
    (WinningCondition.FIRST_TO_REACH_X,
     lambda lc: 'first_to_reach_x' in lc or 'first to reach' in lc),
    (WinningCondition.LONGEST_STREAK_BY_END_DATE,
     lambda lc: 'longest_streak_by_end_date' in lc or ('longest streak' in lc and _mentions_end_date(lc))),
    (WinningCondition.MOST_DAYS_BY_END_DATE,
     lambda lc: 'most_days_by_end_date' in lc or ('most days' in lc and _mentions_end_date(lc))),
    (WinningCondition.MOST_AMOUNT_BY_END_DATE,
     lambda lc: 'most_amount_by_end_date' in lc or ('most amount' in lc and _mentions_end_date(lc))),
    (WinningCondition.MOST_BY_END_DATE,
     lambda lc: 'most_by_end_date' in lc or ('most' in lc and _mentions_end_date(lc))),
]


# --- Metryki uczestnika ---

def _parse_quantity(title) -> Optional[float]:
    try:
        value = float(str(title).strip())
    except (TypeError, ValueError):
        return None
    # "nan" i "inf" to też śmieci, nie ilość
    return value if math.isfinite(value) else None


def quantity_total(goal: GoalEntity, progress: GoalProgressEntity) -> float:
    """Suma ilości z wpisów listy; gdy żaden tytuł nie jest liczbą - licznik numeric_value."""
    quantities = [_parse_quantity(item.title) for item in progress.list_items]
    if any(q is not None for q in quantities):
        return sum(q for q in quantities if q is not None)
    return float(progress.numeric_value or 0)


def completed_day_count(progress: GoalProgressEntity) -> int:
    return len(parse_days(progress.completed_days))


def current_count(goal: GoalEntity, progress: GoalProgressEntity) -> float:
    if goal.goal_type == GoalType.DAILY_TRACKER.value:
        if goal.track_daily_quantity:
            return quantity_total(goal, progress)
        return completed_day_count(progress)
    # list_tracker, list_created_by_user (i nieznane typy) - liczba wpisów
    return len(progress.list_items)


# --- Reguły rozstrzygania ---

def _first_to_reach(creator_id, creator_value, buddy_id, buddy_value, target) -> Optional[UserId]:
    if creator_value >= target and buddy_value < target:
        return creator_id
    if buddy_value >= target and creator_value < target:
        return buddy_id
    # Obaj naraz albo nikt - brak zwycięzcy przy tym sprawdzeniu
    return None


def _strictly_more(creator_id, creator_value, buddy_id, buddy_value) -> Optional[UserId]:
    if creator_value > buddy_value:
        return creator_id
    if buddy_value > creator_value:
        return buddy_id
    return None


def _metric_for(condition: WinningCondition, today: date) -> Callable[[GoalEntity, GoalProgressEntity], float]:
    if condition == WinningCondition.FIRST_TO_REACH_X_DAYS_STREAK:
        return lambda goal, progress: calculate_streak(progress.completed_days, today).current
    if condition == WinningCondition.LONGEST_STREAK_BY_END_DATE:
        return lambda goal, progress: calculate_streak(progress.completed_days, today).longest
    if condition == WinningCondition.MOST_DAYS_BY_END_DATE:
        return lambda goal, progress: completed_day_count(progress)
    if condition in (WinningCondition.MOST_AMOUNT_BY_END_DATE, WinningCondition.FIRST_TO_COMPLETE_X_AMOUNT):
        return quantity_total
    return current_count


def evaluate_winner(
        goal: GoalEntity,
        creator_progress: Optional[GoalProgressEntity],
        buddy_progress: Optional[GoalProgressEntity],
        today: Optional[date] = None
    ) -> Optional[UserId]:
    """Zwraca id zwycięzcy albo None (brak zwycięzcy na ten moment)."""
    if not goal.is_challenge or goal.buddy_id is None:
        return None

    condition = WinningCondition.from_label(goal.winning_condition)
    if condition is None:
        return None

    today = today or date.today()

    # Brak wiersza postępu to pusty postęp, nie błąd
    creator_progress = creator_progress or GoalProgressEntity.empty(goal.id, goal.creator_id)
    buddy_progress = buddy_progress or GoalProgressEntity.empty(goal.id, goal.buddy_id)

    metric = _metric_for(condition, today)
    creator_value = metric(goal, creator_progress)
    buddy_value = metric(goal, buddy_progress)

    if condition == WinningCondition.FIRST_TO_FINISH:
        if goal.list_items is None:
            return None
        return _first_to_reach(goal.creator_id, creator_value, goal.buddy_id, buddy_value, len(goal.list_items))

    if condition in TARGET_CONDITIONS:
        if goal.winning_number is None:
            return None
        return _first_to_reach(goal.creator_id, creator_value, goal.buddy_id, buddy_value, goal.winning_number)

    # Warunki "do daty końcowej" - rozstrzygamy dopiero gdy dziś >= end_date
    if goal.end_date is None or today < goal.end_date:
        return None
    return _strictly_more(goal.creator_id, creator_value, goal.buddy_id, buddy_value)
