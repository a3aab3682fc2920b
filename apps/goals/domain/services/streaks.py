# apps/goals/domain/services/streaks.py
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Set

DAY_FORMAT = '%Y-%m-%d'


@dataclass(frozen=True)
class StreakResult:
    current: int
    longest: int


def parse_day(value) -> Optional[date]:
    """'YYYY-MM-DD' -> date. Śmieci w danych to None, nie wyjątek."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value).strip(), DAY_FORMAT).date()
    except ValueError:
        return None


def format_day(day: date) -> str:
    return day.strftime(DAY_FORMAT)


def parse_days(values: Iterable) -> Set[date]:
    days = set()
    for value in values or ():
        day = parse_day(value)
        if day is not None:
            days.add(day)
    return days


def calculate_streak(completed_days: Iterable, today: Optional[date] = None) -> StreakResult:
    """
    Liczy bieżący i najdłuższy ciąg kolejnych dni kalendarzowych.
    Bieżący ciąg musi kończyć się dokładnie dzisiaj - jeśli dziś nie ma wpisu, wynosi 0.
    """
    days = parse_days(completed_days)
    if not days:
        return StreakResult(current=0, longest=0)

    today = today or date.today()

    # 1. Najdłuższy ciąg (po posortowaniu)
    ordered = sorted(days)
    longest = 1
    run = 1
    for prev, day in zip(ordered, ordered[1:]):
        if day - prev == timedelta(days=1):
            run += 1
        else:
            run = 1
        longest = max(longest, run)

    # 2. Bieżący ciąg - cofamy się od dziś dzień po dniu
    current = 0
    check = today
    while check in days:
        current += 1
        check -= timedelta(days=1)

    return StreakResult(current=current, longest=longest)
