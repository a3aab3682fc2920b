# apps/goals/adapters/records.py
"""
Konwersja encji <-> rekordy magazynu (słowniki z kluczami snake_case).

Znaczniki czasu zapisujemy jako ISO-8601 z ułamkami sekund (UTC); przy
odczycie najpierw próbujemy formatu z ułamkami, potem pełnych sekund.
Nieczytelne dane nie wywracają odczytu - dostajemy wartość domyślną.
"""
from datetime import date, datetime
from typing import Optional
from uuid import UUID, uuid4

import pytz
from dateutil import parser as date_parser

from apps.goals.domain.entities import (
    GoalEntity,
    GoalProgressEntity,
    GoalStatus,
    ListEntry,
    TrackingMethod,
)
from apps.goals.domain.services.streaks import format_day, parse_day

_FRACTIONAL_FORMAT = '%Y-%m-%dT%H:%M:%S.%f%z'
_WHOLE_SECONDS_FORMAT = '%Y-%m-%dT%H:%M:%S%z'


def utc_now() -> datetime:
    return datetime.now(pytz.UTC)


def encode_timestamp(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    if value.tzinfo is None:
        value = pytz.UTC.localize(value)
    value = value.astimezone(pytz.UTC)
    return value.strftime('%Y-%m-%dT%H:%M:%S.') + f"{value.microsecond // 1000:03d}Z"


def decode_timestamp(value, default=None) -> Optional[datetime]:
    if value is None or value == '':
        return default
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = _parse_iso(str(value).strip())
        if parsed is None:
            return default
    if parsed.tzinfo is None:
        parsed = pytz.UTC.localize(parsed)
    return parsed


def _parse_iso(text: str) -> Optional[datetime]:
    for fmt in (_FRACTIONAL_FORMAT, _WHOLE_SECONDS_FORMAT):
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    # Inne warianty ISO (np. bez strefy, 7 cyfr ułamka z Postgresa)
    try:
        return date_parser.isoparse(text)
    except (ValueError, OverflowError):
        return None


def encode_day(value: Optional[date]) -> Optional[str]:
    return format_day(value) if value else None


def decode_day(value) -> Optional[date]:
    """end_date bywa zapisany jako 'YYYY-MM-DD' albo pełny timestamp."""
    if value is None or value == '':
        return None
    day = parse_day(value)
    if day is not None:
        return day
    stamp = decode_timestamp(value)
    return stamp.date() if stamp else None


def _decode_uuid(value) -> Optional[UUID]:
    if value is None or isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        return None


# --- Wpisy listy ---

def list_entry_to_record(entry: ListEntry) -> dict:
    return {
        'id': str(entry.id),
        'title': entry.title,
        'date': encode_timestamp(entry.date),
    }


def list_entry_from_record(record) -> ListEntry:
    # Starsze rekordy trzymały same tytuły (list_items: [String])
    if isinstance(record, str):
        return ListEntry(title=record, date=utc_now())
    return ListEntry(
        id=_decode_uuid(record.get('id')) or uuid4(),
        title=str(record.get('title', '')),
        date=decode_timestamp(record.get('date'), default=utc_now()),
    )


def list_entries_to_records(entries) -> list:
    return [list_entry_to_record(e) for e in entries or []]


def list_entries_from_records(records) -> list:
    return [list_entry_from_record(r) for r in records or []]


# --- Cel ---

def goal_to_record(goal: GoalEntity) -> dict:
    return {
        'id': str(goal.id) if goal.id else None,
        'name': goal.name,
        'tracking_method': TrackingMethod(goal.tracking_method).value,
        'creator_id': goal.creator_id,
        'buddy_id': goal.buddy_id,
        'goal_type': goal.goal_type,
        'task_being_tracked': goal.task_being_tracked,
        'list_items': list(goal.list_items) if goal.list_items is not None else None,
        'keep_streak': goal.keep_streak,
        'track_daily_quantity': goal.track_daily_quantity,
        'unit_tracked': goal.unit_tracked,
        'challenge_or_friendly': goal.challenge_or_friendly,
        'winning_condition': goal.winning_condition,
        'winning_number': goal.winning_number,
        'end_date': encode_day(goal.end_date),
        'winners_prize': goal.winners_prize,
        'goal_status': GoalStatus(goal.goal_status).value if goal.goal_status else None,
        'winner_user_id': goal.winner_user_id,
        'loser_user_id': goal.loser_user_id,
        'created_at': encode_timestamp(goal.created_at),
        'updated_at': encode_timestamp(goal.updated_at),
    }


def goal_from_record(record: dict) -> GoalEntity:
    status = record.get('goal_status')
    return GoalEntity(
        id=_decode_uuid(record.get('id')),
        name=record['name'],
        tracking_method=TrackingMethod(record['tracking_method']),
        creator_id=record['creator_id'],
        buddy_id=record.get('buddy_id'),
        goal_type=record.get('goal_type'),
        task_being_tracked=record.get('task_being_tracked'),
        list_items=record.get('list_items'),
        keep_streak=record.get('keep_streak'),
        track_daily_quantity=record.get('track_daily_quantity'),
        unit_tracked=record.get('unit_tracked'),
        challenge_or_friendly=record.get('challenge_or_friendly'),
        winning_condition=record.get('winning_condition'),
        winning_number=record.get('winning_number'),
        end_date=decode_day(record.get('end_date')),
        winners_prize=record.get('winners_prize'),
        goal_status=GoalStatus(status) if status else None,
        winner_user_id=record.get('winner_user_id'),
        loser_user_id=record.get('loser_user_id'),
        created_at=decode_timestamp(record.get('created_at'), default=utc_now()),
        updated_at=decode_timestamp(record.get('updated_at'), default=utc_now()),
    )


# --- Postęp ---

def progress_to_record(progress: GoalProgressEntity) -> dict:
    return {
        'id': str(progress.id) if progress.id else None,
        'goal_id': str(progress.goal_id),
        'user_id': progress.user_id,
        'numeric_value': progress.numeric_value,
        'completed_days': list(progress.completed_days or []),
        'list_items': list_entries_to_records(progress.list_items),
        'has_seen_winner_message': bool(progress.has_seen_winner_message),
        'updated_at': encode_timestamp(progress.updated_at),
    }


def progress_from_record(record: dict) -> GoalProgressEntity:
    return GoalProgressEntity(
        id=_decode_uuid(record.get('id')),
        goal_id=_decode_uuid(record.get('goal_id')),
        user_id=record['user_id'],
        numeric_value=record.get('numeric_value'),
        completed_days=list(record.get('completed_days') or []),
        list_items=list_entries_from_records(record.get('list_items')),
        has_seen_winner_message=bool(record.get('has_seen_winner_message') or False),
        updated_at=decode_timestamp(record.get('updated_at'), default=utc_now()),
    )
