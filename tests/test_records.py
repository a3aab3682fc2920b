from datetime import date, datetime
from uuid import UUID

import pytz

from apps.goals.adapters.records import (
    decode_day,
    decode_timestamp,
    encode_timestamp,
    goal_from_record,
    goal_to_record,
    list_entry_from_record,
    progress_from_record,
)
from apps.goals.domain.entities import GoalStatus, TrackingMethod
from tests.factories import BUDDY, CREATOR, make_goal

FALLBACK = datetime(2000, 1, 1, tzinfo=pytz.UTC)


class TestTimestamps:
    def test_encodes_with_milliseconds_in_utc(self):
        stamp = datetime(2024, 3, 10, 8, 30, 15, 123456, tzinfo=pytz.UTC)
        assert encode_timestamp(stamp) == '2024-03-10T08:30:15.123Z'

    def test_naive_values_are_treated_as_utc(self):
        assert encode_timestamp(datetime(2024, 3, 10, 8, 30)) == '2024-03-10T08:30:00.000Z'

    def test_decodes_fractional_seconds(self):
        decoded = decode_timestamp('2024-03-10T08:30:15.123Z')
        assert decoded == datetime(2024, 3, 10, 8, 30, 15, 123000, tzinfo=pytz.UTC)

    def test_falls_back_to_whole_seconds(self):
        decoded = decode_timestamp('2024-03-10T08:30:15Z')
        assert decoded == datetime(2024, 3, 10, 8, 30, 15, tzinfo=pytz.UTC)

    def test_accepts_other_iso_variants(self):
        decoded = decode_timestamp('2024-03-10T08:30:15.1234567+00:00')
        assert decoded.date() == date(2024, 3, 10)
        assert decoded.tzinfo is not None

    def test_garbage_yields_default(self):
        assert decode_timestamp('last tuesday', default=FALLBACK) == FALLBACK
        assert decode_timestamp(None, default=FALLBACK) == FALLBACK


class TestDays:
    def test_plain_day_and_timestamp(self):
        assert decode_day('2024-03-10') == date(2024, 3, 10)
        assert decode_day('2024-03-10T00:00:00.000Z') == date(2024, 3, 10)

    def test_garbage_is_absent(self):
        assert decode_day('soon') is None
        assert decode_day('') is None


class TestRecords:
    def test_goal_record_uses_snake_case_keys(self):
        goal = make_goal(id=UUID('2f1c8a3e-9b6d-4c51-a0f2-6d1e4b7c9a10'), end_date=date(2024, 6, 1),
                         goal_status=GoalStatus.PENDING_FINISH, winner_user_id=CREATOR, loser_user_id=BUDDY)
        record = goal_to_record(goal)

        assert record['id'] == '2f1c8a3e-9b6d-4c51-a0f2-6d1e4b7c9a10'
        assert record['tracking_method'] == 'input_list'
        assert record['end_date'] == '2024-06-01'
        assert record['goal_status'] == 'pending_finish'
        assert record['winner_user_id'] == CREATOR
        assert record['challenge_or_friendly'] == 'challenge'

    def test_goal_from_sparse_record(self):
        goal = goal_from_record({
            'id': '2f1c8a3e-9b6d-4c51-a0f2-6d1e4b7c9a10',
            'name': "Walk",
            'tracking_method': 'track_days_completed',
            'creator_id': CREATOR,
            'end_date': 'not a date',
            'updated_at': 'broken',
        })
        assert goal.tracking_method == TrackingMethod.DAILY_COMPLETION
        assert goal.goal_status is None
        assert goal.end_date is None
        assert goal.buddy_id is None
        assert goal.updated_at is not None

    def test_progress_from_record_tolerates_legacy_list(self):
        progress = progress_from_record({
            'goal_id': '2f1c8a3e-9b6d-4c51-a0f2-6d1e4b7c9a10',
            'user_id': BUDDY,
            'list_items': ['Dune', {'title': '5', 'date': '2024-03-10T08:30:15Z'}],
            'completed_days': None,
        })
        assert [e.title for e in progress.list_items] == ['Dune', '5']
        assert progress.list_items[1].date == datetime(2024, 3, 10, 8, 30, 15, tzinfo=pytz.UTC)
        assert progress.completed_days == []
        assert progress.has_seen_winner_message is False

    def test_list_entry_keeps_its_id(self):
        entry = list_entry_from_record({'id': '2f1c8a3e-9b6d-4c51-a0f2-6d1e4b7c9a10', 'title': 'x', 'date': None})
        assert entry.id == UUID('2f1c8a3e-9b6d-4c51-a0f2-6d1e4b7c9a10')
        assert entry.date is not None
