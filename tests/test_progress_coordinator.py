"""
Koordynator na repozytorium w pamięci: zapis postępu, powiadomienia, rozstrzyganie.
"""
from datetime import datetime, timedelta

import pytest
import pytz

from apps.goals.application.progress_coordinator import ProgressUpdateCoordinator, attempt
from apps.goals.domain.entities import GoalMode, GoalStatus, GoalType, ProgressDelta, TrackingMethod
from apps.goals.domain.exceptions import GoalActionNotAllowed, GoalNotFound
from apps.notifications.domain.entities import NotificationType
from tests.factories import BUDDY, CREATOR, TODAY, FailingSink, StaticProfiles, entries, make_goal

COMPLETED = 'The "Read More Books" goal has been completed. Check it to see the results!'


def titled(notifications, title):
    return [n for n in notifications if n.title == title]


class TestSubmitProgress:
    def test_replaces_supplied_fields_only(self, coordinator, repo):
        goal = repo.create_goal(make_goal(challenge_or_friendly=GoalMode.FRIENDLY.value))

        coordinator.submit_progress(goal.id, CREATOR, ProgressDelta(numeric_value=3, list_items=entries('a', 'b')))
        progress = coordinator.submit_progress(goal.id, CREATOR, ProgressDelta(list_items=entries('c')))

        assert progress.numeric_value == 3
        assert [e.title for e in progress.list_items] == ['c']

    def test_buddy_update_notifies_creator_only(self, coordinator, repo, sink):
        goal = repo.create_goal(make_goal())

        coordinator.submit_progress(goal.id, BUDDY, ProgressDelta(list_items=entries(1)), today=TODAY)

        assert len(sink.sent) == 1
        notification = sink.sent[0]
        assert notification.user_id == CREATOR
        assert notification.type == NotificationType.GOAL_UPDATE
        assert notification.title == "Goal Update"
        assert notification.message == 'Bob updated progress on "Read More Books"'
        assert notification.related_goal_id == goal.id
        assert repo.notifications == sink.sent

    def test_creator_update_notifies_buddy_only(self, coordinator, repo, sink):
        goal = repo.create_goal(make_goal())

        coordinator.submit_progress(goal.id, CREATOR, ProgressDelta(list_items=entries(1)), today=TODAY)

        assert [n.user_id for n in sink.sent] == [BUDDY]
        assert sink.sent[0].message == 'Alice updated progress on "Read More Books"'

    def test_solo_goal_sends_nothing(self, coordinator, repo, sink):
        goal = repo.create_goal(make_goal(buddy_id=None, challenge_or_friendly=GoalMode.FRIENDLY.value))

        coordinator.submit_progress(goal.id, CREATOR, ProgressDelta(list_items=entries(1)))

        assert sink.sent == []

    def test_missing_goal_is_a_hard_failure(self, coordinator, repo):
        with pytest.raises(GoalNotFound):
            coordinator.submit_progress('8b9f7c0e-0000-4000-8000-000000000000', CREATOR,
                                        ProgressDelta(numeric_value=1))
        assert repo.progress == {}

    def test_failing_sink_does_not_fail_the_update(self, repo, profiles):
        coordinator = ProgressUpdateCoordinator(repo, FailingSink(), profiles)
        goal = repo.create_goal(make_goal(winning_number=1))

        progress = coordinator.submit_progress(goal.id, CREATOR, ProgressDelta(list_items=entries(1)), today=TODAY)

        assert len(progress.list_items) == 1
        # Zapis powiadomień i przejście stanu przeszły mimo awarii doręczenia
        assert repo.get_goal(goal.id).goal_status == GoalStatus.PENDING_FINISH
        assert len(repo.notifications) == 3

    def test_profile_lookup_failure_uses_fallback_name(self, repo, sink):
        coordinator = ProgressUpdateCoordinator(repo, sink, StaticProfiles(fail=True))
        goal = repo.create_goal(make_goal())

        coordinator.submit_progress(goal.id, BUDDY, ProgressDelta(list_items=entries(1)), today=TODAY)

        assert sink.sent[0].message == 'Your buddy updated progress on "Read More Books"'

    def test_unknown_display_name_uses_fallback(self, repo, sink):
        coordinator = ProgressUpdateCoordinator(repo, sink, StaticProfiles({}), default_display_name="Partner")
        goal = repo.create_goal(make_goal())

        coordinator.submit_progress(goal.id, BUDDY, ProgressDelta(list_items=entries(1)), today=TODAY)

        assert sink.sent[0].message == 'Partner updated progress on "Read More Books"'


class TestChallengeResolution:
    def test_first_to_reach_five_books(self, coordinator, repo, sink):
        goal = repo.create_goal(make_goal(winning_condition="First to reach 5 books", winning_number=5))

        coordinator.submit_progress(goal.id, BUDDY, ProgressDelta(list_items=entries(1, 2)), today=TODAY)
        coordinator.submit_progress(goal.id, CREATOR, ProgressDelta(list_items=entries(*range(5))), today=TODAY)

        goal = repo.get_goal(goal.id)
        assert goal.goal_status == GoalStatus.PENDING_FINISH
        assert goal.winner_user_id == CREATOR
        assert goal.loser_user_id == BUDDY

        completed = titled(sink.sent, "Goal Completed")
        assert sorted(n.user_id for n in completed) == [CREATOR, BUDDY]
        assert {n.message for n in completed} == {COMPLETED}

    def test_streak_challenge(self, coordinator, repo):
        goal = repo.create_goal(make_goal(
            tracking_method=TrackingMethod.DAILY_COMPLETION,
            goal_type=GoalType.DAILY_TRACKER.value,
            keep_streak=True,
            winning_condition="First to reach 3 days streak",
            winning_number=3,
        ))
        days = [(TODAY - timedelta(days=i)).isoformat() for i in range(3)]

        coordinator.submit_progress(goal.id, BUDDY, ProgressDelta(completed_days=days), today=TODAY)

        assert repo.get_goal(goal.id).winner_user_id == BUDDY

    def test_friendly_goal_never_leaves_active(self, coordinator, repo, sink):
        goal = repo.create_goal(make_goal(challenge_or_friendly=GoalMode.FRIENDLY.value, winning_number=1))

        for user_id in (CREATOR, BUDDY, CREATOR):
            coordinator.submit_progress(goal.id, user_id, ProgressDelta(list_items=entries(*range(20))), today=TODAY)

        goal = repo.get_goal(goal.id)
        assert goal.goal_status is None
        assert goal.winner_user_id is None
        assert titled(sink.sent, "Goal Completed") == []

    def test_decided_goal_is_not_decided_again(self, coordinator, repo, sink):
        goal = repo.create_goal(make_goal(winning_number=2))
        coordinator.submit_progress(goal.id, CREATOR, ProgressDelta(list_items=entries(1, 2)), today=TODAY)

        # Buddy dogania później - pierwszy zapis wygrywa
        coordinator.submit_progress(goal.id, BUDDY, ProgressDelta(list_items=entries(1, 2, 3)), today=TODAY)
        assert coordinator.check_for_winner(goal.id, today=TODAY) is None

        goal = repo.get_goal(goal.id)
        assert goal.winner_user_id == CREATOR
        assert len(titled(sink.sent, "Goal Completed")) == 2

    def test_failed_winner_check_does_not_fail_the_update(self, coordinator, repo, monkeypatch):
        goal = repo.create_goal(make_goal(winning_number=1))

        def broken(*args, **kwargs):
            raise RuntimeError("store timeout")

        monkeypatch.setattr(repo, 'update_goal', broken)

        progress = coordinator.submit_progress(goal.id, CREATOR, ProgressDelta(list_items=entries(1)), today=TODAY)
        assert len(progress.list_items) == 1


class TestMarkWinnerMessageSeen:
    @pytest.fixture
    def decided_goal(self, coordinator, repo):
        goal = repo.create_goal(make_goal(winning_number=1))
        coordinator.submit_progress(goal.id, CREATOR, ProgressDelta(list_items=entries(1)), today=TODAY)
        return repo.get_goal(goal.id)

    def test_is_idempotent(self, coordinator, repo, decided_goal):
        first = coordinator.mark_winner_message_seen(decided_goal.id, CREATOR)
        second = coordinator.mark_winner_message_seen(decided_goal.id, CREATOR)

        assert first.goal_status == second.goal_status == GoalStatus.PENDING_FINISH
        assert repo.get_progress(decided_goal.id, CREATOR).has_seen_winner_message is True

    def test_both_participants_finish_the_goal(self, coordinator, repo, decided_goal):
        coordinator.mark_winner_message_seen(decided_goal.id, CREATOR)
        # Buddy nie ma jeszcze wiersza postępu - powstaje przy oznaczeniu
        goal = coordinator.mark_winner_message_seen(decided_goal.id, BUDDY)

        assert goal.goal_status == GoalStatus.FINISHED
        assert goal.winner_user_id == CREATOR

        again = coordinator.mark_winner_message_seen(decided_goal.id, BUDDY)
        assert again.goal_status == GoalStatus.FINISHED
        assert again.winner_user_id == CREATOR
        assert again.loser_user_id == BUDDY

    def test_missing_goal(self, coordinator):
        with pytest.raises(GoalNotFound):
            coordinator.mark_winner_message_seen('8b9f7c0e-0000-4000-8000-000000000000', CREATOR)

    def test_outsider_cannot_acknowledge(self, coordinator, repo, decided_goal):
        with pytest.raises(GoalActionNotAllowed):
            coordinator.mark_winner_message_seen(decided_goal.id, 99)

        assert repo.get_progress(decided_goal.id, 99) is None
        assert repo.get_goal(decided_goal.id).goal_status == GoalStatus.PENDING_FINISH

    def test_finish_goal_by_creator(self, coordinator, decided_goal):
        goal = coordinator.finish_goal(decided_goal.id, CREATOR)
        assert goal.goal_status == GoalStatus.FINISHED
        assert goal.winner_user_id == CREATOR


class TestSweepExpiredChallenges:
    def most_by_end_date(self, repo, creator_items, buddy_items, **overrides):
        data = dict(winning_condition='most_by_end_date', winning_number=None, end_date=TODAY - timedelta(days=1))
        data.update(overrides)
        goal = repo.create_goal(make_goal(**data))
        repo.upsert_progress(goal.id, CREATOR, {'list_items': entries(*range(creator_items))})
        repo.upsert_progress(goal.id, BUDDY, {'list_items': entries(*range(buddy_items))})
        return goal

    def test_resolves_expired_challenge(self, coordinator, repo, sink):
        goal = self.most_by_end_date(repo, 10, 4)
        now = datetime(2024, 3, 10, 6, 0, tzinfo=pytz.UTC)

        assert coordinator.sweep_expired_challenges(now=now) == [goal.id]
        assert repo.get_goal(goal.id).winner_user_id == CREATOR
        assert {n.message for n in sink.sent} == {COMPLETED}

        # Drugi przebieg niczego nie zmienia
        assert coordinator.sweep_expired_challenges(now=now) == []

    def test_skips_running_tied_and_friendly_goals(self, coordinator, repo):
        self.most_by_end_date(repo, 3, 1, end_date=TODAY + timedelta(days=5))
        self.most_by_end_date(repo, 3, 3)
        self.most_by_end_date(repo, 3, 1, challenge_or_friendly=GoalMode.FRIENDLY.value)

        assert coordinator.sweep_expired_challenges(now=TODAY) == []

    def test_one_broken_goal_does_not_stop_the_sweep(self, coordinator, repo, monkeypatch):
        broken = self.most_by_end_date(repo, 5, 1, end_date=TODAY - timedelta(days=2))
        healthy = self.most_by_end_date(repo, 1, 5)
        original = repo.get_progress

        def get_progress(goal_id, user_id):
            if str(goal_id) == str(broken.id):
                raise RuntimeError("corrupted row")
            return original(goal_id, user_id)

        monkeypatch.setattr(repo, 'get_progress', get_progress)

        assert coordinator.sweep_expired_challenges(now=TODAY) == [healthy.id]
        assert repo.get_goal(healthy.id).winner_user_id == BUDDY


def test_attempt_swallows_and_logs(caplog):
    def boom():
        raise ValueError("nope")

    assert attempt("demo", boom) is None
    assert "Best-effort step failed: demo" in caplog.text
    assert attempt("sum", sum, [1, 2]) == 3
