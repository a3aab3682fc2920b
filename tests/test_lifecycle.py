import pytest

from apps.goals.domain.entities import GoalMode, GoalStatus
from apps.goals.domain.exceptions import GoalActionNotAllowed
from apps.goals.domain.services.lifecycle import GoalLifecycle
from tests.factories import BUDDY, CREATOR, make_goal, make_progress


@pytest.fixture
def lifecycle():
    return GoalLifecycle()


class TestDeclareWinner:
    def test_absent_status_is_active(self, lifecycle):
        assert lifecycle.status_of(make_goal()) == GoalStatus.ACTIVE

    def test_active_to_pending_finish(self, lifecycle):
        update = lifecycle.declare_winner(make_goal(), BUDDY)
        assert update == {
            'goal_status': GoalStatus.PENDING_FINISH,
            'winner_user_id': BUDDY,
            'loser_user_id': CREATOR,
        }

    def test_no_winner_no_update(self, lifecycle):
        assert lifecycle.declare_winner(make_goal(), None) is None

    def test_already_decided_is_noop(self, lifecycle):
        goal = make_goal(goal_status=GoalStatus.PENDING_FINISH, winner_user_id=CREATOR, loser_user_id=BUDDY)
        assert lifecycle.declare_winner(goal, BUDDY) is None

    def test_friendly_and_solo_goals_stay_active(self, lifecycle):
        assert lifecycle.declare_winner(make_goal(challenge_or_friendly=GoalMode.FRIENDLY.value), CREATOR) is None
        assert lifecycle.declare_winner(make_goal(buddy_id=None), CREATOR) is None

    def test_outsider_cannot_win(self, lifecycle):
        assert lifecycle.declare_winner(make_goal(), 99) is None


class TestFinish:
    def pending_goal(self):
        return make_goal(goal_status=GoalStatus.PENDING_FINISH, winner_user_id=CREATOR, loser_user_id=BUDDY)

    def test_waits_for_both_participants(self, lifecycle):
        progresses = [make_progress(CREATOR, has_seen_winner_message=True), make_progress(BUDDY)]
        assert lifecycle.finish_if_acknowledged(self.pending_goal(), progresses) is None

    def test_both_seen_finishes(self, lifecycle):
        progresses = [
            make_progress(CREATOR, has_seen_winner_message=True),
            make_progress(BUDDY, has_seen_winner_message=True),
        ]
        assert lifecycle.finish_if_acknowledged(self.pending_goal(), progresses) == {
            'goal_status': GoalStatus.FINISHED,
        }

    def test_finished_is_terminal(self, lifecycle):
        goal = make_goal(goal_status=GoalStatus.FINISHED, winner_user_id=CREATOR, loser_user_id=BUDDY)
        progresses = [
            make_progress(CREATOR, has_seen_winner_message=True),
            make_progress(BUDDY, has_seen_winner_message=True),
        ]
        assert lifecycle.finish_if_acknowledged(goal, progresses) is None
        assert lifecycle.declare_winner(goal, BUDDY) is None
        assert lifecycle.finish_by_creator(goal, CREATOR) is None

    def test_active_goal_cannot_be_acknowledged(self, lifecycle):
        progresses = [make_progress(CREATOR, has_seen_winner_message=True)]
        assert lifecycle.finish_if_acknowledged(make_goal(), progresses) is None

    def test_creator_may_close_pending_goal(self, lifecycle):
        assert lifecycle.finish_by_creator(self.pending_goal(), CREATOR) == {'goal_status': GoalStatus.FINISHED}

    def test_creator_cannot_skip_the_verdict(self, lifecycle):
        assert lifecycle.finish_by_creator(make_goal(), CREATOR) is None

    def test_buddy_cannot_close(self, lifecycle):
        with pytest.raises(GoalActionNotAllowed):
            lifecycle.finish_by_creator(self.pending_goal(), BUDDY)
