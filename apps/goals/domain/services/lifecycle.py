# apps/goals/domain/services/lifecycle.py
"""
Maszyna stanów celu: active -> pending_finish -> finished.

Każda metoda zwraca częściową aktualizację (słownik pól do zapisu) albo None,
gdy przejście nie ma zastosowania. Wywołanie w stanie docelowym to no-op,
więc można je bezpiecznie powtarzać (kolejne zapisy postępu, sweep).
"""
import logging
from typing import Dict, Iterable, Optional

from apps.goals.domain.entities import GoalEntity, GoalProgressEntity, GoalStatus, UserId
from apps.goals.domain.exceptions import GoalActionNotAllowed

logger = logging.getLogger(__name__)

GoalUpdate = Dict[str, object]


class GoalLifecycle:
    @staticmethod
    def status_of(goal: GoalEntity) -> GoalStatus:
        """Brak statusu traktujemy jak active."""
        if goal.goal_status is None:
            return GoalStatus.ACTIVE
        return GoalStatus(goal.goal_status)

    def declare_winner(self, goal: GoalEntity, winner_id: Optional[UserId]) -> Optional[GoalUpdate]:
        """active -> pending_finish (zapis zwycięzcy i przegranego)."""
        if winner_id is None:
            return None
        if not goal.is_challenge or goal.buddy_id is None:
            return None
        if self.status_of(goal) != GoalStatus.ACTIVE:
            # Już rozstrzygnięty - pierwszy zapis wygrywa
            return None

        loser_id = goal.other_participant(winner_id)
        if loser_id is None:
            logger.warning("Winner %s is not a participant of goal %s", winner_id, goal.id)
            return None

        logger.info("Goal %s: winner %s, status -> %s", goal.id, winner_id, GoalStatus.PENDING_FINISH.value)
        return {
            'goal_status': GoalStatus.PENDING_FINISH,
            'winner_user_id': winner_id,
            'loser_user_id': loser_id,
        }

    def finish_if_acknowledged(self, goal: GoalEntity,
                               progresses: Iterable[GoalProgressEntity]) -> Optional[GoalUpdate]:
        """pending_finish -> finished, gdy obaj uczestnicy widzieli komunikat o wyniku."""
        if self.status_of(goal) != GoalStatus.PENDING_FINISH:
            return None

        seen_by = {p.user_id for p in progresses if p.has_seen_winner_message}
        if not all(user_id in seen_by for user_id in goal.participant_ids):
            return None

        logger.info("Goal %s: both participants saw the result, status -> %s",
                    goal.id, GoalStatus.FINISHED.value)
        return {'goal_status': GoalStatus.FINISHED}

    def finish_by_creator(self, goal: GoalEntity, user_id: UserId) -> Optional[GoalUpdate]:
        """Twórca może zamknąć rozstrzygnięty cel bez czekania na buddy'ego."""
        if user_id != goal.creator_id:
            raise GoalActionNotAllowed("Only the goal creator can mark the goal as finished")
        if self.status_of(goal) != GoalStatus.PENDING_FINISH:
            return None

        logger.info("Goal %s finished by creator %s", goal.id, user_id)
        return {'goal_status': GoalStatus.FINISHED}
