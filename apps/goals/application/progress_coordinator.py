# apps/goals/application/progress_coordinator.py
"""
Koordynator aktualizacji postępu.

Przepływ jednego wywołania: zapis postępu -> powiadomienie drugiej strony ->
(dla challenge) ocena zwycięzcy -> przejście cyklu życia -> powiadomienie obu stron.

Brak blokad i transakcji wokół oceny: jeśli obaj uczestnicy przekroczą próg
w tym samym momencie, każde wywołanie czyta stan niezależnie. Jedyne
ograniczenie szkód to no-op przejścia active -> pending_finish, gdy cel jest
już rozstrzygnięty (wygrywa pierwszy zapis). Skutki uboczne (powiadomienia,
profile, ocena po zapisie) są best-effort: logujemy i idziemy dalej.
"""
import logging
from datetime import date
from typing import List, Optional
from uuid import UUID

from django.conf import settings
from django.utils import timezone
from django.utils.module_loading import import_string

from apps.core.ports.profiles import IProfileDirectory
from apps.goals.domain.entities import GoalEntity, GoalProgressEntity, ProgressDelta, UserId
from apps.goals.domain.exceptions import GoalActionNotAllowed, GoalNotFound
from apps.goals.domain.services.lifecycle import GoalLifecycle
from apps.goals.domain.services.winning_conditions import evaluate_winner
from apps.goals.ports.repositories import IGoalRepository
from apps.notifications.domain.entities import NotificationEntity, NotificationType
from apps.notifications.ports.sinks import INotificationSink

logger = logging.getLogger(__name__)

DEFAULT_DISPLAY_NAME = "Your buddy"
GOAL_UPDATE_TITLE = "Goal Update"
GOAL_COMPLETED_TITLE = "Goal Completed"


def attempt(label: str, fn, *args, **kwargs):
    """Wywołuje skutek uboczny; błąd logujemy i połykamy (zwraca None)."""
    try:
        return fn(*args, **kwargs)
    except Exception:
        logger.exception("Best-effort step failed: %s", label)
        return None


def progress_update_message(updater_name: str, goal_name: str) -> str:
    return f'{updater_name} updated progress on "{goal_name}"'


def goal_completed_message(goal_name: str) -> str:
    # Ten sam tekst dla obu stron - nie zdradza, kto wygrał
    return f'The "{goal_name}" goal has been completed. Check it to see the results!'


class ProgressUpdateCoordinator:
    def __init__(self,
                 repository: IGoalRepository,
                 notification_sink: INotificationSink,
                 profiles: Optional[IProfileDirectory] = None,
                 lifecycle: Optional[GoalLifecycle] = None,
                 default_display_name: str = DEFAULT_DISPLAY_NAME):
        self.repository = repository
        self.notification_sink = notification_sink
        self.profiles = profiles
        self.lifecycle = lifecycle or GoalLifecycle()
        self.default_display_name = default_display_name

    # --- Operacje publiczne ---

    def submit_progress(self, goal_id: UUID, user_id: UserId, delta: ProgressDelta,
                        today: Optional[date] = None) -> GoalProgressEntity:
        """Zapisuje postęp uczestnika i uruchamia rozstrzyganie challenge'a."""
        # Cel musi istnieć - to jedyny twardy błąd (bez osieroconych wierszy postępu)
        goal = self._require_goal(goal_id)

        # 1-2. Zapis (każde podane pole zastępuje zapisaną wartość)
        progress = self.repository.upsert_progress(goal_id, user_id, delta.as_fields())

        # 3. Powiadomienie drugiej strony
        self._notify_other_participants(goal, user_id)

        # 4. Ocena zwycięzcy
        if goal.is_challenge:
            attempt("winner check", self.check_for_winner, goal_id, today=today)

        return progress

    def check_for_winner(self, goal_id: UUID, today: Optional[date] = None) -> Optional[UserId]:
        """
        Ocenia challenge na świeżo odczytanym stanie. Zwraca id zwycięzcy, jeśli
        to wywołanie przeprowadziło przejście active -> pending_finish.
        """
        goal = self._require_goal(goal_id)
        if not goal.is_challenge or goal.buddy_id is None:
            return None

        creator_progress = self.repository.get_progress(goal_id, goal.creator_id)
        buddy_progress = self.repository.get_progress(goal_id, goal.buddy_id)
        winner_id = evaluate_winner(goal, creator_progress, buddy_progress, today=today or self._today())

        update = self.lifecycle.declare_winner(goal, winner_id)
        if update is None:
            return None

        goal = self.repository.update_goal(goal_id, update)
        self._notify_goal_completed(goal)
        return winner_id

    def mark_winner_message_seen(self, goal_id: UUID, user_id: UserId) -> GoalEntity:
        """Uczestnik zobaczył wynik; gdy zobaczyli obaj - cel przechodzi w finished."""
        goal = self._require_goal(goal_id)
        if user_id not in goal.participant_ids:
            raise GoalActionNotAllowed(f"User {user_id} is not a participant of goal {goal_id}")

        progress = self.repository.get_progress(goal_id, user_id)
        if progress is None or not progress.has_seen_winner_message:
            self.repository.upsert_progress(goal_id, user_id, {'has_seen_winner_message': True})

        update = self.lifecycle.finish_if_acknowledged(goal, self.repository.list_progress(goal_id))
        if update is not None:
            goal = self.repository.update_goal(goal_id, update)
        return goal

    def finish_goal(self, goal_id: UUID, user_id: UserId) -> GoalEntity:
        """Ręczne zamknięcie rozstrzygniętego celu przez twórcę."""
        goal = self._require_goal(goal_id)
        update = self.lifecycle.finish_by_creator(goal, user_id)
        if update is not None:
            goal = self.repository.update_goal(goal_id, update)
        return goal

    def sweep_expired_challenges(self, now=None) -> List[UUID]:
        """Dla challenge'y po dacie końcowej uruchamia ocenę zwycięzcy (wywołuje scheduler)."""
        today = self._as_day(now)
        resolved = []
        for goal in self.repository.list_expired_challenges(today):
            winner_id = attempt(f"sweep goal {goal.id}", self.check_for_winner, goal.id, today=today)
            if winner_id is not None:
                resolved.append(goal.id)
        logger.info("Sweep %s: %d challenge(s) resolved", today, len(resolved))
        return resolved

    # --- Pomocnicze ---

    def _require_goal(self, goal_id: UUID) -> GoalEntity:
        goal = self.repository.get_goal(goal_id)
        if goal is None:
            raise GoalNotFound(goal_id)
        return goal

    @staticmethod
    def _today() -> date:
        return timezone.localdate()

    def _as_day(self, now) -> date:
        if now is None:
            return self._today()
        if hasattr(now, 'date') and callable(now.date):
            return now.date()
        return now

    def _display_name(self, user_id: UserId) -> str:
        if self.profiles is None:
            return self.default_display_name
        name = attempt(f"profile lookup {user_id}", self.profiles.get_display_name, user_id)
        return name or self.default_display_name

    def _notify_other_participants(self, goal: GoalEntity, updater_id: UserId) -> None:
        recipients = []
        if goal.buddy_id is not None and updater_id != goal.buddy_id:
            recipients.append(goal.buddy_id)
        if updater_id != goal.creator_id:
            recipients.append(goal.creator_id)
        if not recipients:
            return

        message = progress_update_message(self._display_name(updater_id), goal.name)
        for recipient_id in recipients:
            self._dispatch(NotificationEntity(
                id=None,
                user_id=recipient_id,
                type=NotificationType.GOAL_UPDATE,
                title=GOAL_UPDATE_TITLE,
                message=message,
                related_user_id=updater_id,
                related_goal_id=goal.id,
            ))

    def _notify_goal_completed(self, goal: GoalEntity) -> None:
        message = goal_completed_message(goal.name)
        for recipient_id in goal.participant_ids:
            self._dispatch(NotificationEntity(
                id=None,
                user_id=recipient_id,
                type=NotificationType.GOAL_UPDATE,
                title=GOAL_COMPLETED_TITLE,
                message=message,
                related_goal_id=goal.id,
            ))

    def _dispatch(self, notification: NotificationEntity) -> None:
        # Zapis i dostarczenie mogą zawieść niezależnie - żadne nie przerywa operacji
        stored = attempt(f"store notification for {notification.user_id}",
                         self.repository.create_notification, notification)
        attempt(f"send notification to {notification.user_id}",
                self.notification_sink.send, stored or notification)


def build_default_coordinator() -> ProgressUpdateCoordinator:
    """Składa koordynator z adapterów Django wg settings.ACCOUNTABILITY."""
    from apps.core.adapters.profile_directory import DjangoProfileDirectory
    from apps.goals.adapters.orm_repositories import DjangoGoalRepository

    config = getattr(settings, 'ACCOUNTABILITY', {})
    sink_class = import_string(config.get(
        'NOTIFICATION_SINK', 'apps.notifications.adapters.logging_sink.LoggingNotificationSink'))
    return ProgressUpdateCoordinator(
        repository=DjangoGoalRepository(),
        notification_sink=sink_class(),
        profiles=DjangoProfileDirectory(),
        default_display_name=config.get('DEFAULT_DISPLAY_NAME', DEFAULT_DISPLAY_NAME),
    )
