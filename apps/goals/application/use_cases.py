# apps/goals/application/use_cases.py
from dataclasses import dataclass

from apps.goals.domain.entities import GoalEntity, GoalMode, GoalType, UserId
from apps.goals.domain.questionnaire import AnswerSheet
from apps.goals.ports.repositories import IGoalRepository


@dataclass
class CreateGoalInput:
    answers: AnswerSheet
    creator_id: UserId


class CreateGoalFromAnswersUseCase:
    def __init__(self, repository: IGoalRepository):
        self.repository = repository

    def execute(self, input_dto: CreateGoalInput) -> GoalEntity:
        answers = input_dto.answers
        answers.validate()

        is_challenge = answers.is_challenge
        is_daily = answers.goal_type == GoalType.DAILY_TRACKER.value
        track_quantity = answers.track_daily_quantity if is_daily else None
        goal = GoalEntity(
            id=None,
            name=answers.goal_name.strip(),
            tracking_method=answers.tracking_method(),
            creator_id=input_dto.creator_id,
            buddy_id=answers.buddy_id,
            goal_type=answers.goal_type,
            # Pola typu celu tylko dla tego typu; arkusz może trzymać odpowiedzi z porzuconej gałęzi
            task_being_tracked=answers.task_being_tracked if answers.goal_type == GoalType.LIST_TRACKER.value else None,
            list_items=answers.list_items if answers.goal_type == GoalType.LIST_CREATED_BY_USER.value else None,
            keep_streak=answers.keep_streak if is_daily else None,
            track_daily_quantity=track_quantity,
            unit_tracked=answers.unit_tracked if track_quantity else None,
            challenge_or_friendly=answers.challenge_or_friendly or GoalMode.FRIENDLY.value,
            # Pola challenge'a tylko gdy to challenge
            winning_condition=answers.selected_condition().value if is_challenge else None,
            winning_number=answers.winning_number if is_challenge else None,
            end_date=answers.end_date if is_challenge else None,
            winners_prize=answers.winners_prize if is_challenge else None,
        )
        goal = self.repository.create_goal(goal)

        # Puste wiersze postępu od razu dla obu uczestników
        for user_id in goal.participant_ids:
            self.repository.upsert_progress(goal.id, user_id, {})
        return goal
