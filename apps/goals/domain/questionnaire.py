# apps/goals/domain/questionnaire.py
"""
Kwestionariusz tworzenia celu - drzewo decyzyjne.

Przejścia są jawną tabelą (pytanie x istotna odpowiedź -> następne pytanie),
więc cały przepływ da się przetestować bez odtwarzania stanu UI.
Cofanie korzysta z historii odwiedzonych pytań, a nie z odwracania `next`.
"""
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from apps.goals.domain.entities import GoalMode, GoalType, TrackingMethod, UserId
from apps.goals.domain.exceptions import QuestionnaireValidationError
from apps.goals.domain.services.winning_conditions import WinningCondition


class QuestionType(str, Enum):
    TEXT_INPUT = 'text_input'
    MULTIPLE_CHOICE = 'multiple_choice'
    BUDDY_SELECTION = 'buddy_selection'
    LIST_INPUT = 'list_input'
    YES_NO = 'yes_no'
    UNIT_SELECTION = 'unit_selection'
    DATE_INPUT = 'date_input'
    NUMBER_INPUT = 'number_input'


class QuestionID(str, Enum):
    GOAL_NAME = 'goal_name'
    GOAL_TYPE = 'goal_type'
    BUDDY_OR_SOLO = 'buddy_or_solo'
    TASK_BEING_TRACKED = 'task_being_tracked'
    CHALLENGE_OR_FRIENDLY = 'challenge_or_friendly'
    WINNING_CONDITION = 'winning_condition'
    WINNERS_PRIZE = 'winners_prize'
    INSERT_LIST_ITEMS = 'insert_list_items'
    KEEP_STREAK = 'keep_streak'
    TRACK_DAILY_QUANTITY = 'track_daily_quantity'
    UNIT_TRACKED = 'unit_tracked'
    WINNING_NUMBER = 'winning_number'
    END_DATE = 'end_date'


class TrackingUnit(str, Enum):
    MILES = 'Mi'
    KILOMETERS = 'Km'
    MINUTES = 'Min'
    HOURS = 'Hr'
    PAGES = 'Pages'
    OTHER = 'Other'


@dataclass(frozen=True)
class QuestionOption:
    id: str
    title: str
    description: Optional[str] = None


@dataclass(frozen=True)
class ValidationRule:
    is_required: bool = True
    min_length: Optional[int] = None
    max_length: Optional[int] = None

    def check(self, text: Optional[str]) -> Optional[str]:
        """Zwraca komunikat błędu albo None."""
        text = '' if text is None else str(text).strip()
        if not text:
            return "This field is required" if self.is_required else None
        if self.min_length is not None and len(text) < self.min_length:
            return f"Must be at least {self.min_length} characters"
        if self.max_length is not None and len(text) > self.max_length:
            return f"Must be at most {self.max_length} characters"
        return None


@dataclass(frozen=True)
class Question:
    id: QuestionID
    type: QuestionType
    title: str
    description: Optional[str] = None
    options: Tuple[QuestionOption, ...] = ()
    placeholder: Optional[str] = None
    validation: Optional[ValidationRule] = None


QUESTIONS: Dict[QuestionID, Question] = {q.id: q for q in [
    Question(
        id=QuestionID.GOAL_NAME,
        type=QuestionType.TEXT_INPUT,
        title="What's the name of your goal?",
        description="Give your goal a memorable name",
        placeholder="e.g., Read More Books",
        validation=ValidationRule(is_required=True, min_length=1, max_length=100),
    ),
    Question(
        id=QuestionID.GOAL_TYPE,
        type=QuestionType.MULTIPLE_CHOICE,
        title="What type of goal is this?",
        description="Choose the tracking method that best fits your goal",
        options=(
            QuestionOption(GoalType.LIST_TRACKER.value, "List Tracker",
                           'Keep track of a list of "tasks" each user completed'),
            QuestionOption(GoalType.DAILY_TRACKER.value, "Daily Tracker",
                           "Keep track of the daily progress each user completed"),
            QuestionOption(GoalType.LIST_CREATED_BY_USER.value, "List Created By User",
                           "Complete a list that the user created"),
        ),
    ),
    Question(
        id=QuestionID.BUDDY_OR_SOLO,
        type=QuestionType.BUDDY_SELECTION,
        title="Choose Buddy or go solo",
        description="Add a buddy from your friends or select to do a solo goal",
    ),
    Question(
        id=QuestionID.TASK_BEING_TRACKED,
        type=QuestionType.TEXT_INPUT,
        title="What task are you tracking?",
        description="What task are you completing?",
        placeholder="e.g., Books Read, Projects Completed, Chores done, Courses completed",
        validation=ValidationRule(is_required=True, min_length=1, max_length=100),
    ),
    Question(
        id=QuestionID.INSERT_LIST_ITEMS,
        type=QuestionType.LIST_INPUT,
        title="Insert list of items to complete",
        description="Create a list of items you want to complete",
    ),
    Question(
        id=QuestionID.KEEP_STREAK,
        type=QuestionType.YES_NO,
        title="Do you want to keep a streak?",
        description="Do you plan on doing this task every day? "
                    "If so then consider keeping a daily streak going.",
    ),
    Question(
        id=QuestionID.TRACK_DAILY_QUANTITY,
        type=QuestionType.YES_NO,
        title="Do you want to track a daily quantity?",
        description="e.g., daily miles ran, daily pages read, daily minutes exercised",
    ),
    Question(
        id=QuestionID.UNIT_TRACKED,
        type=QuestionType.UNIT_SELECTION,
        title="What unit is being tracked?",
        description="Select the unit for your daily quantity tracking",
        options=tuple(QuestionOption(u.value, u.value) for u in TrackingUnit),
    ),
    Question(
        id=QuestionID.CHALLENGE_OR_FRIENDLY,
        type=QuestionType.MULTIPLE_CHOICE,
        title="Challenge or Friendly?",
        description="Do you want to have an ending winning condition to make this "
                    "more competitive or keep it friendly?",
        options=(
            QuestionOption(GoalMode.FRIENDLY.value, "Friendly", "Keep it friendly - no competition"),
            QuestionOption(GoalMode.CHALLENGE.value, "Challenge", "Add a winning condition to make it competitive"),
        ),
    ),
    Question(
        # Opcje liczone dynamicznie - AnswerSheet.winning_condition_options()
        id=QuestionID.WINNING_CONDITION,
        type=QuestionType.MULTIPLE_CHOICE,
        title="What's the winning condition?",
        description="How will the winner be determined?",
    ),
    Question(
        id=QuestionID.WINNING_NUMBER,
        type=QuestionType.NUMBER_INPUT,
        title="What's the target number?",
        description="Enter the number to reach",
        placeholder="Enter number",
        validation=ValidationRule(is_required=True),
    ),
    Question(
        id=QuestionID.END_DATE,
        type=QuestionType.DATE_INPUT,
        title="When does the challenge end?",
        description="Select the end date for your challenge",
    ),
    Question(
        id=QuestionID.WINNERS_PRIZE,
        type=QuestionType.TEXT_INPUT,
        title="What is the winner's prize?",
        description="Put something on the line to keep you more motivated",
        placeholder="e.g., Winner buys dinner, Winner gets bragging rights",
        validation=ValidationRule(is_required=True, min_length=1, max_length=200),
    ),
]}


_TRACKING_METHODS = {
    GoalType.LIST_TRACKER.value: TrackingMethod.LIST,
    GoalType.DAILY_TRACKER.value: TrackingMethod.DAILY_COMPLETION,
    GoalType.LIST_CREATED_BY_USER.value: TrackingMethod.LIST,
}


@dataclass
class AnswerSheet:
    """Rzadki rekord - dla danego typu celu większość pól zostaje pusta."""
    goal_name: Optional[str] = None
    goal_type: Optional[str] = None
    buddy_id: Optional[UserId] = None
    is_solo: Optional[bool] = None
    task_being_tracked: Optional[str] = None
    challenge_or_friendly: Optional[str] = None
    winning_condition: Optional[str] = None
    winners_prize: Optional[str] = None
    list_items: Optional[List[str]] = None
    keep_streak: Optional[bool] = None
    track_daily_quantity: Optional[bool] = None
    unit_tracked: Optional[str] = None
    winning_number: Optional[int] = None
    end_date: Optional[date] = None

    @property
    def is_challenge(self) -> bool:
        return self.challenge_or_friendly == GoalMode.CHALLENGE.value

    def tracking_method(self) -> Optional[TrackingMethod]:
        return _TRACKING_METHODS.get(self.goal_type)

    def selected_condition(self) -> Optional[WinningCondition]:
        return WinningCondition.from_label(self.winning_condition)

    def winning_condition_options(self) -> List[QuestionOption]:
        """Opcje zależą od typu celu i wcześniejszych odpowiedzi."""
        options = []

        if self.goal_type == GoalType.LIST_TRACKER.value:
            task = self.task_being_tracked
            if task:
                options.append(QuestionOption(
                    WinningCondition.FIRST_TO_REACH_X.value,
                    f"First to reach X number of {task}",
                    "First person to complete a target number wins",
                ))
                options.append(QuestionOption(
                    WinningCondition.MOST_BY_END_DATE.value,
                    f"Most number of {task} by an end date",
                    "Whoever has the most by the end date wins",
                ))

        elif self.goal_type == GoalType.LIST_CREATED_BY_USER.value:
            options.append(QuestionOption(
                WinningCondition.FIRST_TO_FINISH.value,
                "First to finish the list",
                "First person to complete all items wins",
            ))
            options.append(QuestionOption(
                WinningCondition.MOST_BY_END_DATE.value,
                "Most number of finished items by end date",
                "Whoever has completed the most items by the end date wins",
            ))

        elif self.goal_type == GoalType.DAILY_TRACKER.value:
            options.append(QuestionOption(
                WinningCondition.MOST_DAYS_BY_END_DATE.value,
                "Most days completed by end date",
                "Whoever has the most completed days wins",
            ))
            if self.keep_streak is True:
                options.append(QuestionOption(
                    WinningCondition.LONGEST_STREAK_BY_END_DATE.value,
                    "Longest streak by end date",
                    "Whoever has the longest continuous streak wins",
                ))
                options.append(QuestionOption(
                    WinningCondition.FIRST_TO_REACH_X_DAYS_STREAK.value,
                    "First to reach X number of days streak",
                    "First person to reach a target streak length wins",
                ))
            unit = self.unit_tracked
            if self.track_daily_quantity is True and unit:
                options.append(QuestionOption(
                    WinningCondition.MOST_AMOUNT_BY_END_DATE.value,
                    f"Most amount of {unit} completed by end date",
                    f"Whoever has accumulated the most {unit} wins",
                ))
                options.append(QuestionOption(
                    WinningCondition.FIRST_TO_COMPLETE_X_AMOUNT.value,
                    f"First person to complete X number of {unit}",
                    "First person to reach a target amount wins",
                ))

        return options

    def validate(self) -> None:
        """Sprawdza komplet pól wymaganych dla danego typu celu - przed utworzeniem celu."""
        errors = {}

        name_error = QUESTIONS[QuestionID.GOAL_NAME].validation.check(self.goal_name)
        if name_error:
            errors[QuestionID.GOAL_NAME.value] = name_error

        if self.tracking_method() is None:
            errors[QuestionID.GOAL_TYPE.value] = "Unknown goal type"

        if self.goal_type == GoalType.LIST_TRACKER.value and not (self.task_being_tracked or '').strip():
            errors[QuestionID.TASK_BEING_TRACKED.value] = "This field is required"

        if self.goal_type == GoalType.LIST_CREATED_BY_USER.value and not self.list_items:
            errors[QuestionID.INSERT_LIST_ITEMS.value] = "Add at least one item"

        if self.goal_type == GoalType.DAILY_TRACKER.value and self.track_daily_quantity and not self.unit_tracked:
            errors[QuestionID.UNIT_TRACKED.value] = "This field is required"

        if self.challenge_or_friendly not in (GoalMode.CHALLENGE.value, GoalMode.FRIENDLY.value):
            errors[QuestionID.CHALLENGE_OR_FRIENDLY.value] = "Choose challenge or friendly"

        if self.is_challenge:
            errors.update(self._validate_challenge())

        if errors:
            raise QuestionnaireValidationError(errors)

    def _validate_challenge(self) -> Dict[str, str]:
        errors = {}
        if self.buddy_id is None:
            errors[QuestionID.BUDDY_OR_SOLO.value] = "A challenge needs a buddy"

        offered = {option.id for option in self.winning_condition_options()}
        condition = self.selected_condition()
        if condition is None or condition.value not in offered:
            errors[QuestionID.WINNING_CONDITION.value] = "Choose one of the offered winning conditions"
        else:
            if condition.requires_target and not (self.winning_number and self.winning_number > 0):
                errors[QuestionID.WINNING_NUMBER.value] = "Enter a positive target number"
            if condition.requires_end_date and self.end_date is None:
                errors[QuestionID.END_DATE.value] = "Select an end date"

        prize_error = QUESTIONS[QuestionID.WINNERS_PRIZE].validation.check(self.winners_prize)
        if prize_error:
            errors[QuestionID.WINNERS_PRIZE.value] = prize_error
        return errors


# --- Tabela przejść ---

END = None

_NEXT: Dict[QuestionID, Optional[QuestionID]] = {
    QuestionID.GOAL_NAME: QuestionID.GOAL_TYPE,
    QuestionID.GOAL_TYPE: QuestionID.BUDDY_OR_SOLO,  # każdy typ idzie do wyboru buddy'ego
    QuestionID.TASK_BEING_TRACKED: QuestionID.CHALLENGE_OR_FRIENDLY,
    QuestionID.INSERT_LIST_ITEMS: QuestionID.CHALLENGE_OR_FRIENDLY,
    QuestionID.KEEP_STREAK: QuestionID.TRACK_DAILY_QUANTITY,
    QuestionID.UNIT_TRACKED: QuestionID.CHALLENGE_OR_FRIENDLY,
    QuestionID.WINNING_NUMBER: QuestionID.WINNERS_PRIZE,
    QuestionID.END_DATE: QuestionID.WINNERS_PRIZE,
    QuestionID.WINNERS_PRIZE: END,
}


def _condition_requirement(answers: AnswerSheet) -> Optional[str]:
    condition = answers.selected_condition()
    if condition is None:
        return None
    if condition.requires_target:
        return 'target'
    if condition.requires_end_date:
        return 'end_date'
    return 'nothing'


# pytanie -> (klucz z odpowiedzi, {klucz: następne pytanie}); brak klucza = koniec
_BRANCHES: Dict[QuestionID, Tuple[Callable[[AnswerSheet], object], Dict[object, Optional[QuestionID]]]] = {
    QuestionID.BUDDY_OR_SOLO: (
        lambda a: a.goal_type,
        {
            GoalType.LIST_TRACKER.value: QuestionID.TASK_BEING_TRACKED,
            GoalType.DAILY_TRACKER.value: QuestionID.KEEP_STREAK,
            GoalType.LIST_CREATED_BY_USER.value: QuestionID.INSERT_LIST_ITEMS,
        },
    ),
    QuestionID.TRACK_DAILY_QUANTITY: (
        lambda a: a.track_daily_quantity is True,
        {True: QuestionID.UNIT_TRACKED, False: QuestionID.CHALLENGE_OR_FRIENDLY},
    ),
    QuestionID.CHALLENGE_OR_FRIENDLY: (
        lambda a: a.is_challenge,
        {True: QuestionID.WINNING_CONDITION, False: END},
    ),
    QuestionID.WINNING_CONDITION: (
        _condition_requirement,
        {
            'target': QuestionID.WINNING_NUMBER,
            'end_date': QuestionID.END_DATE,
            'nothing': QuestionID.WINNERS_PRIZE,
        },
    ),
}


def next_question(current: Optional[QuestionID], answers: AnswerSheet) -> Optional[QuestionID]:
    """Następne pytanie albo END (None)."""
    if current is None:
        return QuestionID.GOAL_NAME
    current = QuestionID(current)
    if current in _BRANCHES:
        key_of, targets = _BRANCHES[current]
        return targets.get(key_of(answers), END)
    return _NEXT[current]


# --- Zapis odpowiedzi ---

def _as_text(question: Question, value) -> Tuple[Optional[str], Optional[str]]:
    if value is not None and not isinstance(value, str):
        return None, "Enter text"
    error = question.validation.check(value) if question.validation else None
    return (str(value).strip() if value is not None else None), error


def _as_choice(options: List[QuestionOption]):
    def convert(question: Question, value):
        if value not in {o.id for o in options}:
            return None, "Choose one of the available options"
        return value, None
    return convert


def _as_bool(question: Question, value):
    if not isinstance(value, bool):
        return None, "Answer yes or no"
    return value, None


def _as_number(question: Question, value):
    # bool to podklasa int, a int(3.9) obcina po cichu
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        return None, "Enter a whole number"
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        return None, "Enter a whole number"
    if number <= 0:
        return None, "Enter a positive number"
    return number, None


def _as_date(question: Question, value):
    if isinstance(value, datetime):
        return value.date(), None
    if isinstance(value, date):
        return value, None
    return None, "Select a date"


def _as_list(question: Question, value):
    items = [str(v).strip() for v in (value or []) if str(v).strip()]
    if not items:
        return None, "Add at least one item"
    return items, None


def _as_unit(question: Question, value):
    text = (value or '').strip() if isinstance(value, str) else ''
    if not text:
        return None, "Select a unit"
    return text, None


class QuestionnaireFlow:
    """Stan kwestionariusza: bieżące pytanie, historia i arkusz odpowiedzi."""

    def __init__(self):
        self.current_question_id: Optional[QuestionID] = None
        self.history: List[QuestionID] = []
        self.answers = AnswerSheet()

    def start(self):
        self.history = []
        self.answers = AnswerSheet()
        self.current_question_id = QuestionID.GOAL_NAME

    def current_question(self) -> Optional[Question]:
        if self.current_question_id is None:
            return None
        return QUESTIONS[self.current_question_id]

    def options_for(self, question_id: QuestionID) -> List[QuestionOption]:
        if question_id == QuestionID.WINNING_CONDITION:
            return self.answers.winning_condition_options()
        return list(QUESTIONS[question_id].options)

    def winning_condition_options(self) -> List[QuestionOption]:
        return self.answers.winning_condition_options()

    def answer(self, question_id: QuestionID, value) -> None:
        """Waliduje odpowiedź i zapisuje ją w arkuszu."""
        question_id = QuestionID(question_id)
        question = QUESTIONS[question_id]

        if question_id == QuestionID.BUDDY_OR_SOLO:
            # None = solo
            self.answers.buddy_id = value
            self.answers.is_solo = value is None
            return

        converters = {
            QuestionType.TEXT_INPUT: _as_text,
            QuestionType.MULTIPLE_CHOICE: _as_choice(self.options_for(question_id)),
            QuestionType.YES_NO: _as_bool,
            QuestionType.NUMBER_INPUT: _as_number,
            QuestionType.DATE_INPUT: _as_date,
            QuestionType.LIST_INPUT: _as_list,
            QuestionType.UNIT_SELECTION: _as_unit,
        }
        converted, error = converters[question.type](question, value)
        if error:
            raise QuestionnaireValidationError({question_id.value: error})

        setattr(self.answers, _ANSWER_FIELDS[question_id], converted)

    def next_question_id(self) -> Optional[QuestionID]:
        return next_question(self.current_question_id, self.answers)

    def move_to_next(self) -> None:
        next_id = self.next_question_id()
        if self.current_question_id is not None:
            self.history.append(self.current_question_id)
        # None przy niepustej historii = koniec (ekran podsumowania)
        self.current_question_id = next_id

    def move_to_previous(self) -> None:
        if not self.history:
            return
        self.current_question_id = self.history.pop()

    @property
    def can_go_back(self) -> bool:
        return bool(self.history)

    @property
    def is_complete(self) -> bool:
        return self.current_question_id is None and bool(self.history)


_ANSWER_FIELDS = {
    QuestionID.GOAL_NAME: 'goal_name',
    QuestionID.GOAL_TYPE: 'goal_type',
    QuestionID.TASK_BEING_TRACKED: 'task_being_tracked',
    QuestionID.CHALLENGE_OR_FRIENDLY: 'challenge_or_friendly',
    QuestionID.WINNING_CONDITION: 'winning_condition',
    QuestionID.WINNERS_PRIZE: 'winners_prize',
    QuestionID.INSERT_LIST_ITEMS: 'list_items',
    QuestionID.KEEP_STREAK: 'keep_streak',
    QuestionID.TRACK_DAILY_QUANTITY: 'track_daily_quantity',
    QuestionID.UNIT_TRACKED: 'unit_tracked',
    QuestionID.WINNING_NUMBER: 'winning_number',
    QuestionID.END_DATE: 'end_date',
}
