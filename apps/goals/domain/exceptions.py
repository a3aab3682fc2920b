class GoalNotFound(LookupError):
    def __init__(self, goal_id):
        super().__init__(f"Goal not found: {goal_id}")
        self.goal_id = goal_id


class GoalActionNotAllowed(PermissionError):
    pass


class QuestionnaireValidationError(ValueError):
    def __init__(self, errors):
        # errors: {question_id: komunikat}
        self.errors = dict(errors)
        details = ", ".join(f"{k}: {v}" for k, v in self.errors.items())
        super().__init__(f"Invalid questionnaire answers ({details})")
