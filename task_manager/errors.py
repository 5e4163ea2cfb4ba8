from typing import List, NamedTuple


class FieldViolation(NamedTuple):
    field: str
    message: str


class TaskFault(Exception):
    """Base for every outcome that is reported to the caller as a failure."""

    status_code = 500
    error = "Internal server error"

    def __init__(self, error: str = None):
        self.error = error or self.error
        super().__init__(self.error)


class ValidationFault(TaskFault):
    status_code = 400
    error = "Validation failed"

    def __init__(self, violations: List[FieldViolation]):
        super().__init__()
        self.violations = list(violations)


class NoFieldsToUpdateFault(TaskFault):
    status_code = 400
    error = "No valid fields provided for update"


class NotFoundFault(TaskFault):
    status_code = 404
    error = "Task not found"

    def __init__(self, task_id: int):
        super().__init__()
        self.task_id = task_id


class StorageFault(TaskFault):
    status_code = 500

    def __init__(self, summary: str, detail: str):
        super().__init__(summary)
        self.detail = detail
