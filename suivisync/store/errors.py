"""Store errors."""


class TaskNotFoundError(ValueError):
    """Raised when a mutation targets a task that is not in the cache."""

    def __init__(self, task_id: str):
        super().__init__(f"Task {task_id} not found")
        self.task_id = task_id
