"""
Task errors.

The three ``TaskError`` subclasses are the domain errors raised by the task
service and translated by the routes into 404 / 403 / 400 responses.
Anything else is an infrastructure failure and is left to the generic
error handler.
"""


class TaskError(Exception):
    """Base class for caller-correctable task errors"""

    default_message = "Task error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class TaskNotFoundError(TaskError):
    default_message = "Task not found"


class TaskAccessDeniedError(TaskError):
    default_message = "You do not have permission to access this task."


class TaskInvalidError(TaskError):
    default_message = "The task is invalid"


class TaskIdConflictError(Exception):
    """Raised by a repository when inserting a task whose id already exists."""

    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"Task id already exists: {task_id}")


class TaskIdAllocationError(RuntimeError):
    """The daily id sequence cannot produce a usable id."""
