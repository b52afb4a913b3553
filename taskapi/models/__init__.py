from .roles import Role
from .task_model import Principal, Task

__all__ = ["Role", "Principal", "Task"]
