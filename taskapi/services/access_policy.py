from typing import Optional

from ..models.task_model import Principal, Task


class TaskAccessPolicy:
    """Ownership rules for tasks: admins see everything, users see their assignments"""

    @staticmethod
    def has_access(task: Task, principal: Optional[Principal]) -> bool:
        """Check if the principal may read or modify the task"""
        if principal is None:
            return False
        if principal.is_admin:
            return True
        # A task without assignees is simply not shared with anyone
        return principal.id in (task.assignee_ids or [])

    @staticmethod
    def can_list_all(principal: Optional[Principal]) -> bool:
        return principal is not None and principal.is_admin

    @staticmethod
    def can_view_user_tasks(user_id: str, principal: Optional[Principal]) -> bool:
        """Admins may list anyone's tasks; users only their own"""
        if principal is None:
            return False
        return principal.is_admin or principal.id == user_id
