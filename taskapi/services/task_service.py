import asyncio
import logging
import random
from datetime import timezone, tzinfo
from typing import Dict, Any, Optional, List

from ..errors import (
    TaskAccessDeniedError,
    TaskIdAllocationError,
    TaskIdConflictError,
    TaskInvalidError,
    TaskNotFoundError,
)
from ..models.task_model import Principal, Task
from ..models.task_repository import TaskRepository
from ..utils.validators import Validators
from .access_policy import TaskAccessPolicy
from .id_allocator import MAX_SEQUENCE, DailySequentialIdAllocator

logger = logging.getLogger(__name__)

# A day never holds more ids than the sequence space
DEFAULT_MAX_ID_ATTEMPTS = MAX_SEQUENCE
DEFAULT_RETRY_BACKOFF = 0.05  # seconds, upper bound of the random pause after a lost insert


class TaskService:
    """
    Task lifecycle: create, read, update and delete with ownership checks.

    The service holds no state between calls; everything durable lives in the
    repository. Domain failures are raised as TaskNotFoundError,
    TaskAccessDeniedError or TaskInvalidError. Storage errors pass through
    untouched.
    """

    def __init__(self, repository: TaskRepository, allocator: DailySequentialIdAllocator = None,
                 tz: tzinfo = timezone.utc, max_id_attempts: int = DEFAULT_MAX_ID_ATTEMPTS,
                 retry_backoff: float = DEFAULT_RETRY_BACKOFF):
        self.repository = repository
        self.allocator = allocator or DailySequentialIdAllocator(repository, tz=tz)
        self.max_id_attempts = max(1, int(max_id_attempts))
        self.retry_backoff = max(0.0, float(retry_backoff))

    async def create(self, draft: Dict[str, Any], principal: Principal) -> Task:
        """Create a task from a request payload"""
        fields = Task.normalize_fields(draft)
        if not principal.is_admin:
            # Users may only create tasks for themselves
            fields["assigneeIds"] = [principal.id]

        if not Validators.validate_task_fields(fields):
            raise TaskInvalidError()

        taken = None
        for attempt in range(1, self.max_id_attempts + 1):
            task_id = await self.allocator.next_id(after=taken)
            task = Task.from_dict({**fields, "id": task_id}, task_id)
            try:
                await self.repository.insert(task)
            except TaskIdConflictError:
                logger.info(f"Task id {task_id} taken by a concurrent create, retrying (attempt {attempt})")
                taken = task_id
                # Spread out callers that lost the same id
                await asyncio.sleep(random.uniform(0, self.retry_backoff))
                continue

            logger.info(f"Task {task.id} created by {principal.id}")
            return task

        raise TaskIdAllocationError(f"Could not allocate a task id after {self.max_id_attempts} attempts")

    async def fetch_all(self, principal: Principal) -> List[Task]:
        """
        List the tasks visible to the principal.

        Raises TaskNotFoundError only when no task has ever been stored; a
        user without assignments in a populated collection gets ``[]``.
        """
        if not await self.repository.collection_exists():
            raise TaskNotFoundError()

        if TaskAccessPolicy.can_list_all(principal):
            return await self.repository.list_all()
        return await self.repository.list_by_assignee(principal.id)

    async def fetch_by_user_id(self, user_id: str, principal: Principal) -> List[Task]:
        if not TaskAccessPolicy.can_view_user_tasks(user_id, principal):
            raise TaskAccessDeniedError()
        return await self.repository.list_by_assignee(user_id)

    async def fetch_by_id(self, task_id: str, principal: Optional[Principal]) -> Task:
        task = await self.repository.get_by_id(task_id)
        if task is None:
            raise TaskNotFoundError()
        if not TaskAccessPolicy.has_access(task, principal):
            raise TaskAccessDeniedError()
        return task

    async def update(self, task_id: str, data: Dict[str, Any], principal: Optional[Principal]) -> Task:
        """Merge ``data`` into the stored task; the id never changes"""
        task = await self.fetch_by_id(task_id, principal)

        fields = Task.normalize_fields(data)
        if not principal.is_admin:
            # Only admins reassign tasks
            fields.pop("assigneeIds", None)

        merged = {**task.to_dict(), **fields, "id": task.id}
        if not Validators.validate_task(merged):
            raise TaskInvalidError()

        if fields:
            # Documents stored under ``userIds`` gain ``assigneeIds`` on their next write
            fields.setdefault("assigneeIds", list(task.assignee_ids))
            await self.repository.update(task.id, fields)
            logger.info(f"Task {task.id} updated by {principal.id}: {sorted(fields)}")
        return Task.from_dict(merged, task.id)

    async def delete(self, task_id: str, principal: Optional[Principal]) -> None:
        task = await self.fetch_by_id(task_id, principal)
        await self.repository.delete(task.id)
        logger.info(f"Task {task.id} deleted by {principal.id}")
