"""
Task storage.

``TaskRepository`` is the storage collaborator used by the task service.
Implementations must honour one precondition that the id allocation relies
on: ``insert`` is create-if-absent and raises ``TaskIdConflictError`` when a
document with the task's id already exists.
"""
import asyncio
import copy
import logging
from abc import ABC, abstractmethod
from typing import Dict, Any, Optional, List

from google.api_core.exceptions import AlreadyExists
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from ..errors import TaskIdConflictError
from .task_model import Task

logger = logging.getLogger(__name__)

TASKS_COLLECTION = "tasks"


class TaskRepository(ABC):
    """Async storage interface for tasks"""

    @abstractmethod
    async def get_by_id(self, task_id: str) -> Optional[Task]:
        ...

    @abstractmethod
    async def find_max_id_with_prefix(self, prefix: str) -> Optional[Task]:
        """Return the task with the greatest id starting with ``prefix``"""

    @abstractmethod
    async def list_by_assignee(self, user_id: str) -> List[Task]:
        ...

    @abstractmethod
    async def list_all(self) -> List[Task]:
        ...

    @abstractmethod
    async def collection_exists(self) -> bool:
        """True once at least one task has ever been stored"""

    @abstractmethod
    async def insert(self, task: Task) -> None:
        """Create the task; raise TaskIdConflictError if its id is taken"""

    @abstractmethod
    async def update(self, task_id: str, fields: Dict[str, Any]) -> None:
        ...

    @abstractmethod
    async def delete(self, task_id: str) -> None:
        ...


class FirestoreTaskRepository(TaskRepository):
    """Tasks stored in a Firestore collection, one document per task id"""

    def __init__(self, db, collection_name: str = TASKS_COLLECTION):
        self.db = db
        self.collection = db.collection(collection_name)

    @staticmethod
    def _to_task(doc) -> Task:
        return Task.from_dict(doc.to_dict(), doc.id)

    async def get_by_id(self, task_id: str) -> Optional[Task]:
        doc = await self.collection.document(task_id).get()
        if not doc.exists:
            return None
        return self._to_task(doc)

    async def find_max_id_with_prefix(self, prefix: str) -> Optional[Task]:
        query = (
            self.collection
            .where(filter=FieldFilter("id", ">=", prefix))
            .where(filter=FieldFilter("id", "<=", prefix + "999"))
            .order_by("id", direction=firestore.Query.DESCENDING)
            .limit(1)
        )
        docs = await query.get()
        for doc in docs:
            return self._to_task(doc)
        return None

    async def list_by_assignee(self, user_id: str) -> List[Task]:
        query = self.collection.where(filter=FieldFilter("assigneeIds", "array_contains", user_id))
        docs = await query.get()
        return [self._to_task(doc) for doc in docs]

    async def list_all(self) -> List[Task]:
        docs = await self.collection.get()
        return [self._to_task(doc) for doc in docs]

    async def collection_exists(self) -> bool:
        docs = await self.collection.limit(1).get()
        return len(docs) > 0

    async def insert(self, task: Task) -> None:
        try:
            await self.collection.document(task.id).create(task.to_dict())
        except AlreadyExists:
            raise TaskIdConflictError(task.id) from None

    async def update(self, task_id: str, fields: Dict[str, Any]) -> None:
        await self.collection.document(task_id).update(fields)

    async def delete(self, task_id: str) -> None:
        await self.collection.document(task_id).delete()


class InMemoryTaskRepository(TaskRepository):
    """
    Dict-backed repository used when running without Firebase (DEV_MODE).

    Every call yields to the event loop once, the way a network round trip
    would, so concurrent requests interleave between the max-id read and the
    insert exactly as they do against Firestore.
    """

    def __init__(self, documents: Dict[str, Dict[str, Any]] = None):
        self._documents = copy.deepcopy(documents) if documents else {}

    async def get_by_id(self, task_id: str) -> Optional[Task]:
        await asyncio.sleep(0)
        data = self._documents.get(task_id)
        if data is None:
            return None
        return Task.from_dict(copy.deepcopy(data), task_id)

    async def find_max_id_with_prefix(self, prefix: str) -> Optional[Task]:
        await asyncio.sleep(0)
        matching = sorted(task_id for task_id in self._documents if task_id.startswith(prefix))
        if not matching:
            return None
        return Task.from_dict(copy.deepcopy(self._documents[matching[-1]]), matching[-1])

    async def list_by_assignee(self, user_id: str) -> List[Task]:
        await asyncio.sleep(0)
        return [
            Task.from_dict(copy.deepcopy(data), task_id)
            for task_id, data in self._documents.items()
            if user_id in (data.get("assigneeIds") or [])
        ]

    async def list_all(self) -> List[Task]:
        await asyncio.sleep(0)
        return [Task.from_dict(copy.deepcopy(data), task_id) for task_id, data in self._documents.items()]

    async def collection_exists(self) -> bool:
        await asyncio.sleep(0)
        return bool(self._documents)

    async def insert(self, task: Task) -> None:
        await asyncio.sleep(0)
        if task.id in self._documents:
            raise TaskIdConflictError(task.id)
        self._documents[task.id] = copy.deepcopy(task.to_dict())

    async def update(self, task_id: str, fields: Dict[str, Any]) -> None:
        await asyncio.sleep(0)
        if task_id not in self._documents:
            raise KeyError(task_id)
        self._documents[task_id].update(copy.deepcopy(fields))

    async def delete(self, task_id: str) -> None:
        await asyncio.sleep(0)
        self._documents.pop(task_id, None)
