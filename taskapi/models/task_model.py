from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Any, Optional, List

from .roles import Role
from ..utils.validators import Helpers

# Mutable task fields, keyed by their document/payload name
TASK_FIELDS = ("title", "description", "status", "dueDate", "assigneeIds")

# Earlier clients and stored documents name the assignee list ``userIds``
LEGACY_FIELD_ALIASES = {"userIds": "assigneeIds"}


@dataclass(frozen=True)
class Principal:
    """The authenticated actor of a request"""

    id: str
    role: Role = Role.USER
    email: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


@dataclass
class Task:
    """A persisted work item. Pure data; storage lives in the repositories."""

    id: str
    title: str
    description: str
    status: Any
    due_date: Optional[datetime]
    assignee_ids: List[str] = field(default_factory=list)

    @staticmethod
    def normalize_fields(payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Pick the task fields out of a request payload.

        Unknown keys (including ``id``) are dropped, legacy aliases are
        renamed, text is stripped and a parseable ``dueDate`` is converted to
        a datetime. Values that fail to parse are kept as-is so that
        validation can reject them.
        """
        fields = {}
        for key, value in (payload or {}).items():
            key = LEGACY_FIELD_ALIASES.get(key, key)
            if key not in TASK_FIELDS:
                continue
            if key in ("title", "description"):
                value = Helpers.sanitize_string(value)
            elif key == "dueDate":
                value = Helpers.parse_timestamp(value) or value
            elif key == "assigneeIds" and isinstance(value, tuple):
                value = list(value)
            fields[key] = value
        return fields

    @classmethod
    def from_dict(cls, data: Dict[str, Any], task_id: str = None) -> "Task":
        """Build a Task from a stored document"""
        data = data or {}
        assignee_ids = data.get("assigneeIds")
        if assignee_ids is None:
            assignee_ids = data.get("userIds", [])
        return cls(
            id=task_id or data.get("id"),
            title=data.get("title"),
            description=data.get("description"),
            status=data.get("status"),
            due_date=Helpers.parse_timestamp(data.get("dueDate")),
            assignee_ids=list(assignee_ids or []),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Document shape stored in Firestore"""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "dueDate": self.due_date,
            "assigneeIds": list(self.assignee_ids),
        }

    def to_json(self) -> Dict[str, Any]:
        data = self.to_dict()
        data["dueDate"] = Helpers.format_timestamp(self.due_date) if self.due_date else None
        return data
