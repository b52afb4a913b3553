"""Shared pytest configuration for unit tests."""
import asyncio
import os
import sys
from datetime import datetime, timezone

import pytest

# Ensure repo root is on sys.path
REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from taskapi.app import create_app  # noqa: E402
from taskapi.models.roles import Role  # noqa: E402
from taskapi.models.task_model import Principal, Task  # noqa: E402
from taskapi.models.task_repository import InMemoryTaskRepository  # noqa: E402
from taskapi.services.auth_service import AuthService  # noqa: E402

JWT_SECRET = "unit-test-secret-key-with-at-least-32-chars"

ADMIN = Principal(id="admin1", role=Role.ADMIN)
USER_1 = Principal(id="u1", role=Role.USER)
USER_2 = Principal(id="u2", role=Role.USER)


def make_task(task_id="240305001", assignee_ids=None, **overrides):
    """Build a valid task; ``assignee_ids`` defaults to ["u1"]"""
    data = {
        "id": task_id,
        "title": "Write report",
        "description": "Quarterly numbers",
        "status": "pending",
        "dueDate": datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc),
        "assigneeIds": ["u1"] if assignee_ids is None else assignee_ids,
    }
    data.update(overrides)
    return Task.from_dict(data, task_id)


def seed(repository, *tasks):
    """Insert tasks into a repository from synchronous test code"""
    async def _insert():
        for task in tasks:
            await repository.insert(task)
    asyncio.run(_insert())


def stored(repository, task_id):
    return asyncio.run(repository.get_by_id(task_id))


@pytest.fixture
def repository():
    """A fresh in-memory task store for each test"""
    return InMemoryTaskRepository()


@pytest.fixture
def app(repository):
    """Flask app wired to the in-memory repository"""
    return create_app(
        {"TESTING": True, "JWT_SECRET": JWT_SECRET, "TASK_ID_TIMEZONE": "UTC"},
        task_repository=repository,
    )


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers():
    """Return a function building Authorization headers for a principal"""
    service = AuthService(JWT_SECRET)

    def _headers(principal):
        return {"Authorization": f"Bearer {service.issue_token(principal)}"}

    return _headers
