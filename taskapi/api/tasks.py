from flask import current_app, request, jsonify

from . import tasks_bp
from ..errors import TaskNotFoundError
from ..middleware.auth_middleware import AuthMiddleware, RoleMiddleware
from ..services.id_allocator import resolve_timezone
from ..services.task_service import DEFAULT_MAX_ID_ATTEMPTS, TaskService


def get_task_service() -> TaskService:
    """Build the task service for the current request"""
    repository = current_app.extensions["task_repository_factory"]()
    return TaskService(
        repository,
        tz=resolve_timezone(current_app.config.get("TASK_ID_TIMEZONE", "UTC")),
        max_id_attempts=current_app.config.get("TASK_ID_MAX_ATTEMPTS", DEFAULT_MAX_ID_ATTEMPTS),
    )


def _payload():
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


@tasks_bp.post("")
@AuthMiddleware.verify_token
async def create_task():
    principal = AuthMiddleware.get_current_user()
    payload = _payload()
    if not principal.is_admin:
        # Only admins assign tasks to other users
        payload["assigneeIds"] = [principal.id]
        payload.pop("userIds", None)

    task = await get_task_service().create(payload, principal)
    return jsonify(task.to_json()), 201


@tasks_bp.get("")
@AuthMiddleware.verify_token
async def list_tasks():
    try:
        tasks = await get_task_service().fetch_all(AuthMiddleware.get_current_user())
    except TaskNotFoundError:
        # No task was ever stored
        return "", 204

    return jsonify([task.to_json() for task in tasks]), 200


@tasks_bp.get("/users/<user_id>")
@AuthMiddleware.verify_token
async def list_user_tasks(user_id):
    tasks = await get_task_service().fetch_by_user_id(user_id, AuthMiddleware.get_current_user())
    return jsonify([task.to_json() for task in tasks]), 200


@tasks_bp.get("/<task_id>")
@AuthMiddleware.verify_token
async def get_task(task_id):
    task = await get_task_service().fetch_by_id(task_id, AuthMiddleware.get_current_user())
    return jsonify(task.to_json()), 200


@tasks_bp.route("/<task_id>", methods=["PUT", "PATCH"])
@AuthMiddleware.verify_token
async def update_task(task_id):
    task = await get_task_service().update(task_id, _payload(), AuthMiddleware.get_current_user())
    return jsonify(task.to_json()), 200


@tasks_bp.delete("/<task_id>")
@AuthMiddleware.verify_token
@RoleMiddleware.require_admin()
async def delete_task(task_id):
    await get_task_service().delete(task_id, AuthMiddleware.get_current_user())
    return jsonify({"message": "Task deleted successfully"}), 200
