import pytest

from taskapi.errors import TaskAccessDeniedError, TaskInvalidError, TaskNotFoundError
from taskapi.middleware.error_middleware import ErrorHandler


@pytest.mark.parametrize("error, status, code, message", [
    (TaskNotFoundError(), 404, "NOT_FOUND", "Task not found"),
    (TaskAccessDeniedError(), 403, "AUTHORIZATION_ERROR", "You do not have permission to access this task."),
    (TaskInvalidError(), 400, "VALIDATION_ERROR", "The task is invalid"),
])
def test_handle_task_error_maps_domain_errors(app, error, status, code, message):
    with app.app_context():
        response, status_code = ErrorHandler.handle_task_error(error)

    body = response.get_json()
    assert status_code == status
    assert body["code"] == code
    assert body["message"] == message
    assert "timestamp" in body


def test_task_error_raised_in_view_uses_registered_handler(app):
    @app.get("/boom")
    def boom():
        raise TaskNotFoundError()

    response = app.test_client().get("/boom")

    assert response.status_code == 404
    assert response.get_json()["message"] == "Task not found"
    assert response.get_json()["code"] == "NOT_FOUND"


def test_unexpected_error_is_500_without_details(app):
    @app.get("/crash")
    def crash():
        raise RuntimeError("secret internals")

    response = app.test_client().get("/crash")

    assert response.status_code == 500
    assert response.get_json()["code"] == "INTERNAL_ERROR"
    assert "secret" not in response.get_data(as_text=True)
