import logging

from flask import Flask, jsonify
from flask_cors import CORS

from .api import auth_bp, tasks_bp
from .config.firebase_config import get_async_client, init_firebase
from .config.settings import Settings
from .middleware.error_middleware import register_error_handlers
from .models.task_repository import FirestoreTaskRepository, InMemoryTaskRepository, TaskRepository
from .utils.logger import configure_logging

logger = logging.getLogger(__name__)


def create_app(config_overrides: dict = None, task_repository: TaskRepository = None):
    """Create and configure the Flask application.

    Args:
        config_overrides: values applied on top of ``Settings`` (tests use
            this for ``JWT_SECRET``, ``TESTING`` and friends).
        task_repository: a repository shared by every request. When omitted,
            DEV_MODE uses an in-memory store and otherwise each request gets
            a Firestore repository on a fresh async client.
    """
    app = Flask(__name__)
    app.config.update(Settings.as_flask_config())
    if config_overrides:
        app.config.update(config_overrides)

    if not app.config.get("TESTING"):
        configure_logging(app.config.get("LOG_LEVEL", "INFO"), app.config.get("LOG_DIR"))

    CORS(app,
         resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}},
         allow_headers=["Content-Type", "Authorization"],
         methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"])

    if task_repository is not None:
        firebase_initialized = False
        app.extensions["task_repository_factory"] = lambda: task_repository
    elif app.config.get("DEV_MODE"):
        firebase_initialized = init_firebase(dev_mode=True)
        dev_repository = InMemoryTaskRepository()
        app.extensions["task_repository_factory"] = lambda: dev_repository
    else:
        # Allow the app to start even if Firebase fails; requests will then error
        firebase_initialized = init_firebase()
        collection = app.config.get("TASKS_COLLECTION", "tasks")
        app.extensions["task_repository_factory"] = lambda: FirestoreTaskRepository(get_async_client(), collection)

    @app.get("/")
    def health():
        return jsonify({
            "status": "ok",
            "service": "task-api",
            "firebase": "connected" if firebase_initialized else "not configured"
        }), 200

    register_error_handlers(app)
    app.register_blueprint(auth_bp)
    app.register_blueprint(tasks_bp)

    return app


def main():
    """Main entry point for running the application."""
    Settings.validate()
    app = create_app()
    logger.info(f"Server running at port {Settings.PORT}")
    app.run(host="0.0.0.0", port=Settings.PORT, debug=Settings.DEBUG)


if __name__ == "__main__":  # pragma: no cover
    main()
