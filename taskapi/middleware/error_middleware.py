"""
Error Handling Middleware
Centralized error responses and logging
"""
import logging
import traceback
from flask import jsonify
from werkzeug.exceptions import HTTPException

from ..errors import TaskAccessDeniedError, TaskError, TaskNotFoundError
from ..utils.validators import Helpers

logger = logging.getLogger(__name__)


class ErrorHandler:
    """Centralized error handling service"""

    @staticmethod
    def handle_validation_error(error_message: str = "Validation failed") -> tuple:
        """Handle validation errors"""
        logger.warning(f"Validation error: {error_message}")
        return jsonify(Helpers.build_error_response(error_message, "VALIDATION_ERROR")), 400

    @staticmethod
    def handle_authentication_error(error_message: str = "Authentication failed") -> tuple:
        """Handle authentication errors"""
        logger.warning(f"Authentication error: {error_message}")
        return jsonify(Helpers.build_error_response(error_message, "AUTHENTICATION_ERROR")), 401

    @staticmethod
    def handle_authorization_error(error_message: str = "Insufficient permissions") -> tuple:
        """Handle authorization errors"""
        logger.warning(f"Authorization error: {error_message}")
        return jsonify(Helpers.build_error_response(error_message, "AUTHORIZATION_ERROR")), 403

    @staticmethod
    def handle_not_found_error(error_message: str = "Resource not found") -> tuple:
        """Handle not found errors"""
        logger.info(f"Not found error: {error_message}")
        return jsonify(Helpers.build_error_response(error_message, "NOT_FOUND")), 404

    @staticmethod
    def handle_task_error(error: TaskError) -> tuple:
        """Map a domain task error raised by a view to its response (invalid tasks and anything else: 400)"""
        if isinstance(error, TaskNotFoundError):
            return ErrorHandler.handle_not_found_error(error.message)
        if isinstance(error, TaskAccessDeniedError):
            return ErrorHandler.handle_authorization_error(error.message)
        return ErrorHandler.handle_validation_error(error.message)

    @staticmethod
    def handle_generic_error(error: Exception) -> tuple:
        """Handle unexpected errors without leaking details to the caller"""
        logger.error(f"Unexpected error: {error!r}")
        logger.error(f"Traceback: {''.join(traceback.format_exception(type(error), error, error.__traceback__))}")
        return jsonify(Helpers.build_error_response("Internal Server Error", "INTERNAL_ERROR")), 500


def register_error_handlers(app):
    """Register error handlers with Flask app"""

    @app.errorhandler(TaskError)
    def handle_task_error(error):
        return ErrorHandler.handle_task_error(error)

    @app.errorhandler(401)
    def handle_unauthorized(error):
        return ErrorHandler.handle_authentication_error("Unauthorized")

    @app.errorhandler(403)
    def handle_forbidden(error):
        return ErrorHandler.handle_authorization_error("Forbidden")

    @app.errorhandler(404)
    def handle_not_found(error):
        return ErrorHandler.handle_not_found_error("Endpoint not found")

    @app.errorhandler(405)
    def handle_method_not_allowed(error):
        return jsonify(Helpers.build_error_response("Method not allowed", "METHOD_NOT_ALLOWED")), 405

    @app.errorhandler(Exception)
    def handle_unhandled_exception(error):
        if isinstance(error, HTTPException):
            return jsonify(Helpers.build_error_response(error.description, error.name.upper().replace(" ", "_"))), error.code
        return ErrorHandler.handle_generic_error(error)
