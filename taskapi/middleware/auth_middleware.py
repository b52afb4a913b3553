import inspect
import logging
from functools import wraps

import jwt
from flask import current_app, request, jsonify

from ..models.roles import Role
from ..services.auth_service import AuthService
from ..utils.validators import Helpers

logger = logging.getLogger(__name__)


async def _call_view(f, *args, **kwargs):
    """Run a wrapped view whether it is a plain function or a coroutine function"""
    result = f(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result


def get_auth_service() -> AuthService:
    return AuthService(
        secret=current_app.config.get('JWT_SECRET'),
        expires_in=current_app.config.get('JWT_EXPIRES_IN', 3600),
        algorithm=current_app.config.get('JWT_ALGORITHM', 'HS256'),
    )


def _unauthorized(message: str) -> tuple:
    return jsonify(Helpers.build_error_response(message, 'AUTHENTICATION_ERROR')), 401


class AuthMiddleware:
    """Authentication middleware for API session tokens"""

    @staticmethod
    def authenticate():
        """Attach the request principal; return an error response on failure, else None"""
        auth_header = request.headers.get('Authorization', '')
        parts = auth_header.split(' ')
        token = parts[1].strip() if len(parts) == 2 else ''

        if not token:
            return _unauthorized('No authorization token provided.')

        if not current_app.config.get('JWT_SECRET'):
            logger.error('JWT_SECRET environment variable is not set')
            return jsonify(Helpers.build_error_response('Unavailable', 'CONFIGURATION_ERROR')), 500

        try:
            request.current_user = get_auth_service().decode_token(token)
        except jwt.ExpiredSignatureError:
            return _unauthorized('Token expired.')
        except jwt.InvalidTokenError:
            return _unauthorized('Invalid token.')
        return None

    @staticmethod
    def verify_token(f):
        """Decorator to require a valid session token"""
        @wraps(f)
        async def decorated_function(*args, **kwargs):
            error = AuthMiddleware.authenticate()
            if error is not None:
                return error
            return await _call_view(f, *args, **kwargs)

        return decorated_function

    @staticmethod
    def get_current_user():
        """Get current principal from request"""
        return getattr(request, 'current_user', None)


class RoleMiddleware:
    """Role-based access control middleware (use after AuthMiddleware.verify_token)"""

    @staticmethod
    def require_role(*roles: Role):
        """Decorator to require one of the given roles"""
        def decorator(f):
            @wraps(f)
            async def decorated_function(*args, **kwargs):
                principal = AuthMiddleware.get_current_user()

                if principal is None or principal.role not in roles:
                    return jsonify(Helpers.build_error_response(
                        'Forbidden: You do not have permission to access this resource.',
                        'AUTHORIZATION_ERROR'
                    )), 403

                return await _call_view(f, *args, **kwargs)

            return decorated_function
        return decorator

    @staticmethod
    def require_admin():
        """Require admin role"""
        return RoleMiddleware.require_role(Role.ADMIN)
