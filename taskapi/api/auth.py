"""
Authentication endpoints.

Identity is owned by Firebase Authentication; the API itself works with the
short-lived JWTs issued by ``/login``.
"""
import logging
from flask import request, jsonify
from firebase_admin import auth as firebase_auth
from firebase_admin import exceptions as firebase_exceptions

from . import auth_bp
from ..middleware.auth_middleware import get_auth_service

logger = logging.getLogger(__name__)


@auth_bp.post("/login")
def login():
    """
    Exchange a Firebase ID token (``Authorization: Bearer <id token>``) for an
    API session token.
    Returns: {token, message}
    """
    auth_header = request.headers.get("Authorization", "")
    id_token = auth_header.split("Bearer ", 1)[1].strip() if auth_header.startswith("Bearer ") else ""

    if not id_token:
        return jsonify({"message": "No token provided."}), 401

    try:
        result = get_auth_service().login_with_id_token(id_token)
    except (ValueError, firebase_auth.InvalidIdTokenError, firebase_auth.UserNotFoundError,
            firebase_exceptions.FirebaseError) as e:
        logger.error(f"Login failed: {e}")
        return jsonify({"message": "Invalid token."}), 401

    return jsonify(result), 200


@auth_bp.post("/register")
def register():
    """
    Register a new Firebase Authentication user.
    Expected payload: {email, password}
    Returns: {uid, message}
    """
    payload = request.get_json(silent=True) or {}
    email = (payload.get("email") or "").strip().lower()
    password = payload.get("password") or ""

    if not email or not password:
        return jsonify({"message": "email and password are required"}), 400

    try:
        result = get_auth_service().register_user(email, password)
    except firebase_auth.EmailAlreadyExistsError:
        return jsonify({"message": "Email already exists."}), 400
    except ValueError as e:
        return jsonify({"message": f"Invalid input: {e}"}), 400
    except firebase_exceptions.FirebaseError as e:
        logger.error(f"Registration failed: {e}")
        return jsonify({"message": "Error registering user."}), 500

    return jsonify(result), 201
