from datetime import datetime, timedelta, timezone
from typing import Dict, Any

import jwt
from firebase_admin import auth as firebase_auth

from ..models.roles import Role
from ..models.task_model import Principal


class AuthService:
    """Firebase Auth for identity, signed JWTs for API sessions"""

    def __init__(self, secret: str, expires_in: int = 3600, algorithm: str = 'HS256'):
        self.secret = secret
        self.expires_in = expires_in
        self.algorithm = algorithm

    def register_user(self, email: str, password: str) -> Dict[str, Any]:
        """Create a Firebase Auth user"""
        firebase_user = firebase_auth.create_user(email=email, password=password)
        return {'uid': firebase_user.uid, 'message': 'User registered successfully.'}

    def login_with_id_token(self, id_token: str) -> Dict[str, Any]:
        """Exchange a Firebase ID token for an API session token"""
        decoded_token = firebase_auth.verify_id_token(id_token)
        user = firebase_auth.get_user(decoded_token['uid'])

        # Role comes from the Firebase custom claims; unknown or missing means user
        role = Role.parse(decoded_token.get('role'), default=Role.USER)
        principal = Principal(id=user.uid, role=role, email=user.email)
        return {'token': self.issue_token(principal), 'message': 'User logged in successfully.'}

    def issue_token(self, principal: Principal) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            'uid': principal.id,
            'role': principal.role.value,
            'email': principal.email,
            'iat': now,
            'exp': now + timedelta(seconds=self.expires_in),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode_token(self, token: str) -> Principal:
        """
        Verify a session token and return its principal.

        Raises jwt.ExpiredSignatureError or jwt.InvalidTokenError.
        """
        payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        uid = payload.get('uid')
        role = Role.parse(payload.get('role'))
        if not uid or role is None:
            raise jwt.InvalidTokenError('Token payload is missing uid or role')
        return Principal(id=uid, role=role, email=payload.get('email'))
