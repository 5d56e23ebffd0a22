from __future__ import annotations
import secrets
from dataclasses import dataclass

import structlog

from registervault.data.user_repo import UserRepo
from registervault.data.session_repo import SessionRepo
from registervault.errors import AuthenticationError, StoreError, ValidationError
from registervault.models.user import User
from registervault.service.security import hash_password, verify_password

logger = structlog.get_logger(__name__)

@dataclass
class AuthResult:
    user: User
    session_token: str

class AuthService:
    """Identity for the vocabulary store: accounts and cookie sessions."""

    def __init__(self, user_repo: UserRepo, session_repo: SessionRepo):
        self.user_repo = user_repo
        self.session_repo = session_repo

    def register(self, username: str, password: str) -> AuthResult:
        username = username.strip()
        if len(username) < 3:
            raise ValidationError("Username must be at least 3 characters.")
        if len(password) < 6:
            raise ValidationError("Password must be at least 6 characters.")
        try:
            user = self.user_repo.create_user(username=username, password_hash=hash_password(password))
        except StoreError as e:
            raise ValidationError("That username is already taken.") from e
        logger.info("user_registered", user_id=user.id)
        return self._start_session(user)

    def login(self, username: str, password: str) -> AuthResult:
        found = self.user_repo.get_user_by_username_with_hash(username.strip())
        if not found or not verify_password(password, found[1]):
            raise AuthenticationError("Invalid username or password.")
        return self._start_session(found[0])

    def logout(self, token: str) -> None:
        self.session_repo.delete_session(token)

    def _start_session(self, user: User) -> AuthResult:
        token = secrets.token_urlsafe(32)
        self.session_repo.create_session(user_id=user.id, token=token)
        return AuthResult(user=user, session_token=token)
