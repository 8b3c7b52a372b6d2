"""
Business logic for users, login and the token gate.

Login accepts either the user's own password (stored as a PBKDF2 hash)
or, for users registered without one, the shared password from the
settings.  Tokens carry ``{"username", "id"}`` and are signed with the
settings' secret key.

Authorization is all-or-nothing: ``require_token`` only checks that a
token is genuine.  It does not restrict which records the caller may
change.
"""

import logging
from typing import Any, Dict, Optional

from ..core.config import Settings, settings as default_settings
from ..core.db import SQLiteGateway
from ..core.errors import AuthError, PersistenceError, ValidationError
from ..core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    secrets_match,
    verify_password,
)
from ..schemas.user import Token, UserCreate, UserRead


class AuthService:
    """Service for registration, login and token checks."""

    def __init__(self, gateway: SQLiteGateway, settings: Optional[Settings] = None) -> None:
        self.gateway = gateway
        self.settings = settings or default_settings

    async def create_user(
        self,
        username: str,
        favorite_genre: Optional[str] = None,
        password: Optional[str] = None,
    ) -> UserRead:
        """Register a new user.

        Raises ``ValidationError`` for an empty username and
        ``PersistenceError`` when the username is already taken.
        """
        logger = logging.getLogger(__name__)
        data = UserCreate(username=username or "", favorite_genre=favorite_genre, password=password)
        invalid_args = {"username": data.username, "favoriteGenre": data.favorite_genre}
        if not data.username.strip():
            raise ValidationError("Missing `username`", invalid_args)
        record: Dict[str, Any] = {"username": data.username, "favorite_genre": data.favorite_genre}
        if data.password:
            record["password"] = hash_password(data.password)
        try:
            user_id = self.gateway.insert("users", record)
        except PersistenceError as exc:
            raise PersistenceError(exc.message, invalid_args) from exc
        logger.info("Registered user %s (%s)", user_id, data.username)
        return UserRead(id=user_id, username=data.username, favorite_genre=data.favorite_genre)

    async def login(self, username: str, password: str) -> Token:
        """Check credentials and issue a token.

        Unknown users and wrong passwords fail identically with
        ``AuthError("wrong credentials")``.
        """
        logger = logging.getLogger(__name__)
        user = self.gateway.find_one("users", {"username": username}) if username else None
        if user is None or not self._password_matches(user, password or ""):
            logger.warning("Failed login for %s", username)
            raise AuthError("wrong credentials", {"username": username})
        claims = {"username": user["username"], "id": user["id"]}
        token = create_access_token(
            claims,
            expires_delta=self.settings.access_token_expire_minutes * 60,
            secret_key=self.settings.secret_key,
        )
        logger.info("User %s logged in", username)
        return Token(value=token)

    def _password_matches(self, user: Dict[str, Any], password: str) -> bool:
        stored_hash = user.get("password")
        if stored_hash:
            return verify_password(password, stored_hash)
        return secrets_match(password, self.settings.shared_password)

    def identify(self, token: Optional[str]) -> Optional[Dict[str, Any]]:
        """Return the claims of a valid token, or ``None``."""
        if not token:
            return None
        claims = decode_access_token(token, secret_key=self.settings.secret_key)
        if not claims or "id" not in claims:
            return None
        return claims

    def require_token(self, token: Optional[str]) -> Dict[str, Any]:
        """Return the claims of a valid token or raise ``AuthError``."""
        claims = self.identify(token)
        if claims is None:
            logging.getLogger(__name__).warning("Rejected request with missing or invalid token")
            raise AuthError("missing or invalid token")
        return claims
