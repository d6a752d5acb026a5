"""
Credentials: bearer tokens and password hashes.

Tokens are HS256 JWTs whose ``sub`` claim is the user id. ``validate``
folds every failure (missing, malformed, badly signed, expired) into a
``None`` result, because endpoints that accept anonymous callers must not
be able to tell "no token" from "bad token".
"""
import logging
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from conduit.domain import User

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"
MIN_SECRET_BYTES = 32


class TokenService:
    def __init__(self, secret: str, session_time: int) -> None:
        if len(secret.encode("utf-8")) < MIN_SECRET_BYTES:
            raise ValueError(
                f"JWT secret must be at least {MIN_SECRET_BYTES * 8} bits long"
            )
        if session_time <= 0:
            raise ValueError("JWT session time must be positive")
        self._secret = secret
        self.session_time = timedelta(seconds=session_time)

    def issue(self, user: User) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": user.id,
            "iat": now,
            "exp": now + self.session_time,
        }
        return jwt.encode(payload, self._secret, algorithm=JWT_ALGORITHM)

    def validate(self, token: str | None) -> str | None:
        """Return the user id bound to *token*, or None if it is not a valid token."""
        if not token or not isinstance(token, str):
            return None
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[JWT_ALGORITHM],
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            logger.debug("Rejected expired token")
            return None
        except jwt.PyJWTError as exc:
            logger.debug("Rejected token: %s", type(exc).__name__)
            return None

        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            return None
        return subject


class PasswordHasher:
    """Bcrypt password hashing."""

    def __init__(self, rounds: int = 12) -> None:
        self.rounds = rounds

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError as exc:
            # Unparseable stored hash or over-long password
            logger.warning("Password verification failed: %s", exc)
            return False
