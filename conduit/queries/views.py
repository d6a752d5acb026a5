"""Shapes of the JSON views returned at the HTTP boundary."""
from datetime import datetime, timezone

from conduit.domain import User


def iso(value: datetime) -> str:
    """UTC ISO-8601 with millisecond precision and a ``Z`` suffix."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    text = value.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def profile_view(username: str, bio: str | None, image: str | None, following: bool) -> dict:
    return {
        "username": username,
        "bio": bio or None,
        "image": image or None,
        "following": following,
    }


def user_view(user: User, token: str) -> dict:
    """The authenticated user's own view. Never includes the password hash."""
    return {
        "email": user.email,
        "token": token,
        "username": user.username,
        "bio": user.bio or None,
        "image": user.image or None,
    }
