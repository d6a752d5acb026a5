from datetime import datetime, timedelta, timezone
from uuid import uuid4

from conduit.domain.errors import ValidationError

_ONE_TICK = timedelta(microseconds=1)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid4())


def later_than(previous: datetime) -> datetime:
    """Return the current time, nudged forward if the clock has not passed *previous*."""
    now = utcnow()
    if now <= previous:
        return previous + _ONE_TICK
    return now


def require_non_blank(**fields: str | None) -> None:
    """Raise ``ValidationError`` naming every field that is None or whitespace."""
    errors = {
        name: ["can't be empty"]
        for name, value in fields.items()
        if value is None or not str(value).strip()
    }
    if errors:
        raise ValidationError(errors)
