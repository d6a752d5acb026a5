from datetime import datetime, timezone


def as_utc(value: datetime) -> datetime:
    """
    Every stored timestamp is UTC. SQLite keeps only the wall-clock digits
    and hands back naive datetimes, so values are normalised both ways.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
