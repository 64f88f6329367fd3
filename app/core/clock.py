"""Wall-clock source.  Services take an explicit `now` so tests can pin time."""

from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
