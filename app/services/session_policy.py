"""
Session eviction policy.

Strict FIFO on creation time: when a user is at the session bound,
the oldest active session is logged out to make room for the new one.
Equal `created_at` values (coarse clocks) fall back to the smaller
session id so the choice never depends on row order.

Kept free of I/O so it can be reasoned about and tested on its own.
"""

from collections.abc import Iterable
from datetime import datetime

from app.models.session import UserSession


def eviction_key(session: UserSession) -> tuple[datetime, str]:
    return session.created_at, str(session.id)


def select_eviction_candidates(
    active_sessions: Iterable[UserSession],
    max_sessions: int,
) -> list[UserSession]:
    """Return the sessions to delete before one more may be inserted.

    Empty while the user is below the bound.  At the bound this is the
    single oldest session; if the user is already over it (the bound was
    lowered) the oldest surplus goes too, so that after the insert the
    user holds exactly `max_sessions`.
    """
    ordered = sorted(active_sessions, key=eviction_key)
    surplus = len(ordered) - max_sessions + 1
    if surplus <= 0:
        return []
    return ordered[:surplus]
