"""
Withdrawal deadline arithmetic shared by the sweeper and the listing DTOs.
"""
import math
from datetime import datetime, timedelta
from typing import Optional

from core.power_match.models import DeadlineStatus
from core.utils import ensure_utc


def withdrawal_cutoff(now: datetime, deadline_hours: float) -> datetime:
    """Applications stamped before this instant are past the deadline."""
    return now - timedelta(hours=deadline_hours)


def compute_deadline_status(
    applied_at: Optional[datetime],
    viewed_at: Optional[datetime],
    withdrawn_at: Optional[datetime],
    now: datetime,
    deadline_hours: float = 48,
    warning_hours: float = 24
) -> Optional[DeadlineStatus]:
    """
    Countdown shown on an auto-applied match that has not been viewed yet.

    Returns None once the match is viewed or withdrawn, or if it was never
    applied to.
    """
    if applied_at is None or viewed_at is not None or withdrawn_at is not None:
        return None

    deadline = ensure_utc(applied_at) + timedelta(hours=deadline_hours)
    remaining = deadline - ensure_utc(now)
    hours_remaining = max(0, math.floor(remaining.total_seconds() / 3600))

    return DeadlineStatus(
        withdrawal_deadline=deadline,
        hours_remaining=hours_remaining,
        needs_viewing_soon=timedelta(0) < remaining < timedelta(hours=warning_hours)
    )
