"""
Candidate eligibility for Power Match generation.

A candidate qualifies when they hold an active Pro subscription and, if
the daily check-in is required, confirmed they are still looking within
the check-in window.
"""
from datetime import datetime, timedelta
from typing import Optional, Tuple

from core.config_loader import PowerMatchConfig
from core.utils import ensure_utc
from database.models import JobSeekerProfile


def has_recent_check_in(
    last_check_in: Optional[datetime],
    now: datetime,
    window_hours: float
) -> bool:
    if last_check_in is None:
        return False
    return ensure_utc(last_check_in) >= now - timedelta(hours=window_hours)


def check_candidate_eligibility(
    seeker: Optional[JobSeekerProfile],
    now: datetime,
    config: PowerMatchConfig
) -> Tuple[bool, str]:
    """Return (eligible, reason). The reason is empty when eligible."""
    if seeker is None:
        return False, "no job seeker profile"
    if not seeker.is_pro or not seeker.pro_active_status:
        return False, "Pro subscription inactive"
    if config.require_daily_check_in and not has_recent_check_in(
        seeker.last_active_check_in, now, config.check_in_window_hours
    ):
        return False, "no daily check-in"
    return True, ""


def is_candidate_eligible(
    seeker: Optional[JobSeekerProfile],
    now: datetime,
    config: PowerMatchConfig
) -> bool:
    eligible, _ = check_candidate_eligibility(seeker, now, config)
    return eligible
