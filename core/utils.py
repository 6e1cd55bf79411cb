import math
import uuid
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes and convert aware ones to UTC.

    Some drivers (SQLite in particular) hand back naive timestamps even for
    timezone-aware columns. Everything stored by this service is UTC, so a
    naive value is read as UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_float(value: Optional[Any], default: Optional[float] = None) -> Optional[float]:
    """Convert Decimal/int/str scores coming from the database to float."""
    if value is None:
        return default
    if isinstance(value, Decimal):
        return float(value)
    try:
        return float(value)
    except (ValueError, TypeError):
        logger.warning(f"Could not convert {value!r} to float")
        return default


def clamp_score(value: float, low: float = 0.0, high: float = 100.0) -> float:
    """Clip a score into [low, high], rejecting NaN."""
    if math.isnan(value):
        raise ValueError("Score is NaN")
    if value < low or value > high:
        logger.warning(f"Score out of range: {value}, clipping to [{low}, {high}]")
        return max(low, min(high, value))
    return value
