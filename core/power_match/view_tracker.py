"""
View Tracker - records the first time an owner looks at a match.

viewed_at is written with a conditional update (owner matches and the
column is still NULL), so it is set at most once and concurrent calls
cannot overwrite it. A viewed candidate match is no longer eligible for
auto-withdrawal.
"""
import logging
from datetime import datetime
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from core.errors import AuthorizationFailure, NotFoundError, PersistenceFailure
from core.power_match.models import ViewResult
from core.utils import ensure_utc, utc_now
from database.uow import power_match_uow

logger = logging.getLogger(__name__)


class ViewTracker:
    def __init__(self, session_factory: sessionmaker, clock: Callable[[], datetime] = utc_now):
        self.session_factory = session_factory
        self.clock = clock

    def mark_viewed(self, match_id: str, user_id: str) -> ViewResult:
        """Stamp a candidate's PowerMatch as viewed."""
        now = self.clock()
        try:
            with power_match_uow(self.session_factory) as repo:
                if repo.power_matches.mark_viewed(match_id, user_id, now):
                    logger.info(f"Power match {match_id} viewed by user {user_id}")
                    return ViewResult(match_id=match_id, viewed_at=now, updated=True)

                match = repo.power_matches.get_by_id(match_id, refresh=True)
                if match is None:
                    raise NotFoundError(f"Power match {match_id} not found")
                if match.user_id != user_id:
                    raise AuthorizationFailure(f"Power match {match_id} does not belong to user {user_id}")
                return ViewResult(match_id=match_id, viewed_at=ensure_utc(match.viewed_at), updated=False)
        except SQLAlchemyError as e:
            logger.error(f"Failed to mark power match {match_id} viewed: {e}")
            raise PersistenceFailure(f"Failed to mark power match {match_id} viewed") from e

    def mark_employer_match_viewed(self, match_id: str, employer_id: str) -> ViewResult:
        """Stamp an EmployerPowerMatch as viewed by its employer."""
        now = self.clock()
        try:
            with power_match_uow(self.session_factory) as repo:
                if repo.employer_matches.mark_viewed(match_id, employer_id, now):
                    logger.info(f"Employer power match {match_id} viewed by employer {employer_id}")
                    return ViewResult(match_id=match_id, viewed_at=now, updated=True)

                match = repo.employer_matches.get_by_id(match_id, refresh=True)
                if match is None:
                    raise NotFoundError(f"Employer power match {match_id} not found")
                if match.employer_id != employer_id:
                    raise AuthorizationFailure(
                        f"Employer power match {match_id} does not belong to employer {employer_id}"
                    )
                return ViewResult(match_id=match_id, viewed_at=ensure_utc(match.viewed_at), updated=False)
        except SQLAlchemyError as e:
            logger.error(f"Failed to mark employer power match {match_id} viewed: {e}")
            raise PersistenceFailure(f"Failed to mark employer power match {match_id} viewed") from e
