import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.orm import joinedload

from database.models import Application, EmployerProfile, Job, PowerMatch, Profile
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class PowerMatchRepository(BaseRepository):
    def get_by_id(self, match_id: str, refresh: bool = False) -> Optional[PowerMatch]:
        return self.db.get(PowerMatch, match_id, populate_existing=refresh)

    def create(self, user_id: str, job_id: str, match_score: float, created_at: datetime) -> PowerMatch:
        match = PowerMatch(
            user_id=user_id,
            job_id=job_id,
            match_score=match_score,
            created_at=created_at
        )
        self.db.add(match)
        self.db.flush()  # Generate ID, surface unique violations now
        return match

    def link_application(self, match: PowerMatch, application: Application, applied_at: datetime) -> None:
        """Record the auto-created application. applied_at and application_id always move together."""
        match.application_id = application.id
        match.applied_at = applied_at
        self.db.flush()

    def mark_viewed(self, match_id: str, user_id: str, viewed_at: datetime) -> int:
        """
        Stamp viewed_at for the owner, only if it is still unset.

        Returns the number of rows updated (0 or 1). Ownership and the
        first-view guard are both part of the WHERE clause so concurrent
        or foreign calls never overwrite the timestamp.
        """
        stmt = update(PowerMatch).where(
            PowerMatch.id == match_id,
            PowerMatch.user_id == user_id,
            PowerMatch.viewed_at.is_(None)
        ).values(
            viewed_at=viewed_at
        ).execution_options(synchronize_session=False)
        return self.db.execute(stmt).rowcount

    def list_for_user(self, user_id: str) -> List[PowerMatch]:
        stmt = select(PowerMatch).where(
            PowerMatch.user_id == user_id
        ).options(
            joinedload(PowerMatch.job)
            .joinedload(Job.employer)
            .joinedload(Profile.employer_profile)
        ).order_by(PowerMatch.created_at.desc(), PowerMatch.id)
        return self.db.execute(stmt).unique().scalars().all()

    def get_withdrawal_candidates(self, applied_before: datetime, limit: Optional[int] = None) -> List[PowerMatch]:
        """
        Auto-applied matches that were never viewed and whose application
        is older than the cutoff. Matches already handled by a previous
        sweep carry withdrawn_at and are excluded.
        """
        stmt = select(PowerMatch).where(
            PowerMatch.application_id.is_not(None),
            PowerMatch.applied_at.is_not(None),
            PowerMatch.viewed_at.is_(None),
            PowerMatch.withdrawn_at.is_(None),
            PowerMatch.applied_at < applied_before
        ).order_by(PowerMatch.applied_at, PowerMatch.id)
        if limit:
            stmt = stmt.limit(limit)
        return self.db.execute(stmt).scalars().all()

    def claim_for_withdrawal(self, match_id: str, withdrawn_at: datetime) -> int:
        """Stamp withdrawn_at unless the match was viewed or handled meanwhile."""
        stmt = update(PowerMatch).where(
            PowerMatch.id == match_id,
            PowerMatch.viewed_at.is_(None),
            PowerMatch.withdrawn_at.is_(None)
        ).values(
            withdrawn_at=withdrawn_at
        ).execution_options(synchronize_session=False)
        return self.db.execute(stmt).rowcount

    def get_pending_auto_apply(self, limit: Optional[int] = None) -> List[PowerMatch]:
        """Matches that have not been applied to, viewed or withdrawn yet."""
        stmt = select(PowerMatch).where(
            PowerMatch.applied_at.is_(None),
            PowerMatch.application_id.is_(None),
            PowerMatch.viewed_at.is_(None),
            PowerMatch.withdrawn_at.is_(None)
        ).order_by(PowerMatch.created_at, PowerMatch.id)
        if limit:
            stmt = stmt.limit(limit)
        return self.db.execute(stmt).scalars().all()
