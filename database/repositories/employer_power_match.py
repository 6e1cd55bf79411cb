import logging
from datetime import datetime
from typing import List, Optional, Set, Tuple

from sqlalchemy import select, update, func

from database.models import EmployerPowerMatch
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)

INVITATION_STATUSES = ('not_invited', 'pending', 'accepted', 'declined')


class EmployerPowerMatchRepository(BaseRepository):
    def get_by_id(self, match_id: str, refresh: bool = False) -> Optional[EmployerPowerMatch]:
        return self.db.get(EmployerPowerMatch, match_id, populate_existing=refresh)

    def matched_user_ids_for_job(self, job_id: str) -> Set[str]:
        stmt = select(EmployerPowerMatch.user_id).where(EmployerPowerMatch.job_id == job_id)
        return set(self.db.execute(stmt).scalars().all())

    def create(
        self,
        job_id: str,
        user_id: str,
        employer_id: str,
        match_score: float,
        created_at: datetime
    ) -> EmployerPowerMatch:
        match = EmployerPowerMatch(
            job_id=job_id,
            user_id=user_id,
            employer_id=employer_id,
            match_score=match_score,
            created_at=created_at,
            invitation_status='not_invited'
        )
        self.db.add(match)
        self.db.flush()
        return match

    def mark_viewed(self, match_id: str, employer_id: str, viewed_at: datetime) -> int:
        stmt = update(EmployerPowerMatch).where(
            EmployerPowerMatch.id == match_id,
            EmployerPowerMatch.employer_id == employer_id,
            EmployerPowerMatch.viewed_at.is_(None)
        ).values(
            viewed_at=viewed_at
        ).execution_options(synchronize_session=False)
        return self.db.execute(stmt).rowcount

    def mark_invited(self, match_id: str, sent_at: datetime) -> int:
        """Move not_invited -> pending. Returns 0 if an invitation was already sent."""
        stmt = update(EmployerPowerMatch).where(
            EmployerPowerMatch.id == match_id,
            EmployerPowerMatch.invitation_status == 'not_invited',
            EmployerPowerMatch.sent_invitation_at.is_(None)
        ).values(
            invitation_status='pending',
            sent_invitation_at=sent_at
        ).execution_options(synchronize_session=False)
        return self.db.execute(stmt).rowcount

    def resolve_invitation(self, match_id: str, status: str) -> int:
        """Move pending -> accepted/declined."""
        stmt = update(EmployerPowerMatch).where(
            EmployerPowerMatch.id == match_id,
            EmployerPowerMatch.invitation_status == 'pending'
        ).values(
            invitation_status=status
        ).execution_options(synchronize_session=False)
        return self.db.execute(stmt).rowcount

    def list_for_job(
        self,
        employer_id: str,
        job_id: str,
        min_score: Optional[float] = None,
        status: Optional[str] = None,
        offset: int = 0,
        limit: int = 10
    ) -> Tuple[List[EmployerPowerMatch], int]:
        """
        Page through an employer's matches for a job, best score first.

        Returns the page and the total number of rows matching the filters.
        """
        stmt = select(EmployerPowerMatch).where(
            EmployerPowerMatch.employer_id == employer_id,
            EmployerPowerMatch.job_id == job_id
        )
        if min_score is not None:
            stmt = stmt.where(EmployerPowerMatch.match_score >= min_score)
        if status and status != 'all':
            stmt = stmt.where(EmployerPowerMatch.invitation_status == status)

        total = self.db.execute(
            select(func.count()).select_from(stmt.subquery())
        ).scalar_one()

        stmt = stmt.order_by(
            EmployerPowerMatch.match_score.desc(),
            EmployerPowerMatch.created_at,
            EmployerPowerMatch.id
        ).offset(offset).limit(limit)
        return self.db.execute(stmt).scalars().all(), total
