import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.orm import joinedload

from database.models import CandidateInvitation, Profile
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class InvitationRepository(BaseRepository):
    def get_by_id(self, invitation_id: str, refresh: bool = False) -> Optional[CandidateInvitation]:
        return self.db.get(CandidateInvitation, invitation_id, populate_existing=refresh)

    def create(
        self,
        power_match_id: str,
        employer_id: str,
        job_id: str,
        candidate_id: str,
        message: Optional[str],
        created_at: datetime
    ) -> CandidateInvitation:
        invitation = CandidateInvitation(
            power_match_id=power_match_id,
            employer_id=employer_id,
            job_id=job_id,
            candidate_id=candidate_id,
            message=message,
            status='pending',
            created_at=created_at
        )
        self.db.add(invitation)
        self.db.flush()
        return invitation

    def respond(self, invitation_id: str, status: str, responded_at: datetime) -> int:
        """Move pending -> accepted/declined. Returns 0 if already answered."""
        stmt = update(CandidateInvitation).where(
            CandidateInvitation.id == invitation_id,
            CandidateInvitation.status == 'pending'
        ).values(
            status=status,
            responded_at=responded_at
        ).execution_options(synchronize_session=False)
        return self.db.execute(stmt).rowcount

    def link_application(self, invitation_id: str, application_id: str) -> None:
        stmt = update(CandidateInvitation).where(
            CandidateInvitation.id == invitation_id
        ).values(
            application_id=application_id
        ).execution_options(synchronize_session=False)
        self.db.execute(stmt)

    def list_for_candidate(self, candidate_id: str, status: Optional[str] = None) -> List[CandidateInvitation]:
        stmt = select(CandidateInvitation).where(
            CandidateInvitation.candidate_id == candidate_id
        ).options(
            joinedload(CandidateInvitation.job),
            joinedload(CandidateInvitation.employer).joinedload(Profile.employer_profile)
        )
        if status:
            stmt = stmt.where(CandidateInvitation.status == status)
        stmt = stmt.order_by(CandidateInvitation.created_at.desc(), CandidateInvitation.id)
        return self.db.execute(stmt).unique().scalars().all()
