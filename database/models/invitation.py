from sqlalchemy import Column, String, Text, TIMESTAMP, ForeignKey, Index
from sqlalchemy.orm import relationship

from core.utils import new_id, utc_now
from .base import Base


class CandidateInvitation(Base):
    """
    Explicit invitation from an employer to a candidate surfaced by an
    EmployerPowerMatch. One invitation per match.
    """
    __tablename__ = 'candidate_invitations'

    id = Column(String(36), primary_key=True, default=new_id)
    power_match_id = Column(
        String(36),
        ForeignKey('employer_power_matches.id', ondelete='CASCADE'),
        nullable=False,
        unique=True,
    )
    employer_id = Column(String(36), ForeignKey('profiles.id', ondelete='CASCADE'), nullable=False)
    job_id = Column(String(36), ForeignKey('jobs.id', ondelete='CASCADE'), nullable=False)
    candidate_id = Column(String(36), ForeignKey('profiles.id', ondelete='CASCADE'), nullable=False)

    message = Column(Text)
    status = Column(Text, nullable=False, default='pending')  # pending|accepted|declined

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)
    responded_at = Column(TIMESTAMP(timezone=True), nullable=True)
    application_id = Column(String(36), ForeignKey('applications.id', ondelete='SET NULL'), nullable=True)

    power_match = relationship("EmployerPowerMatch")
    job = relationship("Job")
    employer = relationship("Profile", foreign_keys=[employer_id])

    __table_args__ = (
        Index('idx_candidate_invitations_candidate', 'candidate_id', 'status'),
    )
