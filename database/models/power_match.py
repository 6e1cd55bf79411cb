from sqlalchemy import Column, String, TIMESTAMP, ForeignKey, Numeric, Text, UniqueConstraint, Index
from sqlalchemy.orm import relationship

from core.utils import new_id, utc_now
from .base import Base


class PowerMatch(Base):
    """
    Candidate-facing Power Match: a high-scoring (candidate, job) pair,
    optionally auto-applied.

    Lifecycle:
    - created by the generator (applied_at/application_id set in the same
      transaction when auto-applying)
    - viewed_at stamped once by the view tracker
    - withdrawn_at stamped by the sweeper when the linked application is
      withdrawn for not being viewed in time
    """
    __tablename__ = 'power_matches'

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey('profiles.id', ondelete='CASCADE'), nullable=False)
    job_id = Column(String(36), ForeignKey('jobs.id', ondelete='CASCADE'), nullable=False)

    match_score = Column(Numeric(5, 2), nullable=False)  # 0-100

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)
    viewed_at = Column(TIMESTAMP(timezone=True), nullable=True)
    applied_at = Column(TIMESTAMP(timezone=True), nullable=True)
    application_id = Column(String(36), ForeignKey('applications.id', ondelete='SET NULL'), nullable=True)
    withdrawn_at = Column(TIMESTAMP(timezone=True), nullable=True)

    job = relationship("Job")
    application = relationship("Application")

    __table_args__ = (
        UniqueConstraint('user_id', 'job_id', name='uq_power_matches_user_job'),
        Index('idx_power_matches_user_created', 'user_id', 'created_at'),
        Index('idx_power_matches_sweep', 'applied_at', postgresql_where=viewed_at.is_(None)),
    )


class EmployerPowerMatch(Base):
    """
    Employer-facing Power Match: a strong candidate surfaced for one of the
    employer's open jobs. The employer decides whether to invite.
    """
    __tablename__ = 'employer_power_matches'

    id = Column(String(36), primary_key=True, default=new_id)
    job_id = Column(String(36), ForeignKey('jobs.id', ondelete='CASCADE'), nullable=False)
    user_id = Column(String(36), ForeignKey('profiles.id', ondelete='CASCADE'), nullable=False)
    employer_id = Column(String(36), ForeignKey('profiles.id', ondelete='CASCADE'), nullable=False)

    match_score = Column(Numeric(5, 2), nullable=False)  # 0-100

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)
    viewed_at = Column(TIMESTAMP(timezone=True), nullable=True)
    sent_invitation_at = Column(TIMESTAMP(timezone=True), nullable=True)
    invitation_status = Column(Text, nullable=False, default='not_invited')  # not_invited|pending|accepted|declined

    job = relationship("Job")
    candidate = relationship("Profile", foreign_keys=[user_id])

    __table_args__ = (
        UniqueConstraint('job_id', 'user_id', name='uq_employer_power_matches_job_user'),
        Index('idx_employer_power_matches_employer_job', 'employer_id', 'job_id'),
        Index('idx_employer_power_matches_score', 'match_score'),
    )
