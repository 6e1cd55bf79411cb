import enum

from sqlalchemy import Column, String, Text, TIMESTAMP, ForeignKey, Numeric, Enum, UniqueConstraint, Index
from sqlalchemy.orm import relationship

from core.utils import new_id, utc_now
from .base import Base


class ApplicationStage(str, enum.Enum):
    APPLIED = "Applied"
    SCREENING = "Screening"
    INTERVIEW = "Interview"
    OFFER = "Offer"
    REJECTED = "Rejected"
    WITHDRAWN = "Withdrawn"


class Application(Base):
    """
    A candidate's application to a job.

    `stage` is the hiring pipeline position; `status` is a free-form marker
    set alongside it (e.g. "active" on auto-apply, "inactive" on withdrawal).
    """
    __tablename__ = 'applications'

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey('profiles.id', ondelete='CASCADE'), nullable=False)
    job_id = Column(String(36), ForeignKey('jobs.id', ondelete='CASCADE'), nullable=False)

    status = Column(Text, nullable=False, default='active')
    stage = Column(
        Enum(
            ApplicationStage,
            name='application_stage',
            values_callable=lambda stages: [s.value for s in stages],
        ),
        nullable=False,
        default=ApplicationStage.APPLIED,
    )
    cover_letter = Column(Text)
    match_score = Column(Numeric(5, 2))

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)

    job = relationship("Job")

    __table_args__ = (
        UniqueConstraint('user_id', 'job_id', name='uq_applications_user_job'),
        Index('idx_applications_job', 'job_id'),
    )
