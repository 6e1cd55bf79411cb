from sqlalchemy import Column, String, Text, TIMESTAMP, ForeignKey, Boolean, Numeric, Index
from sqlalchemy.orm import relationship

from core.utils import new_id, utc_now
from .base import Base


class Job(Base):
    """
    Job posting. Managed by the job posting CRUD layer; read here to find
    open jobs and their owning employer.
    """
    __tablename__ = 'jobs'

    id = Column(String(36), primary_key=True, default=new_id)
    employer_id = Column(String(36), ForeignKey('profiles.id', ondelete='SET NULL'), nullable=True)

    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False, default='')
    location = Column(Text)
    remote = Column(Boolean)
    job_type = Column(Text)
    experience_level = Column(Text)
    salary_min = Column(Numeric)
    salary_max = Column(Numeric)

    status = Column(Text, nullable=False, default='open')  # open|closed|draft
    is_deleted = Column(Boolean, nullable=False, default=False)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    employer = relationship("Profile", foreign_keys=[employer_id])

    __table_args__ = (
        Index('idx_jobs_status', 'status', 'is_deleted'),
        Index('idx_jobs_employer', 'employer_id'),
    )
