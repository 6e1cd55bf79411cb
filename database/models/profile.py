from sqlalchemy import Column, String, Text, TIMESTAMP, ForeignKey, Boolean, Index
from sqlalchemy.orm import relationship

from core.utils import utc_now
from .base import Base


class Profile(Base):
    """
    Account profile shared by job seekers and employers.

    Owned by the auth/profile layer; this service only reads it.
    """
    __tablename__ = 'profiles'

    id = Column(String(36), primary_key=True)
    email = Column(Text, nullable=False)
    full_name = Column(Text)
    type = Column(Text, nullable=False)  # job_seeker|employer
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    job_seeker_profile = relationship("JobSeekerProfile", back_populates="profile", uselist=False)
    employer_profile = relationship("EmployerProfile", back_populates="profile", uselist=False)


class JobSeekerProfile(Base):
    """
    Job seeker details, including the Pro subscription flags that gate
    Power Match eligibility.
    """
    __tablename__ = 'job_seeker_profiles'

    id = Column(String(36), ForeignKey('profiles.id', ondelete='CASCADE'), primary_key=True)
    headline = Column(Text)
    desired_role = Column(Text)
    location = Column(Text)

    # Pro subscription
    is_pro = Column(Boolean, default=False)
    pro_active_status = Column(Boolean, default=False)
    last_active_check_in = Column(TIMESTAMP(timezone=True))

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    profile = relationship("Profile", back_populates="job_seeker_profile")

    __table_args__ = (
        Index('idx_job_seeker_pro', 'is_pro', 'pro_active_status'),
    )


class EmployerProfile(Base):
    __tablename__ = 'employer_profiles'

    id = Column(String(36), ForeignKey('profiles.id', ondelete='CASCADE'), primary_key=True)
    company_name = Column(Text, nullable=False)
    industry = Column(Text)
    website = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    profile = relationship("Profile", back_populates="employer_profile")
