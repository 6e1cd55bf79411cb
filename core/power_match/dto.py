"""Data Transfer Objects for the Power Match services.

ORM rows are converted to these plain objects inside the unit of work so
the web layer and CLI can use them after the session is closed. Scores
are floats on the 0-100 scale and timestamps are UTC-aware.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from core.power_match.models import DeadlineStatus
from core.utils import ensure_utc, to_float
from database.models import (
    CandidateInvitation, EmployerPowerMatch, Job, PowerMatch, Profile
)


@dataclass
class JobSummaryDTO:
    id: str
    title: str
    location: Optional[str] = None
    remote: Optional[bool] = None
    job_type: Optional[str] = None
    status: Optional[str] = None
    company_name: Optional[str] = None


@dataclass
class PowerMatchDTO:
    """Candidate-facing match with its job summary and withdrawal countdown."""
    id: str
    user_id: str
    job_id: str
    match_score: float
    created_at: datetime
    viewed_at: Optional[datetime] = None
    applied_at: Optional[datetime] = None
    application_id: Optional[str] = None
    withdrawn_at: Optional[datetime] = None
    job: Optional[JobSummaryDTO] = None
    company_name: Optional[str] = None
    deadline: Optional[DeadlineStatus] = None


@dataclass
class EmployerPowerMatchDTO:
    id: str
    job_id: str
    user_id: str
    employer_id: str
    match_score: float
    created_at: datetime
    invitation_status: str
    viewed_at: Optional[datetime] = None
    sent_invitation_at: Optional[datetime] = None
    candidate_name: Optional[str] = None


@dataclass
class InvitationDTO:
    id: str
    power_match_id: str
    employer_id: str
    job_id: str
    candidate_id: str
    status: str
    created_at: datetime
    message: Optional[str] = None
    responded_at: Optional[datetime] = None
    application_id: Optional[str] = None
    job_title: Optional[str] = None
    company_name: Optional[str] = None


def company_name_for(employer: Optional[Profile]) -> Optional[str]:
    if employer is None or employer.employer_profile is None:
        return None
    return employer.employer_profile.company_name


def job_summary_from_orm(job: Optional[Job]) -> Optional[JobSummaryDTO]:
    if job is None:
        return None
    return JobSummaryDTO(
        id=job.id,
        title=job.title,
        location=job.location,
        remote=job.remote,
        job_type=job.job_type,
        status=job.status,
        company_name=company_name_for(job.employer)
    )


def power_match_from_orm(match: PowerMatch, deadline: Optional[DeadlineStatus] = None) -> PowerMatchDTO:
    job = job_summary_from_orm(match.job)
    return PowerMatchDTO(
        id=match.id,
        user_id=match.user_id,
        job_id=match.job_id,
        match_score=to_float(match.match_score, 0.0),
        created_at=ensure_utc(match.created_at),
        viewed_at=ensure_utc(match.viewed_at),
        applied_at=ensure_utc(match.applied_at),
        application_id=match.application_id,
        withdrawn_at=ensure_utc(match.withdrawn_at),
        job=job,
        company_name=job.company_name if job else None,
        deadline=deadline
    )


def employer_match_from_orm(match: EmployerPowerMatch) -> EmployerPowerMatchDTO:
    candidate = match.candidate
    return EmployerPowerMatchDTO(
        id=match.id,
        job_id=match.job_id,
        user_id=match.user_id,
        employer_id=match.employer_id,
        match_score=to_float(match.match_score, 0.0),
        created_at=ensure_utc(match.created_at),
        invitation_status=match.invitation_status,
        viewed_at=ensure_utc(match.viewed_at),
        sent_invitation_at=ensure_utc(match.sent_invitation_at),
        candidate_name=candidate.full_name if candidate else None
    )


def invitation_from_orm(invitation: CandidateInvitation) -> InvitationDTO:
    return InvitationDTO(
        id=invitation.id,
        power_match_id=invitation.power_match_id,
        employer_id=invitation.employer_id,
        job_id=invitation.job_id,
        candidate_id=invitation.candidate_id,
        status=invitation.status,
        created_at=ensure_utc(invitation.created_at),
        message=invitation.message,
        responded_at=ensure_utc(invitation.responded_at),
        application_id=invitation.application_id,
        job_title=invitation.job.title if invitation.job else None,
        company_name=company_name_for(invitation.employer)
    )
