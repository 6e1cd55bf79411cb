#!/usr/bin/env python3
"""
Response models for API endpoints.
"""

from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Dict, Any


class DeadlineInfo(BaseModel):
    """Auto-withdrawal countdown for an applied, unviewed match."""
    model_config = ConfigDict(from_attributes=True)

    withdrawal_deadline: datetime
    hours_remaining: int = Field(ge=0)
    needs_viewing_soon: bool


class JobSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    location: Optional[str] = None
    remote: Optional[bool] = None
    job_type: Optional[str] = None
    status: Optional[str] = None
    company_name: Optional[str] = None


class PowerMatchItem(BaseModel):
    """A candidate-facing power match."""
    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "550e8400-e29b-41d4-a716-446655440000",
                "user_id": "6ba7b810-9dad-11d1-80b4-00c04fd430c8",
                "job_id": "6ba7b811-9dad-11d1-80b4-00c04fd430c8",
                "match_score": 82.5,
                "created_at": "2026-02-01T12:00:00Z",
                "viewed_at": None,
                "applied_at": "2026-02-01T12:00:00Z",
                "application_id": "6ba7b812-9dad-11d1-80b4-00c04fd430c8",
                "withdrawn_at": None,
                "company_name": "TechCorp",
                "deadline": {
                    "withdrawal_deadline": "2026-02-03T12:00:00Z",
                    "hours_remaining": 20,
                    "needs_viewing_soon": True
                }
            }
        }
    )

    id: str
    user_id: str
    job_id: str
    match_score: float = Field(ge=0, le=100)
    created_at: datetime
    viewed_at: Optional[datetime] = None
    applied_at: Optional[datetime] = None
    application_id: Optional[str] = None
    withdrawn_at: Optional[datetime] = None
    job: Optional[JobSummary] = None
    company_name: Optional[str] = None
    deadline: Optional[DeadlineInfo] = None


class PowerMatchesResponse(BaseModel):
    success: bool
    count: int
    matches: List[PowerMatchItem]


class GenerationResponse(BaseModel):
    """Summary of a manual generation run."""
    success: bool
    message: str
    new_matches_applied: int = 0
    matches_created: int = 0
    pairs_evaluated: int = 0
    scoring_failures: int = 0
    persistence_failures: int = 0
    skipped_existing: int = 0


class ViewResponse(BaseModel):
    success: bool
    match_id: str
    viewed_at: Optional[datetime] = None
    updated: bool


class CheckInResponse(BaseModel):
    success: bool
    checked_in_at: datetime


class EmployerPowerMatchItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    job_id: str
    user_id: str
    employer_id: str
    match_score: float = Field(ge=0, le=100)
    created_at: datetime
    invitation_status: str
    viewed_at: Optional[datetime] = None
    sent_invitation_at: Optional[datetime] = None
    candidate_name: Optional[str] = None


class EmployerPowerMatchesResponse(BaseModel):
    success: bool
    total: int
    page: int
    page_size: int
    matches: List[EmployerPowerMatchItem]


class EmployerGenerationResponse(BaseModel):
    success: bool
    message: str
    jobs_processed: int = 0
    jobs_failed: int = 0
    jobs_skipped: int = 0
    total_matches_created: int = 0
    scoring_failures: int = 0
    skipped_existing: int = 0
    persistence_failures: int = 0


class SendInvitationResponse(BaseModel):
    success: bool
    invitation_id: str


class InvitationItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

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


class InvitationsResponse(BaseModel):
    success: bool
    count: int
    invitations: List[InvitationItem]


class InvitationResponse(BaseModel):
    success: bool
    invitation: InvitationItem


class ScheduledRunResponse(BaseModel):
    """Result of a scheduled pipeline invocation."""
    success: bool
    steps: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    error: Optional[str] = None
    execution_time: float = 0.0
