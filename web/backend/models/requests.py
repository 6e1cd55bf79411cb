#!/usr/bin/env python3
"""
Request models for API endpoints.
"""

from pydantic import BaseModel, Field
from typing import Optional


class EmployerGenerateRequest(BaseModel):
    """Request to generate candidate matches for one of the employer's jobs."""
    job_id: str = Field(..., description="Job to generate matches for")


class SendInvitationRequest(BaseModel):
    """Employer invitation for a matched candidate."""
    job_id: str = Field(..., description="Job the candidate is invited to")
    candidate_id: str = Field(..., description="Invited candidate's profile id")
    message: Optional[str] = Field(None, max_length=2000, description="Personal note to the candidate")


class InvitationReply(BaseModel):
    """Candidate's answer to an invitation."""
    response: str = Field(..., description="accepted or declined")
