#!/usr/bin/env python3
"""
Employer power match endpoints - review matched candidates and invite them.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, Request, Response

from core.app_context import AppContext
from ..dependencies import get_app_context, get_current_user_id
from ..limiter import limiter, trigger_rate_limit
from ..models.requests import EmployerGenerateRequest, SendInvitationRequest
from ..models.responses import (
    EmployerGenerationResponse,
    EmployerPowerMatchItem,
    EmployerPowerMatchesResponse,
    SendInvitationResponse,
    ViewResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/employer/power-matches", tags=["employer-power-matches"])


@router.get("", response_model=EmployerPowerMatchesResponse)
def list_employer_power_matches(
    job_id: str = Query(..., description="One of the caller's jobs"),
    min_score: Optional[float] = Query(default=None, ge=0, le=100, description="Minimum match score (0-100)"),
    status: Optional[str] = Query(default=None, description="Invitation status filter, or 'all'"),
    page: int = Query(default=1, ge=1),
    page_size: Optional[int] = Query(default=None, ge=1, le=100),
    employer_id: str = Depends(get_current_user_id),
    ctx: AppContext = Depends(get_app_context)
):
    """Candidates matched to a job, highest score first."""
    result = ctx.queries.list_employer_power_matches(
        employer_id,
        job_id,
        min_score=min_score,
        status=status,
        page=page,
        page_size=page_size
    )
    return EmployerPowerMatchesResponse(
        success=True,
        total=result.total,
        page=result.page,
        page_size=result.page_size,
        matches=[EmployerPowerMatchItem.model_validate(item) for item in result.items]
    )


@router.post("/generate", response_model=EmployerGenerationResponse)
@limiter.limit(trigger_rate_limit)
def generate_employer_power_matches(
    request: Request,
    response: Response,
    body: EmployerGenerateRequest,
    employer_id: str = Depends(get_current_user_id),
    ctx: AppContext = Depends(get_app_context)
):
    """Run candidate matching for one of the caller's jobs."""
    result = ctx.employer_generator.generate_for_job(body.job_id, employer_id)
    if result.status != "success":
        response.status_code = 503

    return EmployerGenerationResponse(
        success=result.status == "success",
        message=result.message,
        jobs_processed=result.jobs_processed,
        jobs_failed=result.jobs_failed,
        jobs_skipped=result.jobs_skipped,
        total_matches_created=result.total_matches_created,
        scoring_failures=result.scoring_failures,
        skipped_existing=result.skipped_existing,
        persistence_failures=result.persistence_failures
    )


@router.post("/{match_id}/view", response_model=ViewResponse)
def mark_employer_match_viewed(
    match_id: str,
    employer_id: str = Depends(get_current_user_id),
    ctx: AppContext = Depends(get_app_context)
):
    result = ctx.view_tracker.mark_employer_match_viewed(match_id, employer_id)
    return ViewResponse(
        success=True,
        match_id=result.match_id,
        viewed_at=result.viewed_at,
        updated=result.updated
    )


@router.post("/{match_id}/invite", response_model=SendInvitationResponse)
def send_invitation(
    match_id: str,
    body: SendInvitationRequest,
    employer_id: str = Depends(get_current_user_id),
    ctx: AppContext = Depends(get_app_context)
):
    """
    Invite the matched candidate to apply.

    Returns 409 if an invitation was already sent for this match.
    """
    invitation_id = ctx.invitations.send_invitation(
        match_id,
        employer_id,
        body.job_id,
        body.candidate_id,
        body.message
    )
    return SendInvitationResponse(success=True, invitation_id=invitation_id)
