#!/usr/bin/env python3
"""
Candidate power match endpoints - list, trigger generation, mark viewed,
daily check-in.
"""

import logging
from fastapi import APIRouter, Depends, Request, Response

from core.app_context import AppContext
from ..dependencies import get_app_context, get_current_user_id
from ..limiter import limiter, trigger_rate_limit
from ..models.responses import (
    CheckInResponse,
    GenerationResponse,
    PowerMatchItem,
    PowerMatchesResponse,
    ViewResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/power-matches", tags=["power-matches"])


@router.get("", response_model=PowerMatchesResponse)
def list_power_matches(
    user_id: str = Depends(get_current_user_id),
    ctx: AppContext = Depends(get_app_context)
):
    """
    The caller's power matches, newest first.

    Applied matches that have not been viewed carry a withdrawal countdown.
    """
    matches = ctx.queries.list_power_matches(user_id)
    return PowerMatchesResponse(
        success=True,
        count=len(matches),
        matches=[PowerMatchItem.model_validate(match) for match in matches]
    )


@router.post("/generate", response_model=GenerationResponse)
@limiter.limit(trigger_rate_limit)
def generate_power_matches(
    request: Request,
    response: Response,
    user_id: str = Depends(get_current_user_id),
    ctx: AppContext = Depends(get_app_context)
):
    """
    Manually run Power Match generation for the caller.

    Ineligible callers get a successful no-op with the reason in `message`.
    """
    result = ctx.generator.generate_for_user(user_id)
    if result.status != "success":
        response.status_code = 503

    return GenerationResponse(
        success=result.status == "success",
        message=result.message,
        new_matches_applied=result.new_matches_applied,
        matches_created=result.matches_created,
        pairs_evaluated=result.pairs_evaluated,
        scoring_failures=result.scoring_failures,
        persistence_failures=result.persistence_failures,
        skipped_existing=result.skipped_existing
    )


@router.post("/check-in", response_model=CheckInResponse)
def check_in(
    user_id: str = Depends(get_current_user_id),
    ctx: AppContext = Depends(get_app_context)
):
    """Confirm the caller is still actively looking (keeps Pro matching on)."""
    checked_in_at = ctx.queries.record_check_in(user_id)
    return CheckInResponse(success=True, checked_in_at=checked_in_at)


@router.post("/{match_id}/view", response_model=ViewResponse)
def mark_viewed(
    match_id: str,
    user_id: str = Depends(get_current_user_id),
    ctx: AppContext = Depends(get_app_context)
):
    """Record the first view of a match. Repeated calls are no-ops."""
    result = ctx.view_tracker.mark_viewed(match_id, user_id)
    return ViewResponse(
        success=True,
        match_id=result.match_id,
        viewed_at=result.viewed_at,
        updated=result.updated
    )
