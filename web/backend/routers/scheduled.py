#!/usr/bin/env python3
"""
Scheduled-job endpoints, called by the platform scheduler.

All routes require `Authorization: Bearer <FUNCTION_SECRET>`.
"""

import logging
from fastapi import APIRouter, Depends, Response

from core.app_context import AppContext
from pipeline.runner import (
    STEP_AUTO_APPLY,
    STEP_GENERATE,
    STEP_GENERATE_EMPLOYER,
    STEP_SWEEP,
    PipelineRunResult,
    run_power_match_pipeline,
    run_step,
)
from ..dependencies import get_app_context, require_function_secret
from ..models.responses import ScheduledRunResponse

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/scheduled",
    tags=["scheduled"],
    dependencies=[Depends(require_function_secret)]
)


def _to_response(result: PipelineRunResult, response: Response) -> ScheduledRunResponse:
    if not result.success:
        response.status_code = 500
    return ScheduledRunResponse(
        success=result.success,
        steps=result.steps,
        error=result.error,
        execution_time=result.execution_time
    )


@router.post("/generate-power-matches", response_model=ScheduledRunResponse)
def generate_power_matches(response: Response, ctx: AppContext = Depends(get_app_context)):
    """Daily candidate generation for every eligible Pro user."""
    return _to_response(run_step(ctx, STEP_GENERATE), response)


@router.post("/generate-employer-power-matches", response_model=ScheduledRunResponse)
def generate_employer_power_matches(response: Response, ctx: AppContext = Depends(get_app_context)):
    return _to_response(run_step(ctx, STEP_GENERATE_EMPLOYER), response)


@router.post("/auto-apply", response_model=ScheduledRunResponse)
def auto_apply(response: Response, ctx: AppContext = Depends(get_app_context)):
    """Create applications for matches saved without one."""
    return _to_response(run_step(ctx, STEP_AUTO_APPLY), response)


@router.post("/auto-withdraw", response_model=ScheduledRunResponse)
def auto_withdraw(response: Response, ctx: AppContext = Depends(get_app_context)):
    """Withdraw auto-applied matches that were not viewed in time."""
    return _to_response(run_step(ctx, STEP_SWEEP), response)


@router.post("/run", response_model=ScheduledRunResponse)
def run_all(response: Response, ctx: AppContext = Depends(get_app_context)):
    """Run every step in order."""
    return _to_response(run_power_match_pipeline(ctx), response)
