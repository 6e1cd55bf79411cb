"""Shared Power Match pipeline runner module.

This module contains the scheduled pipeline logic that is used by both
main.py and the scheduled-job endpoints of the web application.
"""

import time
import logging
import threading
from typing import Any, Callable, Dict, Optional
from dataclasses import dataclass, field

from core.app_context import AppContext


logger = logging.getLogger(__name__)

STEP_GENERATE = "generate"
STEP_GENERATE_EMPLOYER = "generate-employer"
STEP_AUTO_APPLY = "auto-apply"
STEP_SWEEP = "sweep"

PIPELINE_STEPS = (STEP_GENERATE, STEP_GENERATE_EMPLOYER, STEP_AUTO_APPLY, STEP_SWEEP)


@dataclass
class PipelineRunResult:
    """Result of running one or more pipeline steps."""
    success: bool
    steps: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    error: Optional[str] = None
    execution_time: float = 0.0


def _run_generate(ctx: AppContext) -> Dict[str, Any]:
    return ctx.generator.generate_batch().to_dict()


def _run_generate_employer(ctx: AppContext) -> Dict[str, Any]:
    return ctx.employer_generator.generate_batch().to_dict()


def _run_auto_apply(ctx: AppContext) -> Dict[str, Any]:
    return ctx.generator.apply_pending_matches().to_dict()


def _run_sweep(ctx: AppContext) -> Dict[str, Any]:
    return ctx.sweeper.sweep().to_dict()


_STEP_RUNNERS: Dict[str, Callable[[AppContext], Dict[str, Any]]] = {
    STEP_GENERATE: _run_generate,
    STEP_GENERATE_EMPLOYER: _run_generate_employer,
    STEP_AUTO_APPLY: _run_auto_apply,
    STEP_SWEEP: _run_sweep,
}


def _step_failed(summary: Dict[str, Any]) -> bool:
    return summary.get("status") == "error"


def run_step(ctx: AppContext, step: str) -> PipelineRunResult:
    """Run a single named pipeline step."""
    if step not in _STEP_RUNNERS:
        raise ValueError(f"Unknown pipeline step: {step}")

    step_start = time.time()
    logger.info(f"=== POWER MATCH STEP: {step} ===")
    try:
        summary = _STEP_RUNNERS[step](ctx)
    except Exception as e:
        logger.error(f"Step {step} failed: {e}", exc_info=True)
        return PipelineRunResult(
            success=False,
            error=f"{step}: {e}",
            execution_time=time.time() - step_start
        )

    step_elapsed = time.time() - step_start
    logger.info(f"Step {step} completed in {step_elapsed:.2f}s: {summary}")
    return PipelineRunResult(
        success=not _step_failed(summary),
        steps={step: summary},
        error=summary.get("message") if _step_failed(summary) else None,
        execution_time=step_elapsed
    )


def run_power_match_pipeline(
    ctx: AppContext,
    stop_event: Optional[threading.Event] = None,
    status_callback: Optional[Callable[[str], None]] = None
) -> PipelineRunResult:
    """Run the full scheduled cycle.

    Steps run in order: candidate generation, employer generation, the
    pending auto-apply pass and the auto-withdrawal sweep. A failing step
    is recorded and the remaining steps still run.

    Args:
        ctx: Application context with config and wired services
        stop_event: Optional threading event to signal early termination
        status_callback: Optional callback receiving the current step name

    Returns:
        PipelineRunResult with per-step summaries
    """
    if stop_event is None:
        stop_event = threading.Event()

    pipeline_start = time.time()

    logger.info("=" * 60)
    logger.info("STARTING POWER MATCH PIPELINE")
    logger.info("=" * 60)

    result = PipelineRunResult(success=True)
    errors = []

    for step in PIPELINE_STEPS:
        if stop_event.is_set():
            errors.append("Interrupted by system")
            result.success = False
            break

        if step == STEP_AUTO_APPLY and not ctx.config.power_match.auto_apply:
            logger.info("=== AUTO-APPLY STEP: Skipped (disabled in config) ===")
            continue

        if status_callback:
            status_callback(step)

        step_result = run_step(ctx, step)
        result.steps.update(step_result.steps)
        if not step_result.success:
            result.success = False
            errors.append(step_result.error)

    result.error = "; ".join(errors) if errors else None
    result.execution_time = time.time() - pipeline_start

    logger.info("=" * 60)
    logger.info(f"POWER MATCH PIPELINE COMPLETED in {result.execution_time:.2f}s")
    logger.info("=" * 60)
    return result
