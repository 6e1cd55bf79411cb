"""Pipeline execution modules for the Power Match service."""

from .runner import run_power_match_pipeline, run_step, PipelineRunResult, PIPELINE_STEPS

__all__ = ['run_power_match_pipeline', 'run_step', 'PipelineRunResult', 'PIPELINE_STEPS']
