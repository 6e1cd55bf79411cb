#!/usr/bin/env python3
"""
Power Match Models - result structures returned by the lifecycle services.
"""

from dataclasses import dataclass, asdict, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass
class ScoredPair:
    """A (candidate, job) pair that cleared the score threshold."""
    user_id: str
    job_id: str
    score: float
    employer_id: Optional[str] = None


@dataclass
class GenerationResult:
    """Outcome of a candidate-facing generation run."""
    status: str = "success"  # success | error
    message: str = ""
    new_matches_applied: int = 0
    matches_created: int = 0
    pairs_evaluated: int = 0
    scoring_failures: int = 0
    persistence_failures: int = 0
    skipped_existing: int = 0
    users_processed: int = 0
    users_skipped: int = 0
    users_failed: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class AutoApplyResult:
    matches_processed: int = 0
    applications_created: int = 0
    application_errors: int = 0
    skipped: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class EmployerGenerationResult:
    """Outcome of an employer-facing generation run."""
    status: str = "success"
    message: str = ""
    jobs_processed: int = 0
    jobs_failed: int = 0
    jobs_skipped: int = 0
    total_matches_created: int = 0
    scoring_failures: int = 0
    skipped_existing: int = 0
    persistence_failures: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ViewResult:
    match_id: str
    viewed_at: Optional[datetime]
    updated: bool


@dataclass
class SweepResult:
    """Counts reported by one auto-withdrawal sweep."""
    matches_checked: int = 0
    withdrawals_triggered: int = 0
    withdrawal_failures: int = 0
    already_withdrawn: int = 0
    skipped: int = 0
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class DeadlineStatus:
    withdrawal_deadline: datetime
    hours_remaining: int
    needs_viewing_soon: bool
