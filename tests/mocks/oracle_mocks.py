#!/usr/bin/env python3
"""
Scripted scoring oracle for tests.

Scores are looked up by (user_id, job_id), then job_id, then user_id,
falling back to a default. Failures can be scripted per pair or per call
number (1-based, in call order).
"""
from typing import Dict, Iterable, List, Optional, Tuple

from core.errors import ScoringFailure, ScoringUnavailable
from core.scoring.interfaces import ScoringOracle


class ScriptedScoringOracle(ScoringOracle):

    def __init__(
        self,
        scores: Optional[Dict] = None,
        default: float = 0.0,
        fail_pairs: Iterable[Tuple[str, str]] = (),
        fail_on_calls: Iterable[int] = (),
        unavailable_on_call: Optional[int] = None,
        error_on_jobs: Iterable[str] = ()
    ):
        self.scores = dict(scores or {})
        self.default = default
        self.fail_pairs = set(fail_pairs)
        self.fail_on_calls = set(fail_on_calls)
        self.unavailable_on_call = unavailable_on_call
        self.error_on_jobs = set(error_on_jobs)
        self.calls: List[Tuple[str, str]] = []

    def score(self, user_id: str, job_id: str) -> float:
        self.calls.append((user_id, job_id))
        call_number = len(self.calls)

        if self.unavailable_on_call is not None and call_number >= self.unavailable_on_call:
            raise ScoringUnavailable("scripted outage")
        if job_id in self.error_on_jobs:
            raise RuntimeError(f"unexpected error for job {job_id}")
        if call_number in self.fail_on_calls or (user_id, job_id) in self.fail_pairs:
            raise ScoringFailure(user_id, job_id, "scripted failure")

        for key in ((user_id, job_id), job_id, user_id):
            if key in self.scores:
                return float(self.scores[key])
        return self.default
