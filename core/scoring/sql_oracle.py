#!/usr/bin/env python3
"""
SQL Scoring Oracle - calls the match score database function.

The scoring algorithm lives in Postgres as
`calculate_match_score(p_user_id, p_job_id)`. This adapter invokes it on
the shared session factory, retries connection-level errors with
tenacity and converts the result to the canonical 0-100 scale.
"""

import re
import logging
from decimal import Decimal
from typing import Any

from sqlalchemy import text
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_fixed

from core.errors import ScoringFailure, ScoringUnavailable
from core.scoring.interfaces import ScoringOracle
from core.utils import clamp_score

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$')


def normalize_score(value: Any, user_id: str, job_id: str) -> float:
    """Convert a raw oracle result to a float in [0, 100]."""
    if value is None:
        raise ScoringFailure(user_id, job_id, "oracle returned no score")
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise ScoringFailure(user_id, job_id, f"non-numeric score {value!r}")
    try:
        return clamp_score(float(value))
    except ValueError as e:
        raise ScoringFailure(user_id, job_id, str(e)) from e


class SqlScoringOracle(ScoringOracle):
    """Scores pairs by calling a SQL function through SQLAlchemy."""

    def __init__(
        self,
        session_factory: sessionmaker,
        function_name: str = "calculate_match_score",
        max_attempts: int = 3,
        retry_wait_seconds: float = 1.0
    ):
        if not _IDENTIFIER.match(function_name):
            raise ValueError(f"Invalid scoring function name: {function_name!r}")
        self.session_factory = session_factory
        self.function_name = function_name
        self.max_attempts = max_attempts
        self.retry_wait_seconds = retry_wait_seconds
        self._stmt = text(f"SELECT {function_name}(:p_user_id, :p_job_id)")

    def score(self, user_id: str, job_id: str) -> float:
        retryer = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_fixed(self.retry_wait_seconds),
            retry=retry_if_exception_type(OperationalError),
            reraise=True
        )
        try:
            raw = retryer(self._call, user_id, job_id)
        except OperationalError as e:
            logger.error(f"Scoring oracle unreachable after {self.max_attempts} attempts: {e}")
            raise ScoringUnavailable(f"Scoring oracle unreachable: {e}") from e
        except SQLAlchemyError as e:
            raise ScoringFailure(user_id, job_id, str(e)) from e

        return normalize_score(raw, user_id, job_id)

    def _call(self, user_id: str, job_id: str) -> Any:
        with self.session_factory() as session:
            return session.execute(
                self._stmt,
                {"p_user_id": user_id, "p_job_id": job_id}
            ).scalar()
