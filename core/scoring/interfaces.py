"""
Scoring Oracle Interface.

The match score is computed outside this service; components only see
this abstraction.
"""
from abc import ABC, abstractmethod


class ScoringOracle(ABC):
    """
    Abstract compatibility oracle for (candidate, job) pairs.
    """

    @abstractmethod
    def score(self, user_id: str, job_id: str) -> float:
        """
        Return the match score for a candidate and a job, in [0, 100].

        Raises:
            ScoringFailure: the oracle could not score this pair
            ScoringUnavailable: the oracle cannot be reached at all
        """
        pass
