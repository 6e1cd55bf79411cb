"""
Error taxonomy for the Power Match lifecycle.

Batch operations (generators, sweeper) catch these per item and report
counts. Single-item operations (view tracking, invitations) raise them to
the caller.
"""


class PowerMatchError(Exception):
    """Base exception for power match operations."""
    pass


class NotEligibleError(PowerMatchError):
    """Candidate or job fails matching preconditions. Callers treat it as a skip."""
    pass


class AlreadyExistsError(PowerMatchError):
    """Duplicate match/invitation, or a state transition that was already made."""
    pass


class ScoringFailure(PowerMatchError):
    """The scoring oracle failed for one (candidate, job) pair."""

    def __init__(self, user_id: str, job_id: str, reason: str):
        super().__init__(f"Scoring failed for user {user_id}, job {job_id}: {reason}")
        self.user_id = user_id
        self.job_id = job_id
        self.reason = reason


class ScoringUnavailable(PowerMatchError):
    """The scoring oracle cannot be reached at all. Fatal for the invocation."""
    pass


class PersistenceFailure(PowerMatchError):
    """A write to the store failed."""
    pass


class AuthorizationFailure(PowerMatchError):
    """Caller does not own the resource."""
    pass


class NotFoundError(PowerMatchError):
    """Referenced match, invitation, job or profile does not exist."""
    pass


class InvalidRequestError(PowerMatchError):
    """Malformed input, e.g. an unknown invitation response."""
    pass
