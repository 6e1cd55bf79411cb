"""
Read-side queries behind the candidate and employer dashboards, plus the
daily check-in that keeps a Pro candidate eligible.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy.orm import sessionmaker

from core.config_loader import EmployerMatchConfig, WithdrawalConfig
from core.errors import AuthorizationFailure, InvalidRequestError, NotFoundError
from core.power_match.deadline import compute_deadline_status
from core.power_match.dto import (
    EmployerPowerMatchDTO, PowerMatchDTO, employer_match_from_orm, power_match_from_orm
)
from core.utils import utc_now
from database.repositories import INVITATION_STATUSES
from database.uow import power_match_uow

logger = logging.getLogger(__name__)


@dataclass
class EmployerMatchPage:
    items: List[EmployerPowerMatchDTO]
    total: int
    page: int
    page_size: int


class PowerMatchQueries:
    def __init__(
        self,
        session_factory: sessionmaker,
        withdrawal_config: WithdrawalConfig,
        employer_config: EmployerMatchConfig,
        clock: Callable[[], datetime] = utc_now
    ):
        self.session_factory = session_factory
        self.withdrawal_config = withdrawal_config
        self.employer_config = employer_config
        self.clock = clock

    def list_power_matches(self, user_id: str) -> List[PowerMatchDTO]:
        """The candidate's matches, newest first, with the withdrawal countdown."""
        now = self.clock()
        with power_match_uow(self.session_factory) as repo:
            matches = repo.power_matches.list_for_user(user_id)
            return [
                power_match_from_orm(
                    match,
                    deadline=compute_deadline_status(
                        match.applied_at,
                        match.viewed_at,
                        match.withdrawn_at,
                        now,
                        deadline_hours=self.withdrawal_config.deadline_hours,
                        warning_hours=self.withdrawal_config.warning_hours
                    )
                )
                for match in matches
            ]

    def list_employer_power_matches(
        self,
        employer_id: str,
        job_id: str,
        min_score: Optional[float] = None,
        status: Optional[str] = None,
        page: int = 1,
        page_size: Optional[int] = None
    ) -> EmployerMatchPage:
        """
        Candidates matched to one of the employer's jobs, best score first.

        status filters on invitation_status; "all" or None disables the filter.
        """
        if min_score is None:
            min_score = self.employer_config.default_min_score
        page_size = page_size or self.employer_config.default_page_size
        if page < 1 or page_size < 1:
            raise InvalidRequestError("page and page_size must be positive")
        if status and status != 'all' and status not in INVITATION_STATUSES:
            raise InvalidRequestError(f"Unknown invitation status {status!r}")

        with power_match_uow(self.session_factory) as repo:
            job = repo.jobs.get_by_id(job_id)
            if job is None:
                raise NotFoundError(f"Job {job_id} not found")
            if job.employer_id != employer_id:
                raise AuthorizationFailure(f"Job {job_id} does not belong to employer {employer_id}")

            matches, total = repo.employer_matches.list_for_job(
                employer_id,
                job_id,
                min_score=min_score,
                status=status,
                offset=(page - 1) * page_size,
                limit=page_size
            )
            items = [employer_match_from_orm(match) for match in matches]

        return EmployerMatchPage(items=items, total=total, page=page, page_size=page_size)

    def record_check_in(self, user_id: str) -> datetime:
        """Stamp the candidate's daily "still looking" confirmation."""
        now = self.clock()
        with power_match_uow(self.session_factory) as repo:
            if not repo.profiles.record_check_in(user_id, now):
                raise NotFoundError(f"Job seeker {user_id} not found")
        logger.info(f"User {user_id} checked in")
        return now
