#!/usr/bin/env python3
"""
Auto-Withdrawal Sweeper

Withdraws applications that were created by auto-apply when the candidate
did not look at the match within the deadline (48 hours by default).

Each match is handled in its own unit of work:
1. Claim: stamp withdrawn_at, guarded by viewed_at IS NULL AND withdrawn_at IS NULL.
   Zero rows means a view or a concurrent sweep got there first.
2. Withdraw: move the linked application to stage Withdrawn. An application
   that is already Withdrawn keeps its state and only the claim is stored.

Re-running a sweep never withdraws the same application twice.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from core.config_loader import WithdrawalConfig
from core.power_match.deadline import withdrawal_cutoff
from core.power_match.models import SweepResult
from core.utils import utc_now
from database.models import ApplicationStage
from database.uow import power_match_uow

logger = logging.getLogger(__name__)


class _MissingApplication(Exception):
    pass


class AutoWithdrawalSweeper:
    def __init__(
        self,
        session_factory: sessionmaker,
        config: WithdrawalConfig,
        clock: Callable[[], datetime] = utc_now
    ):
        self.session_factory = session_factory
        self.config = config
        self.clock = clock

    def sweep(self, limit: Optional[int] = None) -> SweepResult:
        """Withdraw every auto-applied match that is past its deadline."""
        result = SweepResult()
        if not self.config.enabled:
            logger.info("Auto-withdrawal is disabled")
            return result

        now = self.clock()
        cutoff = withdrawal_cutoff(now, self.config.deadline_hours)
        limit = limit if limit is not None else self.config.batch_limit

        with power_match_uow(self.session_factory) as repo:
            due = [
                (m.id, m.application_id)
                for m in repo.power_matches.get_withdrawal_candidates(cutoff, limit=limit)
            ]

        result.matches_checked = len(due)
        logger.info(f"Auto-withdrawal sweep: {len(due)} matches past {cutoff.isoformat()}")

        for match_id, application_id in due:
            self._withdraw_one(match_id, application_id, now, result)

        logger.info(
            f"Sweep complete: {result.withdrawals_triggered} withdrawn, "
            f"{result.already_withdrawn} already withdrawn, "
            f"{result.skipped} skipped, {result.withdrawal_failures} failed"
        )
        return result

    def _withdraw_one(self, match_id: str, application_id: str, now: datetime, result: SweepResult) -> None:
        outcome = None
        try:
            with power_match_uow(self.session_factory) as repo:
                if not repo.power_matches.claim_for_withdrawal(match_id, now):
                    outcome = "skipped"
                else:
                    application = repo.applications.get_by_id(application_id)
                    if application is None:
                        raise _MissingApplication(f"Application {application_id} not found")
                    if application.stage == ApplicationStage.WITHDRAWN:
                        outcome = "already_withdrawn"
                    else:
                        repo.applications.withdraw(application, self.config.withdrawn_status, now)
                        outcome = "withdrawn"
        except (SQLAlchemyError, _MissingApplication) as e:
            logger.error(f"Failed to withdraw match {match_id} (application {application_id}): {e}")
            result.withdrawal_failures += 1
            result.errors.append(f"{match_id}: {e}")
            return

        if outcome == "skipped":
            logger.info(f"Match {match_id} was viewed or already handled, skipping")
            result.skipped += 1
        elif outcome == "already_withdrawn":
            result.already_withdrawn += 1
        else:
            logger.info(f"Withdrew application {application_id} for unviewed match {match_id}")
            result.withdrawals_triggered += 1
