#!/usr/bin/env python3
"""
Unit tests for AutoWithdrawalSweeper.
"""

from datetime import timedelta
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from core.config_loader import WithdrawalConfig
from core.power_match.sweeper import AutoWithdrawalSweeper
from core.power_match.view_tracker import ViewTracker
from core.utils import ensure_utc, new_id
from database.models import Application, ApplicationStage, PowerMatch
from database.repositories import ApplicationRepository, PowerMatchRepository

DEADLINE = timedelta(hours=48)


@pytest.fixture
def sweeper(session_factory, clock):
    return AutoWithdrawalSweeper(session_factory, WithdrawalConfig(), clock=clock)


@pytest.fixture
def pair(seed):
    return seed.job_seeker(), seed.job(seed.employer())


class TestDeadline:

    def test_match_one_second_past_deadline_is_withdrawn(self, sweeper, clock, seed, pair):
        match_id, application_id = seed.auto_applied_match(
            *pair, applied_at=clock() - DEADLINE - timedelta(seconds=1)
        )

        result = sweeper.sweep()

        assert result.matches_checked == 1
        assert result.withdrawals_triggered == 1
        application = seed.get(Application, application_id)
        assert application.stage == ApplicationStage.WITHDRAWN
        assert application.status == "inactive"
        assert ensure_utc(application.updated_at) == clock()
        assert ensure_utc(seed.get(PowerMatch, match_id).withdrawn_at) == clock()

    @pytest.mark.parametrize("offset", [timedelta(seconds=1), timedelta(0)])
    def test_match_at_or_inside_deadline_is_kept(self, sweeper, clock, seed, pair, offset):
        _, application_id = seed.auto_applied_match(*pair, applied_at=clock() - DEADLINE + offset)

        result = sweeper.sweep()

        assert result.matches_checked == 0
        assert seed.get(Application, application_id).stage == ApplicationStage.APPLIED

    def test_viewed_match_is_never_withdrawn(self, sweeper, clock, seed, pair):
        applied_at = clock() - timedelta(days=5)
        _, application_id = seed.auto_applied_match(
            *pair, applied_at=applied_at, viewed_at=applied_at + timedelta(hours=1)
        )

        result = sweeper.sweep()

        assert result.matches_checked == 0
        assert seed.get(Application, application_id).stage == ApplicationStage.APPLIED

    def test_match_without_application_is_ignored(self, sweeper, clock, seed, pair):
        seed.power_match(*pair, created_at=clock() - timedelta(days=5))

        assert sweeper.sweep().matches_checked == 0

    def test_custom_deadline(self, session_factory, clock, seed, pair):
        seed.auto_applied_match(*pair, applied_at=clock() - timedelta(hours=13))
        sweeper = AutoWithdrawalSweeper(
            session_factory, WithdrawalConfig(deadline_hours=12), clock=clock
        )

        assert sweeper.sweep().withdrawals_triggered == 1


class TestIdempotency:

    def test_second_sweep_finds_nothing(self, sweeper, clock, seed, pair):
        seed.auto_applied_match(*pair, applied_at=clock() - timedelta(days=3))

        first = sweeper.sweep()
        second = sweeper.sweep()

        assert first.withdrawals_triggered == 1
        assert second.matches_checked == 0
        assert second.withdrawals_triggered == 0

    def test_application_already_withdrawn_is_only_stamped(self, sweeper, clock, seed, pair):
        match_id, application_id = seed.auto_applied_match(*pair, applied_at=clock() - timedelta(days=3))
        with seed.session_factory() as session:
            application = session.get(Application, application_id)
            application.stage = ApplicationStage.WITHDRAWN
            application.status = "withdrawn_by_user"
            session.commit()

        result = sweeper.sweep()

        assert result.already_withdrawn == 1
        assert result.withdrawals_triggered == 0
        assert seed.get(Application, application_id).status == "withdrawn_by_user"
        assert seed.get(PowerMatch, match_id).withdrawn_at is not None

    def test_view_between_select_and_claim_wins(self, session_factory, sweeper, clock, seed, pair):
        match_id, application_id = seed.auto_applied_match(*pair, applied_at=clock() - timedelta(days=3))
        user_id = pair[0]
        original_claim = PowerMatchRepository.claim_for_withdrawal

        def view_then_claim(repo, claimed_id, withdrawn_at):
            ViewTracker(session_factory, clock=clock).mark_viewed(claimed_id, user_id)
            return original_claim(repo, claimed_id, withdrawn_at)

        with patch.object(PowerMatchRepository, "claim_for_withdrawal", view_then_claim):
            result = sweeper.sweep()

        assert result.matches_checked == 1
        assert result.skipped == 1
        assert result.withdrawals_triggered == 0
        assert seed.get(Application, application_id).stage == ApplicationStage.APPLIED
        assert seed.get(PowerMatch, match_id).withdrawn_at is None


class TestFailures:

    def test_missing_application_rolls_back_the_claim(self, sweeper, clock, seed, pair):
        match_id = seed.power_match(
            *pair,
            created_at=clock() - timedelta(days=3),
            applied_at=clock() - timedelta(days=3),
            application_id=new_id()
        )

        result = sweeper.sweep()

        assert result.withdrawal_failures == 1
        assert len(result.errors) == 1
        assert seed.get(PowerMatch, match_id).withdrawn_at is None

    def test_write_error_on_one_row_does_not_stop_the_sweep(self, sweeper, clock, seed):
        employer_id = seed.employer()
        user_id = seed.job_seeker()
        applied_at = clock() - timedelta(days=3)
        broken_match, broken_app = seed.auto_applied_match(user_id, seed.job(employer_id), applied_at=applied_at)
        _, healthy_app = seed.auto_applied_match(
            user_id, seed.job(employer_id), applied_at=applied_at + timedelta(minutes=1)
        )
        original_withdraw = ApplicationRepository.withdraw

        def flaky_withdraw(repo, application, status, withdrawn_at):
            if application.id == broken_app:
                raise OperationalError("UPDATE applications", {}, Exception("deadlock detected"))
            return original_withdraw(repo, application, status, withdrawn_at)

        with patch.object(ApplicationRepository, "withdraw", flaky_withdraw):
            result = sweeper.sweep()

        assert result.matches_checked == 2
        assert result.withdrawal_failures == 1
        assert result.withdrawals_triggered == 1
        assert seed.get(Application, healthy_app).stage == ApplicationStage.WITHDRAWN
        assert seed.get(Application, broken_app).stage == ApplicationStage.APPLIED
        assert seed.get(PowerMatch, broken_match).withdrawn_at is None

    def test_disabled_sweeper_does_nothing(self, session_factory, clock, seed, pair):
        seed.auto_applied_match(*pair, applied_at=clock() - timedelta(days=3))
        sweeper = AutoWithdrawalSweeper(session_factory, WithdrawalConfig(enabled=False), clock=clock)

        assert sweeper.sweep().matches_checked == 0
