#!/usr/bin/env python3
"""
Unit tests for PowerMatchGenerator.

Covers eligibility, threshold and cap selection, idempotency, isolation of
per-pair failures and the atomicity of auto-apply.
"""

from datetime import timedelta
from types import SimpleNamespace
from unittest.mock import patch

import pytest
from sqlalchemy.exc import SQLAlchemyError

from core.config_loader import PowerMatchConfig
from core.power_match.generator import PowerMatchGenerator
from core.utils import ensure_utc
from database.models import Application, ApplicationStage, PowerMatch
from database.repositories import ApplicationRepository, JobRepository
from tests.mocks.oracle_mocks import ScriptedScoringOracle


def make_generator(session_factory, clock, oracle, **overrides):
    config = PowerMatchConfig(**overrides)
    return PowerMatchGenerator(session_factory, oracle, config, clock=clock)


class TestEndToEnd:

    def test_one_of_two_jobs_is_matched_and_applied(self, session_factory, clock, seed):
        user_id = seed.job_seeker()
        employer_id = seed.employer()
        strong_job = seed.job(employer_id, title="Strong fit")
        weak_job = seed.job(employer_id, title="Weak fit")
        oracle = ScriptedScoringOracle(scores={strong_job: 75, weak_job: 50})

        generator = make_generator(session_factory, clock, oracle, score_threshold=70)
        result = generator.generate_for_user(user_id)

        assert result.status == "success"
        assert result.new_matches_applied == 1
        assert result.matches_created == 1
        assert result.pairs_evaluated == 2

        matches = seed.all(PowerMatch, user_id=user_id)
        assert len(matches) == 1
        match = matches[0]
        assert match.job_id == strong_job
        assert float(match.match_score) == 75.0
        assert match.application_id is not None
        assert ensure_utc(match.applied_at) == clock()
        assert match.viewed_at is None

        applications = seed.all(Application, user_id=user_id)
        assert len(applications) == 1
        application = applications[0]
        assert application.id == match.application_id
        assert application.job_id == strong_job
        assert application.stage == ApplicationStage.APPLIED
        assert application.status == "active"
        assert application.cover_letter == "Automatically applied via Power Match feature."
        assert float(application.match_score) == 75.0


class TestSelection:

    def test_threshold_is_inclusive(self, session_factory, clock, seed):
        user_id = seed.job_seeker()
        employer_id = seed.employer()
        scores = {}
        for score in [40, 59, 60, 61, 90]:
            scores[seed.job(employer_id, title=f"Job {score}")] = score
        oracle = ScriptedScoringOracle(scores=scores)

        generator = make_generator(
            session_factory, clock, oracle, score_threshold=60, max_matches_per_candidate=5
        )
        result = generator.generate_for_user(user_id)

        stored = sorted(float(m.match_score) for m in seed.all(PowerMatch, user_id=user_id))
        assert stored == [60.0, 61.0, 90.0]
        assert result.matches_created == 3

    def test_cap_keeps_highest_scores(self, session_factory, clock, seed):
        user_id = seed.job_seeker()
        employer_id = seed.employer()
        scores = {seed.job(employer_id): score for score in [71, 95, 80, 88, 73]}
        oracle = ScriptedScoringOracle(scores=scores)

        generator = make_generator(session_factory, clock, oracle, max_matches_per_candidate=3)
        result = generator.generate_for_user(user_id)

        stored = sorted(float(m.match_score) for m in seed.all(PowerMatch, user_id=user_id))
        assert stored == [80.0, 88.0, 95.0]
        assert result.matches_created == 3
        assert result.pairs_evaluated == 5

    def test_own_and_closed_jobs_are_not_scored(self, session_factory, clock, seed):
        user_id = seed.job_seeker()
        employer_id = seed.employer()
        open_job = seed.job(employer_id)
        seed.job(employer_id, status="closed")
        seed.job(employer_id, is_deleted=True)
        seed.job(user_id, title="Candidate's own posting")
        oracle = ScriptedScoringOracle(default=90)

        make_generator(session_factory, clock, oracle).generate_for_user(user_id)

        assert oracle.calls == [(user_id, open_job)]

    def test_jobs_already_applied_to_are_skipped(self, session_factory, clock, seed):
        user_id = seed.job_seeker()
        employer_id = seed.employer()
        applied_job = seed.job(employer_id)
        seed.application(user_id, applied_job)
        oracle = ScriptedScoringOracle(default=90)

        result = make_generator(session_factory, clock, oracle).generate_for_user(user_id)

        assert oracle.calls == []
        assert result.matches_created == 0


class TestIdempotency:

    def test_second_run_creates_nothing(self, session_factory, clock, seed):
        user_id = seed.job_seeker()
        employer_id = seed.employer()
        for _ in range(2):
            seed.job(employer_id)
        oracle = ScriptedScoringOracle(default=85)
        generator = make_generator(session_factory, clock, oracle)

        first = generator.generate_for_user(user_id)
        calls_after_first = len(oracle.calls)
        second = generator.generate_for_user(user_id)

        assert first.matches_created == 2
        assert second.matches_created == 0
        assert second.pairs_evaluated == 0
        assert len(oracle.calls) == calls_after_first
        assert seed.count(PowerMatch, user_id=user_id) == 2
        assert seed.count(Application, user_id=user_id) == 2

    def test_concurrent_insert_counts_as_skipped_existing(self, session_factory, clock, seed):
        user_id = seed.job_seeker()
        employer_id = seed.employer()
        job_id = seed.job(employer_id)
        seed.power_match(user_id, job_id)
        oracle = ScriptedScoringOracle(default=90)

        # Simulate a stale read: the job is offered although a match exists
        with patch.object(
            JobRepository, "get_open_jobs_for_candidate", return_value=[SimpleNamespace(id=job_id)]
        ):
            result = make_generator(session_factory, clock, oracle).generate_for_user(user_id)

        assert result.status == "success"
        assert result.skipped_existing == 1
        assert result.matches_created == 0
        assert seed.count(PowerMatch, user_id=user_id) == 1


class TestFailures:

    def test_scoring_failure_on_one_pair_does_not_stop_the_rest(self, session_factory, clock, seed):
        user_id = seed.job_seeker()
        employer_id = seed.employer()
        for _ in range(5):
            seed.job(employer_id)
        oracle = ScriptedScoringOracle(default=80, fail_on_calls={2})

        generator = make_generator(session_factory, clock, oracle, max_matches_per_candidate=5)
        result = generator.generate_for_user(user_id)

        assert result.status == "success"
        assert result.pairs_evaluated == 5
        assert result.scoring_failures == 1
        assert result.matches_created == 4
        assert seed.count(PowerMatch, user_id=user_id) == 4

    def test_application_failure_rolls_back_the_match(self, session_factory, clock, seed):
        user_id = seed.job_seeker()
        employer_id = seed.employer()
        seed.job(employer_id)
        oracle = ScriptedScoringOracle(default=90)

        with patch.object(ApplicationRepository, "create", side_effect=SQLAlchemyError("insert failed")):
            result = make_generator(session_factory, clock, oracle).generate_for_user(user_id)

        assert result.persistence_failures == 1
        assert result.matches_created == 0
        assert seed.count(PowerMatch) == 0
        assert seed.count(Application) == 0

    def test_oracle_outage_ends_with_error(self, session_factory, clock, seed):
        user_id = seed.job_seeker()
        employer_id = seed.employer()
        seed.job(employer_id)
        oracle = ScriptedScoringOracle(unavailable_on_call=1)

        result = make_generator(session_factory, clock, oracle).generate_for_user(user_id)

        assert result.status == "error"
        assert "outage" in result.message
        assert seed.count(PowerMatch) == 0

    def test_batch_outage_keeps_committed_matches(self, session_factory, clock, seed):
        first_user = seed.job_seeker()
        second_user = seed.job_seeker()
        employer_id = seed.employer()
        seed.job(employer_id)
        # First candidate's only pair scores, the second candidate's fails
        oracle = ScriptedScoringOracle(default=90, unavailable_on_call=2)

        result = make_generator(session_factory, clock, oracle).generate_batch()

        assert result.status == "error"
        assert result.users_processed == 1
        assert result.matches_created == 1
        assert seed.count(PowerMatch) == 1
        assert seed.all(PowerMatch)[0].user_id == first_user

    def test_batch_continues_when_one_users_jobs_fail_to_load(self, session_factory, clock, seed):
        seed.job_seeker()
        seed.job_seeker()
        seed.job(seed.employer())
        oracle = ScriptedScoringOracle(default=90)
        original = JobRepository.get_open_jobs_for_candidate
        calls = []

        def fail_first(repo, user_id):
            calls.append(user_id)
            if len(calls) == 1:
                raise SQLAlchemyError("transient read failure")
            return original(repo, user_id)

        with patch.object(JobRepository, "get_open_jobs_for_candidate", autospec=True, side_effect=fail_first):
            result = make_generator(session_factory, clock, oracle).generate_batch()

        assert result.status == "success"
        assert result.users_failed == 1
        assert result.users_processed == 1
        assert result.matches_created == 1
        [match] = seed.all(PowerMatch)
        assert match.user_id == calls[1]


class TestEligibility:

    def test_non_pro_user_is_skipped_without_scoring(self, session_factory, clock, seed):
        user_id = seed.job_seeker(is_pro=False)
        seed.job(seed.employer())
        oracle = ScriptedScoringOracle(default=90)

        result = make_generator(session_factory, clock, oracle).generate_for_user(user_id)

        assert result.status == "success"
        assert result.users_skipped == 1
        assert oracle.calls == []

    def test_unknown_user_is_skipped(self, session_factory, clock, seed):
        oracle = ScriptedScoringOracle(default=90)

        result = make_generator(session_factory, clock, oracle).generate_for_user("missing-user")

        assert result.status == "success"
        assert result.users_skipped == 1

    def test_stale_check_in_is_skipped(self, session_factory, clock, seed):
        user_id = seed.job_seeker(last_active_check_in=clock() - timedelta(hours=25))
        seed.job(seed.employer())
        oracle = ScriptedScoringOracle(default=90)

        result = make_generator(session_factory, clock, oracle).generate_for_user(user_id)

        assert result.users_skipped == 1
        assert oracle.calls == []

    def test_check_in_not_required(self, session_factory, clock, seed):
        user_id = seed.job_seeker(last_active_check_in=None)
        seed.job(seed.employer())
        oracle = ScriptedScoringOracle(default=90)

        generator = make_generator(session_factory, clock, oracle, require_daily_check_in=False)
        result = generator.generate_for_user(user_id)

        assert result.matches_created == 1

    def test_batch_only_processes_eligible_pro_users(self, session_factory, clock, seed):
        seed.job_seeker()
        seed.job_seeker()
        seed.job_seeker(is_pro=False)
        seed.job_seeker(last_active_check_in=clock() - timedelta(days=3))
        seed.job(seed.employer())
        oracle = ScriptedScoringOracle(default=90)

        result = make_generator(session_factory, clock, oracle).generate_batch()

        assert result.status == "success"
        assert result.users_processed == 2
        assert result.users_skipped == 1
        assert result.matches_created == 2

    def test_disabled_generation_is_a_no_op(self, session_factory, clock, seed):
        user_id = seed.job_seeker()
        seed.job(seed.employer())
        oracle = ScriptedScoringOracle(default=90)

        result = make_generator(session_factory, clock, oracle, enabled=False).generate_for_user(user_id)

        assert result.matches_created == 0
        assert oracle.calls == []


class TestPendingAutoApply:

    def test_matches_without_auto_apply_are_applied_later(self, session_factory, clock, seed):
        user_id = seed.job_seeker()
        job_id = seed.job(seed.employer())
        oracle = ScriptedScoringOracle(default=82)

        generator = make_generator(session_factory, clock, oracle, auto_apply=False)
        generation = generator.generate_for_user(user_id)

        assert generation.matches_created == 1
        assert generation.new_matches_applied == 0
        match = seed.all(PowerMatch, user_id=user_id)[0]
        assert match.applied_at is None and match.application_id is None

        clock.advance(minutes=5)
        result = generator.apply_pending_matches()

        assert result.matches_processed == 1
        assert result.applications_created == 1
        match = seed.get(PowerMatch, match.id)
        application = seed.get(Application, match.application_id)
        assert ensure_utc(match.applied_at) == clock()
        assert application.job_id == job_id
        assert application.status == "active"
        assert float(application.match_score) == 82.0

    def test_viewed_and_manually_applied_matches_are_skipped(self, session_factory, clock, seed):
        user_id = seed.job_seeker()
        employer_id = seed.employer()
        viewed_job = seed.job(employer_id)
        manual_job = seed.job(employer_id)
        seed.power_match(user_id, viewed_job, viewed_at=clock())
        manual_match = seed.power_match(user_id, manual_job)
        seed.application(user_id, manual_job)
        generator = make_generator(session_factory, clock, ScriptedScoringOracle())

        result = generator.apply_pending_matches()

        assert result.matches_processed == 1
        assert result.skipped == 1
        assert result.applications_created == 0
        assert seed.get(PowerMatch, manual_match).application_id is None

    def test_application_error_is_counted(self, session_factory, clock, seed):
        user_id = seed.job_seeker()
        job_id = seed.job(seed.employer())
        match_id = seed.power_match(user_id, job_id)
        generator = make_generator(session_factory, clock, ScriptedScoringOracle())

        with patch.object(ApplicationRepository, "create", side_effect=SQLAlchemyError("insert failed")):
            result = generator.apply_pending_matches()

        assert result.application_errors == 1
        assert seed.get(PowerMatch, match_id).applied_at is None


@pytest.mark.parametrize("auto_apply", [True, False])
def test_applied_at_and_application_id_move_together(session_factory, clock, seed, auto_apply):
    user_id = seed.job_seeker()
    employer_id = seed.employer()
    for _ in range(3):
        seed.job(employer_id)
    oracle = ScriptedScoringOracle(default=90)

    make_generator(session_factory, clock, oracle, auto_apply=auto_apply).generate_for_user(user_id)

    for match in seed.all(PowerMatch, user_id=user_id):
        assert (match.applied_at is None) == (match.application_id is None)
        assert (match.application_id is not None) == auto_apply
