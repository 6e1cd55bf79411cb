#!/usr/bin/env python3
"""
Unit tests for the dashboard queries and the daily check-in.
"""

from datetime import timedelta

import pytest

from core.config_loader import EmployerMatchConfig, PowerMatchConfig, WithdrawalConfig
from core.errors import AuthorizationFailure, InvalidRequestError, NotFoundError
from core.power_match.eligibility import is_candidate_eligible
from core.power_match.invitations import InvitationService
from core.power_match.queries import PowerMatchQueries
from core.utils import ensure_utc
from database.models import EmployerPowerMatch, JobSeekerProfile


@pytest.fixture
def queries(session_factory, clock):
    return PowerMatchQueries(session_factory, WithdrawalConfig(), EmployerMatchConfig(), clock=clock)


class TestCandidateListing:

    def test_matches_are_newest_first_with_job_summary(self, queries, clock, seed):
        user_id = seed.job_seeker()
        employer_id = seed.employer(company_name="Acme")
        older_job = seed.job(employer_id, title="Older")
        newer_job = seed.job(employer_id, title="Newer")
        seed.power_match(user_id, older_job, score=71.5, created_at=clock() - timedelta(days=2))
        seed.power_match(user_id, newer_job, score=88, created_at=clock() - timedelta(hours=1))
        seed.power_match(seed.job_seeker(), newer_job)

        matches = queries.list_power_matches(user_id)

        assert [m.job.title for m in matches] == ["Newer", "Older"]
        assert matches[0].match_score == 88.0
        assert matches[1].match_score == 71.5
        assert matches[0].company_name == "Acme"
        assert matches[0].job.company_name == "Acme"
        assert matches[0].created_at.tzinfo is not None

    def test_deadline_is_attached_to_unviewed_applied_matches(self, queries, clock, seed):
        user_id = seed.job_seeker()
        employer_id = seed.employer()
        applied_at = clock() - timedelta(hours=30)
        seed.auto_applied_match(user_id, seed.job(employer_id, title="Pending"), applied_at=applied_at)
        seed.auto_applied_match(
            user_id, seed.job(employer_id, title="Seen"),
            applied_at=applied_at - timedelta(minutes=1), viewed_at=clock()
        )

        matches = {m.job.title: m for m in queries.list_power_matches(user_id)}

        pending = matches["Pending"].deadline
        assert pending.withdrawal_deadline == applied_at + timedelta(hours=48)
        assert pending.hours_remaining == 18
        assert pending.needs_viewing_soon is True
        assert matches["Seen"].deadline is None

    def test_company_name_is_none_without_employer_profile(self, queries, seed):
        user_id = seed.job_seeker()
        job_id = seed.job(seed.employer(company_name=None))
        seed.power_match(user_id, job_id)

        [match] = queries.list_power_matches(user_id)

        assert match.company_name is None
        assert match.job is not None


class TestEmployerListing:

    @pytest.fixture
    def listing(self, seed):
        employer_id = seed.employer()
        job_id = seed.job(employer_id)
        ids = {}
        for score in [55, 62, 75, 90]:
            user_id = seed.job_seeker(full_name=f"Candidate {score}")
            ids[score] = seed.employer_match(job_id, user_id, employer_id, score=score)
        return employer_id, job_id, ids

    def test_default_min_score_and_order(self, queries, listing):
        employer_id, job_id, _ = listing

        page = queries.list_employer_power_matches(employer_id, job_id)

        assert page.total == 3
        assert [m.match_score for m in page.items] == [90.0, 75.0, 62.0]
        assert page.items[0].candidate_name == "Candidate 90"
        assert page.page == 1
        assert page.page_size == 10

    def test_pagination_and_zero_min_score(self, queries, listing):
        employer_id, job_id, _ = listing

        page = queries.list_employer_power_matches(employer_id, job_id, min_score=0, page=2, page_size=3)

        assert page.total == 4
        assert [m.match_score for m in page.items] == [55.0]

    def test_status_filter(self, queries, seed, listing, session_factory, clock):
        employer_id, job_id, ids = listing
        candidate_id = seed.get(EmployerPowerMatch, ids[75]).user_id
        InvitationService(session_factory, clock=clock).send_invitation(
            ids[75], employer_id, job_id, candidate_id
        )

        pending = queries.list_employer_power_matches(employer_id, job_id, status="pending")
        not_invited = queries.list_employer_power_matches(employer_id, job_id, status="not_invited")
        everything = queries.list_employer_power_matches(employer_id, job_id, status="all")

        assert [m.id for m in pending.items] == [ids[75]]
        assert pending.items[0].sent_invitation_at == clock()
        assert [m.id for m in not_invited.items] == [ids[90], ids[62]]
        assert everything.total == 3

    def test_foreign_employer_is_rejected(self, queries, seed, listing):
        _, job_id, _ = listing

        with pytest.raises(AuthorizationFailure):
            queries.list_employer_power_matches(seed.employer(company_name="Rival"), job_id)

    def test_unknown_job(self, queries, listing):
        employer_id, _, _ = listing
        with pytest.raises(NotFoundError):
            queries.list_employer_power_matches(employer_id, "missing")

    @pytest.mark.parametrize("kwargs", [{"status": "bogus"}, {"page": 0}])
    def test_invalid_arguments(self, queries, listing, kwargs):
        employer_id, job_id, _ = listing
        with pytest.raises(InvalidRequestError):
            queries.list_employer_power_matches(employer_id, job_id, **kwargs)


class TestCheckIn:

    def test_check_in_restores_eligibility(self, queries, clock, seed):
        user_id = seed.job_seeker(last_active_check_in=clock() - timedelta(days=2))
        config = PowerMatchConfig()
        assert not is_candidate_eligible(seed.get(JobSeekerProfile, user_id), clock(), config)

        checked_in_at = queries.record_check_in(user_id)

        seeker = seed.get(JobSeekerProfile, user_id)
        assert checked_in_at == clock()
        assert ensure_utc(seeker.last_active_check_in) == clock()
        assert is_candidate_eligible(seeker, clock(), config)

    def test_unknown_job_seeker(self, queries):
        with pytest.raises(NotFoundError):
            queries.record_check_in("missing")
