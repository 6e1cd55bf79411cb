#!/usr/bin/env python3
"""
Power Match Generator - candidate-facing matching with optional auto-apply

Pairs eligible Pro job seekers with open jobs:
1. Eligibility: active Pro subscription and, optionally, a recent daily check-in
2. Candidate jobs: open, not owned by the candidate, no existing match or application
3. Scoring: every pair goes through the scoring oracle
4. Selection: score >= threshold, best first, capped per candidate
5. Persistence: one unit of work per pair (PowerMatch + Application + link)

Per-pair failures are counted and skipped. An unreachable oracle ends the
invocation with status "error"; rows already committed stay consistent.

Usage:
    generator = PowerMatchGenerator(session_factory, oracle, config.power_match)
    result = generator.generate_for_user(user_id)
    result = generator.generate_batch()
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from core.config_loader import PowerMatchConfig
from core.errors import ScoringFailure, ScoringUnavailable
from core.power_match.eligibility import check_candidate_eligibility
from core.power_match.models import AutoApplyResult, GenerationResult, ScoredPair
from core.scoring.interfaces import ScoringOracle
from core.utils import to_float, utc_now
from database.uow import power_match_uow

logger = logging.getLogger(__name__)


class PowerMatchGenerator:
    """
    Creates PowerMatch rows for eligible candidates and, when auto-apply
    is on, the Application that goes with each of them.
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        oracle: ScoringOracle,
        config: PowerMatchConfig,
        clock: Callable[[], datetime] = utc_now
    ):
        self.session_factory = session_factory
        self.oracle = oracle
        self.config = config
        self.clock = clock

    def generate_for_user(self, user_id: str) -> GenerationResult:
        """Manual trigger for a single candidate."""
        result = GenerationResult()
        if not self.config.enabled:
            result.message = "Power Match generation is disabled"
            return result

        now = self.clock()
        try:
            with power_match_uow(self.session_factory) as repo:
                seeker = repo.profiles.get_job_seeker(user_id)
                eligible, reason = check_candidate_eligibility(seeker, now, self.config)
                job_ids = []
                if eligible:
                    job_ids = [job.id for job in repo.jobs.get_open_jobs_for_candidate(user_id)]
        except SQLAlchemyError as e:
            logger.error(f"Failed to load candidate {user_id} or open jobs: {e}")
            result.status = "error"
            result.message = f"Failed to load candidate data: {e}"
            return result

        if not eligible:
            logger.info(f"User {user_id} not eligible for Power Match: {reason}")
            result.users_skipped = 1
            result.message = f"Not eligible: {reason}"
            return result

        try:
            self._generate_for_candidate(user_id, job_ids, now, result)
        except ScoringUnavailable as e:
            logger.error(f"Generation for user {user_id} aborted: {e}")
            result.status = "error"
            result.message = str(e)
            return result

        result.users_processed = 1
        result.message = f"Created {result.matches_created} new power matches"
        return result

    def generate_batch(self) -> GenerationResult:
        """Run generation for every eligible candidate."""
        result = GenerationResult()
        if not self.config.enabled:
            result.message = "Power Match generation is disabled"
            return result

        now = self.clock()
        try:
            with power_match_uow(self.session_factory) as repo:
                eligible_ids = []
                for seeker in repo.profiles.get_active_pro_job_seekers():
                    eligible, reason = check_candidate_eligibility(seeker, now, self.config)
                    if eligible:
                        eligible_ids.append(seeker.id)
                    else:
                        logger.debug(f"Skipping user {seeker.id}: {reason}")
                        result.users_skipped += 1
        except SQLAlchemyError as e:
            logger.error(f"Failed to load eligible candidates: {e}")
            result.status = "error"
            result.message = f"Failed to load eligible candidates: {e}"
            return result

        logger.info(f"Power Match batch: {len(eligible_ids)} eligible candidates")

        for user_id in eligible_ids:
            try:
                with power_match_uow(self.session_factory) as repo:
                    job_ids = [job.id for job in repo.jobs.get_open_jobs_for_candidate(user_id)]
                self._generate_for_candidate(user_id, job_ids, now, result)
            except SQLAlchemyError as e:
                logger.error(f"Failed to load open jobs for user {user_id}: {e}")
                result.users_failed += 1
                continue
            except ScoringUnavailable as e:
                logger.error(f"Power Match batch aborted at user {user_id}: {e}")
                result.status = "error"
                result.message = str(e)
                return result
            result.users_processed += 1

        result.message = (
            f"Processed {result.users_processed} users, "
            f"created {result.matches_created} power matches"
        )
        logger.info(result.message)
        return result

    def _generate_for_candidate(
        self,
        user_id: str,
        job_ids: List[str],
        now: datetime,
        result: GenerationResult
    ) -> None:
        qualifying = []
        for job_id in job_ids:
            result.pairs_evaluated += 1
            try:
                score = self.oracle.score(user_id, job_id)
            except ScoringFailure as e:
                logger.error(f"Skipping pair: {e}")
                result.scoring_failures += 1
                continue

            if score >= self.config.score_threshold:
                qualifying.append(ScoredPair(user_id=user_id, job_id=job_id, score=score))

        qualifying.sort(key=lambda pair: pair.score, reverse=True)
        selected = qualifying[:self.config.max_matches_per_candidate]
        if len(qualifying) > len(selected):
            logger.info(
                f"User {user_id}: {len(qualifying)} qualifying jobs, "
                f"keeping top {len(selected)}"
            )

        for pair in selected:
            self._persist_pair(pair, now, result)

    def _persist_pair(self, pair: ScoredPair, now: datetime, result: GenerationResult) -> None:
        """Write the match (and its application) in a single transaction."""
        try:
            with power_match_uow(self.session_factory) as repo:
                match = repo.power_matches.create(
                    user_id=pair.user_id,
                    job_id=pair.job_id,
                    match_score=pair.score,
                    created_at=now
                )
                if self.config.auto_apply:
                    application = repo.applications.create(
                        user_id=pair.user_id,
                        job_id=pair.job_id,
                        created_at=now,
                        status='active',
                        cover_letter=self.config.auto_apply_cover_letter,
                        match_score=pair.score
                    )
                    repo.power_matches.link_application(match, application, applied_at=now)
        except IntegrityError:
            logger.info(f"Match for user {pair.user_id}, job {pair.job_id} already exists")
            result.skipped_existing += 1
            return
        except SQLAlchemyError as e:
            logger.error(f"Failed to save match for user {pair.user_id}, job {pair.job_id}: {e}")
            result.persistence_failures += 1
            return

        result.matches_created += 1
        if self.config.auto_apply:
            result.new_matches_applied += 1
        logger.info(f"Power match: user {pair.user_id} -> job {pair.job_id} ({pair.score:.1f})")

    def apply_pending_matches(self, limit: Optional[int] = None) -> AutoApplyResult:
        """
        Create applications for matches that were saved without one.

        Covers matches generated while auto-apply was off. Candidates who
        already applied by hand are skipped.
        """
        result = AutoApplyResult()
        now = self.clock()

        with power_match_uow(self.session_factory) as repo:
            pending = [
                (m.id, m.user_id, m.job_id, to_float(m.match_score))
                for m in repo.power_matches.get_pending_auto_apply(limit=limit)
            ]

        logger.info(f"Auto-apply pass: {len(pending)} pending matches")

        for match_id, user_id, job_id, score in pending:
            result.matches_processed += 1
            try:
                with power_match_uow(self.session_factory) as repo:
                    match = repo.power_matches.get_by_id(match_id)
                    if (
                        match is None
                        or match.application_id is not None
                        or match.viewed_at is not None
                        or match.withdrawn_at is not None
                        or repo.applications.get_for_user_and_job(user_id, job_id) is not None
                    ):
                        result.skipped += 1
                        continue

                    application = repo.applications.create(
                        user_id=user_id,
                        job_id=job_id,
                        created_at=now,
                        status='active',
                        cover_letter=self.config.auto_apply_cover_letter,
                        match_score=score
                    )
                    repo.power_matches.link_application(match, application, applied_at=now)
            except IntegrityError:
                logger.info(f"Application for user {user_id}, job {job_id} already exists")
                result.skipped += 1
                continue
            except SQLAlchemyError as e:
                logger.error(f"Auto-apply failed for match {match_id}: {e}")
                result.application_errors += 1
                continue

            result.applications_created += 1

        logger.info(
            f"Auto-apply pass complete: {result.applications_created} created, "
            f"{result.application_errors} errors, {result.skipped} skipped"
        )
        return result
