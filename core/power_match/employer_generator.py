#!/usr/bin/env python3
"""
Employer Power Match Generator - surfaces strong candidates for open jobs

For each open job, every job seeker other than the job's employer is
scored. Pairs that already have an application or an employer match are
skipped. The best scoring candidates above the threshold are stored as
EmployerPowerMatch rows (highest first, capped per job) for the employer
to review and invite.
"""

import logging
from datetime import datetime
from typing import Callable, List

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from core.config_loader import EmployerMatchConfig
from core.errors import (
    AuthorizationFailure, NotEligibleError, NotFoundError, ScoringFailure, ScoringUnavailable
)
from core.power_match.models import EmployerGenerationResult, ScoredPair
from core.scoring.interfaces import ScoringOracle
from core.utils import utc_now
from database.uow import power_match_uow

logger = logging.getLogger(__name__)


class EmployerPowerMatchGenerator:
    def __init__(
        self,
        session_factory: sessionmaker,
        oracle: ScoringOracle,
        config: EmployerMatchConfig,
        clock: Callable[[], datetime] = utc_now
    ):
        self.session_factory = session_factory
        self.oracle = oracle
        self.config = config
        self.clock = clock

    def generate_for_job(self, job_id: str, employer_id: str) -> EmployerGenerationResult:
        """
        Generate matches for one job on behalf of its employer.

        Raises:
            NotFoundError: the job does not exist
            AuthorizationFailure: the job belongs to another employer
        """
        with power_match_uow(self.session_factory) as repo:
            job = repo.jobs.get_by_id(job_id)
            if job is None:
                raise NotFoundError(f"Job {job_id} not found")
            if job.employer_id != employer_id:
                raise AuthorizationFailure(f"Job {job_id} does not belong to employer {employer_id}")

        result = EmployerGenerationResult()
        if not self.config.enabled:
            result.message = "Employer Power Match generation is disabled"
            return result

        try:
            self._generate_for_job(job_id, result)
        except NotEligibleError as e:
            logger.info(str(e))
            result.jobs_skipped += 1
            result.message = str(e)
            return result
        except ScoringUnavailable as e:
            logger.error(f"Employer generation for job {job_id} aborted: {e}")
            result.status = "error"
            result.message = str(e)
            return result

        result.jobs_processed += 1
        result.message = f"Created {result.total_matches_created} candidate matches"
        return result

    def generate_batch(self) -> EmployerGenerationResult:
        """Generate matches for every open job."""
        result = EmployerGenerationResult()
        if not self.config.enabled:
            result.message = "Employer Power Match generation is disabled"
            return result

        try:
            with power_match_uow(self.session_factory) as repo:
                job_ids = [job.id for job in repo.jobs.get_open_jobs()]
        except SQLAlchemyError as e:
            logger.error(f"Failed to load open jobs: {e}")
            result.status = "error"
            result.message = f"Failed to load open jobs: {e}"
            return result

        logger.info(f"Employer Power Match batch: {len(job_ids)} open jobs")

        for job_id in job_ids:
            try:
                self._generate_for_job(job_id, result)
            except NotEligibleError as e:
                logger.info(str(e))
                result.jobs_skipped += 1
                continue
            except ScoringUnavailable as e:
                logger.error(f"Employer batch aborted at job {job_id}: {e}")
                result.status = "error"
                result.message = str(e)
                return result
            except Exception as e:
                logger.error(f"Failed to generate matches for job {job_id}: {e}", exc_info=True)
                result.jobs_failed += 1
                continue
            result.jobs_processed += 1

        result.message = (
            f"Processed {result.jobs_processed} jobs, "
            f"created {result.total_matches_created} candidate matches"
        )
        logger.info(result.message)
        return result

    def _generate_for_job(self, job_id: str, result: EmployerGenerationResult) -> None:
        now = self.clock()
        with power_match_uow(self.session_factory) as repo:
            job = repo.jobs.get_by_id(job_id)
            if job is None or job.status != 'open' or job.is_deleted:
                raise NotEligibleError(f"Job {job_id} is not open")
            if job.employer_id is None:
                raise NotEligibleError(f"Job {job_id} has no employer")
            employer_id = job.employer_id

            excluded = repo.applications.applicant_ids_for_job(job_id)
            excluded |= repo.employer_matches.matched_user_ids_for_job(job_id)
            candidate_ids = [
                user_id for user_id in repo.profiles.list_job_seeker_ids()
                if user_id != employer_id and user_id not in excluded
            ]

        qualifying: List[ScoredPair] = []
        for user_id in candidate_ids:
            try:
                score = self.oracle.score(user_id, job_id)
            except ScoringFailure as e:
                logger.error(f"Skipping pair: {e}")
                result.scoring_failures += 1
                continue
            if score >= self.config.score_threshold:
                qualifying.append(ScoredPair(
                    user_id=user_id, job_id=job_id, score=score, employer_id=employer_id
                ))

        qualifying.sort(key=lambda pair: pair.score, reverse=True)
        selected = qualifying[:self.config.max_matches_per_job]

        for pair in selected:
            try:
                with power_match_uow(self.session_factory) as repo:
                    repo.employer_matches.create(
                        job_id=pair.job_id,
                        user_id=pair.user_id,
                        employer_id=pair.employer_id,
                        match_score=pair.score,
                        created_at=now
                    )
            except IntegrityError:
                logger.info(f"Employer match for job {job_id}, user {pair.user_id} already exists")
                result.skipped_existing += 1
                continue
            except SQLAlchemyError as e:
                logger.error(f"Failed to save employer match for job {job_id}, user {pair.user_id}: {e}")
                result.persistence_failures += 1
                continue
            result.total_matches_created += 1

        logger.info(
            f"Job {job_id}: {len(candidate_ids)} candidates scored, "
            f"{len(selected)} matches selected"
        )
