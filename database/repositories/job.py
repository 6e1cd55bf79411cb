import logging
from typing import List, Optional

from sqlalchemy import select, or_, exists

from database.models import Application, Job, PowerMatch
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


def _is_open():
    return (Job.status == 'open') & (Job.is_deleted.is_(False))


class JobRepository(BaseRepository):
    def get_by_id(self, job_id: str) -> Optional[Job]:
        return self.db.get(Job, job_id)

    def get_open_jobs(self) -> List[Job]:
        stmt = select(Job).where(_is_open()).order_by(Job.created_at, Job.id)
        return self.db.execute(stmt).scalars().all()

    def get_open_jobs_for_candidate(self, user_id: str) -> List[Job]:
        """
        Open jobs a candidate could be power-matched to.

        Excludes the candidate's own postings, jobs they already have a
        PowerMatch for, and jobs they already applied to.
        """
        has_match = exists().where(
            PowerMatch.job_id == Job.id,
            PowerMatch.user_id == user_id
        )
        has_application = exists().where(
            Application.job_id == Job.id,
            Application.user_id == user_id
        )
        stmt = select(Job).where(
            _is_open(),
            or_(Job.employer_id.is_(None), Job.employer_id != user_id),
            ~has_match,
            ~has_application
        ).order_by(Job.created_at, Job.id)
        return self.db.execute(stmt).scalars().all()
