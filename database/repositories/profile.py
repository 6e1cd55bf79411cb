import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select, update

from database.models import JobSeekerProfile, Profile
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class ProfileRepository(BaseRepository):
    def get_profile(self, profile_id: str) -> Optional[Profile]:
        return self.db.get(Profile, profile_id)

    def get_job_seeker(self, user_id: str) -> Optional[JobSeekerProfile]:
        return self.db.get(JobSeekerProfile, user_id)

    def get_active_pro_job_seekers(self) -> List[JobSeekerProfile]:
        """Job seekers with an active Pro subscription, oldest first."""
        stmt = select(JobSeekerProfile).where(
            JobSeekerProfile.is_pro.is_(True),
            JobSeekerProfile.pro_active_status.is_(True)
        ).order_by(JobSeekerProfile.created_at, JobSeekerProfile.id)
        return self.db.execute(stmt).scalars().all()

    def list_job_seeker_ids(self) -> List[str]:
        stmt = select(JobSeekerProfile.id).order_by(JobSeekerProfile.id)
        return list(self.db.execute(stmt).scalars().all())

    def record_check_in(self, user_id: str, checked_in_at: datetime) -> bool:
        stmt = update(JobSeekerProfile).where(
            JobSeekerProfile.id == user_id
        ).values(
            last_active_check_in=checked_in_at
        ).execution_options(synchronize_session=False)
        result = self.db.execute(stmt)
        return result.rowcount == 1
