import logging
from datetime import datetime
from typing import Optional, Set

from sqlalchemy import select

from database.models import Application, ApplicationStage
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class ApplicationRepository(BaseRepository):
    def get_by_id(self, application_id: str) -> Optional[Application]:
        return self.db.get(Application, application_id)

    def get_for_user_and_job(self, user_id: str, job_id: str) -> Optional[Application]:
        stmt = select(Application).where(
            Application.user_id == user_id,
            Application.job_id == job_id
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def applicant_ids_for_job(self, job_id: str) -> Set[str]:
        stmt = select(Application.user_id).where(Application.job_id == job_id)
        return set(self.db.execute(stmt).scalars().all())

    def create(
        self,
        user_id: str,
        job_id: str,
        created_at: datetime,
        status: str = 'active',
        cover_letter: Optional[str] = None,
        match_score: Optional[float] = None
    ) -> Application:
        application = Application(
            user_id=user_id,
            job_id=job_id,
            status=status,
            stage=ApplicationStage.APPLIED,
            cover_letter=cover_letter,
            match_score=match_score,
            created_at=created_at,
            updated_at=created_at
        )
        self.db.add(application)
        self.db.flush()  # Generate ID, surface constraint violations now
        return application

    def withdraw(self, application: Application, status: str, withdrawn_at: datetime) -> None:
        application.stage = ApplicationStage.WITHDRAWN
        application.status = status
        application.updated_at = withdrawn_at
        self.db.flush()
