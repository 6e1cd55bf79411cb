import logging

from sqlalchemy.orm import Session

from database.repositories import (
    ApplicationRepository,
    EmployerPowerMatchRepository,
    InvitationRepository,
    JobRepository,
    PowerMatchRepository,
    ProfileRepository,
)

logger = logging.getLogger(__name__)


class Repository:
    """Aggregate of the per-table repositories sharing one Session."""

    def __init__(self, db: Session):
        self.db = db
        self.profiles = ProfileRepository(db)
        self.jobs = JobRepository(db)
        self.applications = ApplicationRepository(db)
        self.power_matches = PowerMatchRepository(db)
        self.employer_matches = EmployerPowerMatchRepository(db)
        self.invitations = InvitationRepository(db)
