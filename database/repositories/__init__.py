from database.repositories.base import BaseRepository
from database.repositories.profile import ProfileRepository
from database.repositories.job import JobRepository
from database.repositories.application import ApplicationRepository
from database.repositories.power_match import PowerMatchRepository
from database.repositories.employer_power_match import EmployerPowerMatchRepository, INVITATION_STATUSES
from database.repositories.invitation import InvitationRepository

__all__ = [
    'BaseRepository',
    'ProfileRepository',
    'JobRepository',
    'ApplicationRepository',
    'PowerMatchRepository',
    'EmployerPowerMatchRepository',
    'InvitationRepository',
    'INVITATION_STATUSES',
]
