from .base import Base
from .profile import Profile, JobSeekerProfile, EmployerProfile
from .job import Job
from .application import Application, ApplicationStage
from .power_match import PowerMatch, EmployerPowerMatch
from .invitation import CandidateInvitation

__all__ = [
    'Base',
    'Profile',
    'JobSeekerProfile',
    'EmployerProfile',
    'Job',
    'Application',
    'ApplicationStage',
    'PowerMatch',
    'EmployerPowerMatch',
    'CandidateInvitation',
]
