"""
Power Match lifecycle: generation, view tracking, auto-withdrawal and
employer invitations.
"""
from core.power_match.employer_generator import EmployerPowerMatchGenerator
from core.power_match.generator import PowerMatchGenerator
from core.power_match.invitations import InvitationService
from core.power_match.models import (
    AutoApplyResult,
    DeadlineStatus,
    EmployerGenerationResult,
    GenerationResult,
    SweepResult,
    ViewResult,
)
from core.power_match.queries import EmployerMatchPage, PowerMatchQueries
from core.power_match.sweeper import AutoWithdrawalSweeper
from core.power_match.view_tracker import ViewTracker

__all__ = [
    'PowerMatchGenerator',
    'EmployerPowerMatchGenerator',
    'ViewTracker',
    'AutoWithdrawalSweeper',
    'InvitationService',
    'PowerMatchQueries',
    'EmployerMatchPage',
    'GenerationResult',
    'AutoApplyResult',
    'EmployerGenerationResult',
    'ViewResult',
    'SweepResult',
    'DeadlineStatus',
]
