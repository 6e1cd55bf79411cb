"""API route handlers."""

from .power_matches import router as power_matches_router
from .employer_matches import router as employer_matches_router
from .invitations import router as invitations_router
from .scheduled import router as scheduled_router
