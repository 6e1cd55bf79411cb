"""Rate limiting for manual generation triggers."""

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from core.config_loader import get_config


def _caller_key(request: Request) -> str:
    """Limit per authenticated caller, falling back to the client address."""
    return request.headers.get("x-user-id") or get_remote_address(request)


def trigger_rate_limit() -> str:
    return get_config().web.trigger_rate_limit


limiter = Limiter(key_func=_caller_key)


def add_rate_limit_handlers(app):
    """Add rate limit exception handlers to the FastAPI app."""
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


async def _rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=429,
        content={
            "success": False,
            "error": str(exc),
            "type": "RateLimitExceeded"
        }
    )
