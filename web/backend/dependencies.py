#!/usr/bin/env python3
"""
FastAPI dependencies for dependency injection.

Authentication happens upstream: the gateway forwards the caller's profile
id in the X-User-Id header. Scheduled-job endpoints instead require the
shared FUNCTION_SECRET as a bearer token.
"""

import secrets
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header, HTTPException

from core.app_context import AppContext
from core.config_loader import get_config


@lru_cache()
def get_app_context() -> AppContext:
    """
    Process-wide application context (engine, session factory, services).

    Usage:
        @router.get("/endpoint")
        def my_endpoint(ctx: AppContext = Depends(get_app_context)):
            ...
    """
    return AppContext.build(get_config())


def get_current_user_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    """The authenticated caller's profile id."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    return x_user_id


def require_function_secret(
    authorization: Optional[str] = Header(default=None),
    ctx: AppContext = Depends(get_app_context)
) -> None:
    """Reject scheduled-job calls that do not carry the shared secret."""
    expected = ctx.config.security.function_secret
    if not expected:
        raise HTTPException(status_code=503, detail="Scheduled jobs are not configured")

    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not secrets.compare_digest(token.encode(), expected.encode()):
        raise HTTPException(
            status_code=401,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"}
        )
