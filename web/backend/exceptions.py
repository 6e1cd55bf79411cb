#!/usr/bin/env python3
"""
Error handlers for the web application.

Service errors from core.errors are mapped to HTTP status codes and a
consistent JSON body: {"success": false, "error": ..., "type": ...}.
"""

import logging
from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse

from core.errors import (
    AlreadyExistsError,
    AuthorizationFailure,
    InvalidRequestError,
    NotFoundError,
    PowerMatchError,
    ScoringUnavailable,
)

logger = logging.getLogger(__name__)


def status_code_for(exc: PowerMatchError) -> int:
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, AuthorizationFailure):
        return 403
    if isinstance(exc, AlreadyExistsError):
        return 409
    if isinstance(exc, InvalidRequestError):
        return 400
    if isinstance(exc, ScoringUnavailable):
        return 503
    return 500


async def power_match_exception_handler(
    request: Request,
    exc: PowerMatchError
) -> JSONResponse:
    """
    Handle service layer exceptions.

    Args:
        request: The FastAPI request.
        exc: The service exception.

    Returns:
        JSONResponse with error details.
    """
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error(f"Service error in {request.url.path}: {exc}", exc_info=True)
    else:
        logger.info(f"Rejected request to {request.url.path}: {exc}")

    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": str(exc),
            "type": exc.__class__.__name__
        }
    )


async def http_exception_handler(
    request: Request,
    exc: HTTPException
) -> JSONResponse:
    """Handle FastAPI HTTP exceptions with consistent format."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.detail,
            "type": "HTTPException"
        },
        headers=getattr(exc, "headers", None)
    )


async def general_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error in {request.url.path}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error",
            "type": "InternalError"
        }
    )


def register_exception_handlers(app) -> None:
    app.add_exception_handler(PowerMatchError, power_match_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
