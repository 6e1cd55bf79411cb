#!/usr/bin/env python3
"""
Power Match API - FastAPI Application

Candidate, employer and scheduled-job endpoints for the Power Match
lifecycle, with automatic API documentation.

Usage:
    python -m web.backend.app

Then open:
    - http://localhost:8080/docs - API Documentation (Swagger UI)
    - http://localhost:8080/redoc - Alternative API Documentation
"""

import logging

from fastapi import FastAPI

from core.config_loader import get_config
from .exceptions import register_exception_handlers
from .limiter import add_rate_limit_handlers
from .routers import (
    power_matches_router,
    employer_matches_router,
    invitations_router,
    scheduled_router
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Power Match API",
        description="Power Match generation, view tracking, auto-withdrawal and invitations",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc"
    )

    # Configure rate limiting
    add_rate_limit_handlers(app)

    # Register exception handlers
    register_exception_handlers(app)

    # Include routers
    app.include_router(power_matches_router)
    app.include_router(employer_matches_router)
    app.include_router(invitations_router)
    app.include_router(scheduled_router)

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": "power-match"}

    return app


app = create_app()


def main():
    """Run the web server."""
    import uvicorn

    config = get_config()
    logger.info(f"Starting Power Match API on {config.web.host}:{config.web.port}")
    logger.info(f"API Docs: http://{config.web.host}:{config.web.port}/docs")

    uvicorn.run(
        "web.backend.app:app",
        host=config.web.host,
        port=config.web.port,
        reload=False,
        log_level="info"
    )


if __name__ == "__main__":
    main()
