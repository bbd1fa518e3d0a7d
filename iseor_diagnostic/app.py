"""ISEOR Diagnostic — FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI

from iseor_diagnostic.config import Settings, get_settings
from iseor_diagnostic.middleware import configure_cors, configure_rate_limiting, lifespan, logging_middleware
from iseor_diagnostic.routers import dysfunctions, health, reference, sessions


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="ISEOR hidden-costs diagnostic: interview sessions, dysfunctions and cost statistics",
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
    )

    # Store settings on app state
    app.state.settings = settings

    # Middleware
    app.middleware("http")(logging_middleware)
    configure_cors(app, settings)
    configure_rate_limiting(app, settings)

    # Routers
    app.include_router(health.router)
    app.include_router(sessions.router, prefix=settings.api_prefix)
    app.include_router(dysfunctions.router, prefix=settings.api_prefix)
    app.include_router(reference.router, prefix=settings.api_prefix)

    return app


# Default app instance for uvicorn
app = create_app()
