"""Reminders FastAPI application.

Exposes operational endpoints for the scheduler and notification
maintenance. Each request runs inside the ``hyre`` domain context so the
notification routes can reach the domain's repositories.

Usage:
    uvicorn app:app --host 0.0.0.0 --port 8000 --reload
"""

from container import Container
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from scheduling.config import load_settings
from shared.utils.logging import configure_logging


def create_app(container: Container | None = None) -> FastAPI:
    container = container or Container(settings=load_settings())
    domain = container.domain

    app = FastAPI(
        title="Hyre Reminders API",
        description="Leg reminder scheduling and notification delivery",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the Protean domain context for each request."""
        with domain.domain_context():
            response = await call_next(request)
        return response

    app.state.container = container
    app.state.scheduler = container.scheduler
    app.state.notification_service = container.notifications

    from notifications.api.routes import router as notifications_router
    from scheduling.api.routes import router as operations_router

    app.include_router(operations_router)
    app.include_router(notifications_router)

    @app.get("/health")
    async def health():
        return JSONResponse(
            content={
                "status": "ok",
                "domain": domain.name,
                "environment": container.settings.environment,
                "queues": sorted(container.queues),
            }
        )

    return app


configure_logging()
app = create_app()
