"""
FastAPI application entry point.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from frontdesk import __version__
from frontdesk.api.router import router as api_router
from frontdesk.config import Settings, get_settings
from frontdesk.dialer.webhooks.router import router as dialer_webhooks_router
from frontdesk.runtime import Runtime, build_runtime
from frontdesk.shared.exceptions import AutomationStateError, NotFoundError
from frontdesk.shared.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings: Settings = app.state.settings
    setup_logging(settings)

    logger.info("Application starting", extra={"env": settings.app_env})

    owns_runtime = getattr(app.state, "runtime", None) is None
    if owns_runtime:
        app.state.runtime = build_runtime(settings)
    runtime: Runtime = app.state.runtime

    await runtime.db.create_all()

    if settings.automation_autostart:
        await runtime.controller.refresh_queue()
        runtime.controller.start()
        logger.info("Automation autostarted")

    yield

    logger.info("Shutting down application")
    if owns_runtime:
        await runtime.aclose()
        app.state.runtime = None
    else:
        await runtime.controller.shutdown()
    logger.info("Application shutdown complete")


def create_app(settings: Settings | None = None, runtime: Runtime | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title="FrontDesk Dialer API",
        description="Prospect scoring and outbound call automation",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )
    app.state.settings = settings
    app.state.runtime = runtime

    # Map domain exceptions to HTTP responses
    @app.exception_handler(NotFoundError)
    async def _not_found(_: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(AutomationStateError)
    async def _conflict(_: Request, exc: AutomationStateError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"detail": str(exc), "state": exc.state},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        errors = []
        for error in exc.errors():
            field = ".".join(str(loc) for loc in error["loc"])
            errors.append(
                {
                    "field": field,
                    "message": error["msg"],
                    "type": error["type"],
                }
            )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "detail": {
                    "code": "VALIDATION_ERROR",
                    "message": "Request validation failed",
                    "errors": errors,
                }
            },
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)
    app.include_router(dialer_webhooks_router)

    @app.get("/health")
    async def health_check(request: Request) -> dict[str, str]:
        runtime = getattr(request.app.state, "runtime", None)
        state = runtime.controller.state.value if runtime is not None else "starting"
        return {"status": "healthy", "automation": state}

    return app


app = create_app()
