"""FastAPI application entry point."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from debug_host.api.context import AppContext, build_context
from debug_host.api.middleware import AuditLoggerMiddleware
from debug_host.api.routers import debug as debug_router
from debug_host.api.routers import events as events_router
from debug_host.api.schemas import APIMessage
from debug_host.version import __version__


def create_app(context: AppContext | None = None) -> FastAPI:
    """Instantiate the FastAPI application with all routers."""

    if context is None:
        context = build_context()

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        await context.service.stop_and_wait(timeout=context.settings.shutdown_timeout)

    app = FastAPI(
        lifespan=lifespan,
        title="Debug Host API",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.context = context
    app.add_middleware(AuditLoggerMiddleware)

    app.include_router(debug_router.router)
    app.include_router(events_router.router)

    @app.get("/healthz", response_model=APIMessage, tags=["system"])
    def healthz() -> APIMessage:
        return APIMessage(message="ok")

    return app


__all__ = ["create_app"]
