"""FastAPI application entry point."""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from fund_monitor.app_context import AppContext
from fund_monitor.config.logging_config import setup_logging
from fund_monitor.api.routers import portfolio_router, quotes_router
from fund_monitor.core.exceptions import AppError, NotFoundError, RefreshInProgressError

logger = logging.getLogger(__name__)

_ERROR_STATUS = {
    NotFoundError: 404,
    RefreshInProgressError: 503,
}


def create_app(context: Optional[AppContext] = None) -> FastAPI:
    """Build the API around a context (a default one from settings if not given)."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        ctx = context or AppContext()
        setup_logging(ctx.settings)
        app.state.context = ctx

        stop = asyncio.Event()
        refresher: Optional[asyncio.Task] = None
        interval = ctx.settings.refresh_interval_seconds
        if interval > 0 and ctx.has_portfolio_config:
            refresher = asyncio.ensure_future(ctx.refresh_service.run_periodic(interval, stop))
            logger.info(f"Auto-refresh every {interval}s")
        yield
        stop.set()
        if refresher is not None:
            await refresher
        await ctx.aclose()

    app = FastAPI(
        title="Fund Monitor",
        description="Multi-market fund portfolio quotes and summaries",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.include_router(portfolio_router)
    app.include_router(quotes_router)

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        """Global handler for application errors."""
        return JSONResponse(
            status_code=_ERROR_STATUS.get(type(exc), 400),
            content={"error": exc.code, "message": exc.message},
        )

    @app.get("/health")
    def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    @app.get("/")
    def root(request: Request) -> dict[str, str]:
        """Root endpoint with API info."""
        settings = request.app.state.context.settings
        return {
            "app": settings.app_name,
            "version": settings.app_version,
            "docs": "/docs",
        }

    return app


app = create_app()
