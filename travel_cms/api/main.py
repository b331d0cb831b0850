import asyncio
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from travel_cms.api.deps import get_settings
from travel_cms.api.errors import content_error_handler
from travel_cms.app_shell.config import configure_logging, validate_ops_rules
from travel_cms.app_shell.context import ServiceContext
from travel_cms.domain.errors import ContentError
from travel_cms.rules.loader import load_rules

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    ctx: ServiceContext | None = getattr(app.state, "context", None)

    if ctx is None:
        settings = get_settings()
        # Load rules and validate on startup (fail-fast)
        try:
            rules = load_rules(settings.rules_path)
            configure_logging(rules)
            validate_ops_rules(rules, settings)
        except Exception:
            logger.critical("Rules load failed for %s", settings.rules_path, exc_info=True)
            raise
        logger.info("Rules loaded from %s", settings.rules_path)
        ctx = ServiceContext.create(settings.db_path(rules), rules)
        app.state.context = ctx

    if ctx.rules.scheduling.autostart:
        ctx.scheduler.start()

    yield

    await asyncio.to_thread(ctx.scheduler.stop)


def create_app(context: ServiceContext | None = None) -> FastAPI:
    """Build the API; an injected context skips rules loading and the database."""
    app = FastAPI(
        title="Travel CMS API",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    if context is not None:
        app.state.context = context

    app.add_exception_handler(ContentError, content_error_handler)

    # --- Routers ---
    from travel_cms.api.routes import admin_content, admin_schedule, public, render

    app.include_router(
        admin_content.router, prefix="/api/admin/content", tags=["Admin Content"]
    )
    app.include_router(
        admin_schedule.router, prefix="/api/admin/schedule", tags=["Admin Schedule"]
    )
    app.include_router(render.router, prefix="/api/admin/render", tags=["Render"])
    app.include_router(public.router, prefix="/api/public", tags=["Public"])

    # CORS (Allow Frontend)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health_check() -> dict[str, Any]:
        """Health check endpoint."""
        return {"status": "ok", "service": "api"}

    return app


app = create_app()
