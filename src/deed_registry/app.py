"""FastAPI application factory for the deed registry."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from deed_registry.common.config import get_settings
from deed_registry.common.logging import get_logger, setup_logging
from deed_registry.common.schemas import ErrorResponse, HealthResponse

logger = get_logger("app")


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        from deed_registry.deps import get_db
        db = get_db()
        await db.init()
        await db.create_all()
        yield
        # Shutdown
        await db.close()

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="Internal server error", code="SERVER_ERROR",
            ).model_dump(),
        )

    @app.get("/health", response_model=HealthResponse)
    async def health():
        return HealthResponse(version=settings.api_version)

    # Mount routers
    from deed_registry.lands.router import router as lands_router
    from deed_registry.owners.router import router as owners_router
    from deed_registry.deeds.router import router as deeds_router
    from deed_registry.transfers.router import router as transfers_router
    from deed_registry.integrity.router import router as integrity_router
    from deed_registry.audit.router import router as audit_router

    prefix = settings.api_prefix
    app.include_router(lands_router, prefix=prefix, tags=["lands"])
    app.include_router(owners_router, prefix=prefix, tags=["owners"])
    app.include_router(deeds_router, prefix=prefix, tags=["deeds"])
    app.include_router(transfers_router, prefix=prefix, tags=["transfers"])
    app.include_router(integrity_router, prefix=prefix, tags=["integrity"])
    app.include_router(audit_router, prefix=prefix, tags=["audit"])

    return app
