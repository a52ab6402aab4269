from __future__ import annotations

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from products_api.api.errors import register_exception_handlers
from products_api.api.routes import router as products_router
from products_api.core.config import settings
from products_api.core.db import dispose_engine
from products_api.core.logging import configure_logging, get_logger
from products_api.middlewares.request_id import RequestIdMiddleware

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.log_level)
    logger.info("%s %s started (env=%s)", settings.app_name, settings.app_version, settings.environment)

    yield

    # The engine is created lazily by the first request that needs it.
    dispose_engine()
    logger.info("%s stopped", settings.app_name)


def create_app() -> FastAPI:
    app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)

    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list(),
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "X-Request-Id"],
        expose_headers=["X-Request-Id"],
    )

    register_exception_handlers(app)

    @app.get("/health")
    def health():
        return {
            "status": "ok",
            "service": settings.app_name,
            "env": settings.environment,
            "version": settings.app_version,
        }

    app.include_router(products_router)
    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    uvicorn.run("products_api.main:app", host=settings.host, port=settings.port, log_level=settings.log_level.lower())
