"""
Order Service
CRUD over orders and their line items, backed by a relational store
"""

from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI

from order_service.core import ServiceHealth, setup_logging, RequestLoggingMiddleware, get_logger
from order_service.core_settings import Settings, get_settings
from order_service.api.error_handlers import register_error_handlers
from order_service.api.routes import router as orders_router
from order_service.infrastructure.db import Database

SERVICE_DESCRIPTION = "Order management service"

settings = get_settings()

setup_logging(
    service_name=settings.SERVICE_NAME,
    level=settings.LOG_LEVEL,
    environment=settings.ENVIRONMENT,
    version=settings.SERVICE_VERSION,
)

logger = get_logger(__name__)

def create_app(database: Optional[Database] = None, settings: Settings = settings) -> FastAPI:
    """Build the application around an explicitly supplied store client.

    When no database is given one is built from settings at startup. Either
    way the lifespan waits for it, creates the tables and disposes of it on
    shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting {settings.SERVICE_NAME} version {settings.SERVICE_VERSION}")
        db = database or Database.from_settings(settings)
        try:
            db.wait_until_ready(settings.DB_CONNECT_ATTEMPTS, settings.DB_CONNECT_DELAY)
            db.init_models()
            logger.info("Database models initialized")
            app.state.database = db
            logger.info(f"{settings.SERVICE_NAME} started successfully")
            yield
        finally:
            logger.info(f"Shutting down {settings.SERVICE_NAME}")
            db.dispose()

    app = FastAPI(
        title=settings.SERVICE_NAME,
        description=SERVICE_DESCRIPTION,
        version=settings.SERVICE_VERSION,
        lifespan=lifespan,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json"
    )

    app.add_middleware(RequestLoggingMiddleware)
    register_error_handlers(app)

    health_service = ServiceHealth(settings.SERVICE_NAME, settings.SERVICE_VERSION)
    app.include_router(health_service.create_health_router())
    app.include_router(orders_router)

    @app.get("/")
    async def root():
        return {
            "service": settings.SERVICE_NAME,
            "version": settings.SERVICE_VERSION,
            "status": "running",
            "docs": "/api/docs"
        }

    return app

app = create_app()

def run() -> None:
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)

if __name__ == "__main__":
    run()
