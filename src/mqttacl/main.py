"""MQTT ACL Service - FastAPI Application."""

from contextlib import asynccontextmanager

import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mqttacl.audit import configure_audit_logging
from mqttacl.config import Settings, get_settings
from mqttacl.logs import configure_logging
from mqttacl.routes import health_router, mqtt_router
from mqttacl.routes.deps import init_deps
from mqttacl.routes.health import VERSION

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    settings = get_settings()

    configure_logging()
    configure_audit_logging(
        log_level=settings.log_level,
        json_format=settings.environment != "development",
        service_name=settings.service_name,
    )

    logger.info("Starting MQTT ACL Service rules_file=%s", settings.rules_file)

    await init_deps(settings)

    logger.info("Service initialized")

    yield

    logger.info("Shutting down MQTT ACL Service")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="MQTT ACL Service",
        description="Topic access control for MQTT brokers",
        version=VERSION,
        lifespan=lifespan,
        docs_url="/docs" if settings.environment != "production" else None,
        redoc_url="/redoc" if settings.environment != "production" else None,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.environment == "development" else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(health_router)
    app.include_router(mqtt_router)

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception path=%s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    return app


# Default app instance for uvicorn
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "mqttacl.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development",
    )
