"""
FastAPI application entry point for the Pipeline Resilience Engine.
"""

import structlog
from fastapi import FastAPI
from prometheus_fastapi_instrumentator import Instrumentator

from pipeline_resilience.api.dependencies import get_decision_engine, get_settings
from pipeline_resilience.api.error_handlers import EXCEPTION_HANDLERS
from pipeline_resilience.api.middleware import RequestTracingMiddleware
from pipeline_resilience.api.routes import router
from pipeline_resilience.logging_config import configure_logging

settings = get_settings()

# Configure structured logging before the engine logs its startup summary
configure_logging(settings.LOG_LEVEL, settings.ENVIRONMENT, settings.DECISION_LOG_LEVEL)
logger = structlog.get_logger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    description="Retry, fallback and graceful-degradation decisions for content generation pipelines",
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Request tracing middleware (request_id in all logs)
app.add_middleware(RequestTracingMiddleware)

for exc_class, handler in EXCEPTION_HANDLERS.items():
    app.add_exception_handler(exc_class, handler)

app.include_router(router)


@app.on_event("startup")
async def startup():
    """Application startup - build the engine so configuration errors surface early."""
    engine = get_decision_engine()
    logger.info(
        "Application startup",
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        fallback_models=sorted(engine.settings.model_fallbacks),
    )


@app.on_event("shutdown")
async def shutdown():
    """Application shutdown."""
    logger.info("Application shutdown")


if settings.PROMETHEUS_ENABLED:
    Instrumentator().instrument(app).expose(app)


@app.get("/")
async def root():
    """Root endpoint with API documentation links."""
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running",
        "docs": "/docs",
        "health": "/health",
        "decide": "/decide",
        "metrics": "/metrics" if settings.PROMETHEUS_ENABLED else None,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "pipeline_resilience.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
