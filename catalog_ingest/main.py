"""
Main FastAPI application entry point.
Configures and initializes the Catalog Batch Ingest API.
"""
import logging
from fastapi import FastAPI, Request
from mangum import Mangum
from catalog_ingest.core.config import settings
from catalog_ingest.core.exception_handler import register_exception_handlers
from catalog_ingest.core.logging_config import configure_logging
from catalog_ingest.api.routes import batch_job_routes, health_routes, notification_routes

configure_logging()
logger = logging.getLogger(__name__)

# Create FastAPI application
app = FastAPI(
    title=settings.api_title,
    version=settings.api_version,
    description="Batch CSV product ingestion for seller catalogs",
    root_path=f"/{settings.environment}"
)

# Register exception handlers
register_exception_handlers(app)

# Register routes
app.include_router(health_routes.router)
app.include_router(batch_job_routes.router)
app.include_router(notification_routes.router)


# Middleware to log request paths
@app.middleware("http")
async def log_request(request: Request, call_next):
    logger.info("Request path: %s %s", request.method, request.url.path)
    response = await call_next(request)
    return response

# Lambda handler for AWS
handler = Mangum(app, lifespan="off")


# For local development
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
