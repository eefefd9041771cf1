"""
Health check routes for monitoring.
Reports whether every AWS resource the pipeline depends on is configured.
"""
from fastapi import APIRouter
from catalog_ingest.core import config

router = APIRouter(prefix="/v1/api", tags=["Health"])


def _configured_resources() -> dict:
    settings = config.settings
    return {
        "uploadBucket": settings.csv_upload_bucket,
        "batchJobsTable": settings.batch_jobs_table_name,
        "productsTable": settings.products_table_name,
        "notificationsTable": settings.notifications_table_name,
        "processingQueue": settings.csv_processing_queue_url,
        "deadLetterQueue": settings.csv_dlq_url
    }


@router.get("/health")
async def health_check():
    """
    Health check endpoint for monitoring.

    Status is "degraded" when any bucket, table or queue setting is empty;
    no calls are made to AWS.
    """
    resources = _configured_resources()
    missing = sorted(name for name, value in resources.items() if not value)
    return {
        "status": "degraded" if missing else "healthy",
        "service": config.settings.api_title,
        "version": config.settings.api_version,
        "environment": config.settings.environment,
        "resources": {name: bool(value) for name, value in resources.items()},
        "missing": missing
    }
