"""
Dependency injection container for FastAPI.
Provides singleton-like behavior for services and repositories.
"""
from functools import lru_cache
from fastapi import Header, HTTPException, status
from catalog_ingest.repositories.s3_repository import S3Repository
from catalog_ingest.repositories.sqs_repository import SQSRepository
from catalog_ingest.repositories.batch_job_repository import BatchJobRepository
from catalog_ingest.repositories.product_repository import ProductRepository
from catalog_ingest.repositories.dynamo_product_repository import DynamoProductRepository
from catalog_ingest.repositories.notification_repository import NotificationRepository
from catalog_ingest.services.file_service import FileService
from catalog_ingest.services.ingestion_service import IngestionService
from catalog_ingest.services.notification_service import NotificationService


@lru_cache()
def get_s3_repository() -> S3Repository:
    """Get S3Repository singleton instance."""
    return S3Repository()


@lru_cache()
def get_sqs_repository() -> SQSRepository:
    """Get SQSRepository singleton instance."""
    return SQSRepository()


@lru_cache()
def get_batch_job_repository() -> BatchJobRepository:
    """Get BatchJobRepository singleton instance."""
    return BatchJobRepository()


@lru_cache()
def get_product_repository() -> ProductRepository:
    """Get ProductRepository singleton instance."""
    return DynamoProductRepository()


@lru_cache()
def get_notification_repository() -> NotificationRepository:
    """Get NotificationRepository singleton instance."""
    return NotificationRepository()


@lru_cache()
def get_file_service() -> FileService:
    """Get FileService singleton instance."""
    return FileService()


@lru_cache()
def get_notification_service() -> NotificationService:
    """Get NotificationService singleton instance."""
    return NotificationService(notification_repository=get_notification_repository())


@lru_cache()
def get_ingestion_service() -> IngestionService:
    """Get IngestionService singleton instance with injected dependencies."""
    return IngestionService(
        batch_job_repository=get_batch_job_repository(),
        product_repository=get_product_repository(),
        s3_repository=get_s3_repository(),
        sqs_repository=get_sqs_repository(),
        notification_service=get_notification_service(),
        file_service=get_file_service()
    )


def get_seller_id(x_seller_id: str = Header(default=None, description="Calling seller's identifier")) -> str:
    """
    Resolve the calling seller from the X-Seller-Id header.

    Raises:
        HTTPException: 401 if the header is missing or blank
    """
    if not x_seller_id or not x_seller_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-Seller-Id header"
        )
    return x_seller_id.strip()
