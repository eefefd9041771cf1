"""
Core configuration for the Catalog Batch Ingest service.
Manages environment variables, AWS resource names and pipeline limits.
"""
import os
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    # AWS Configuration
    aws_region: str = os.getenv("AWS_REGION", "us-east-1")
    csv_upload_bucket: str = os.getenv("CSV_UPLOAD_BUCKET", "ecommerce-csv-uploads")
    batch_jobs_table_name: str = os.getenv("BATCH_JOBS_TABLE_NAME", "")
    products_table_name: str = os.getenv("PRODUCTS_TABLE_NAME", "")
    notifications_table_name: str = os.getenv("NOTIFICATIONS_TABLE_NAME", "")
    csv_processing_queue_url: str = os.getenv("CSV_PROCESSING_QUEUE_URL", "")
    csv_dlq_url: str = os.getenv("CSV_DLQ_URL", "")

    # API Configuration
    api_title: str = os.getenv("API_TITLE", "Catalog Batch Ingest API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")

    # Upload Limits
    max_file_size_mb: int = int(os.getenv("MAX_FILE_SIZE_MB", "50"))
    max_bulk_upload_rows: int = int(os.getenv("MAX_BULK_UPLOAD_ROWS", "200000"))
    presign_expiry_seconds: int = int(os.getenv("PRESIGN_EXPIRY_SECONDS", "300"))

    # Pipeline Configuration
    csv_chunk_size: int = int(os.getenv("CSV_CHUNK_SIZE", "1000"))
    max_stored_errors_per_chunk: int = int(os.getenv("MAX_STORED_ERRORS_PER_CHUNK", "50"))
    max_job_retries: int = int(os.getenv("MAX_JOB_RETRIES", "3"))
    max_receive_count: int = int(os.getenv("MAX_RECEIVE_COUNT", "3"))

    # Worker Configuration
    worker_concurrency: int = int(os.getenv("WORKER_CONCURRENCY", "10"))
    worker_wait_time_seconds: int = int(os.getenv("WORKER_WAIT_TIME_SECONDS", "20"))
    worker_visibility_timeout: int = int(os.getenv("WORKER_VISIBILITY_TIMEOUT", "120"))
    worker_error_backoff_seconds: float = float(os.getenv("WORKER_ERROR_BACKOFF_SECONDS", "1"))
    dlq_visibility_timeout: int = int(os.getenv("DLQ_VISIBILITY_TIMEOUT", "300"))
    dlq_poll_interval_seconds: float = float(os.getenv("DLQ_POLL_INTERVAL_SECONDS", "30"))

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Environment
    environment: str = os.getenv("ENVIRONMENT", "dev")

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
