"""
Data Transfer Objects for the batch upload API.
Defines request and response schemas for batch job endpoints.
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Schemas exchanged as camelCase JSON."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class StartUploadRequest(CamelModel):
    """Request schema for starting ingestion of an already uploaded object."""
    job_id: Optional[str] = Field(default=None, description="Job id issued with the upload URL")
    object_key: str = Field(..., min_length=1, description="S3 key of the uploaded CSV")
    file_name: str = Field(..., min_length=1, max_length=255, description="Original file name")
    total_rows: int = Field(..., description="Number of data rows, excluding the header")

    @field_validator('object_key', 'file_name')
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not v or v.strip() == "":
            raise ValueError("Field cannot be empty")
        return v.strip()


class UploadUrlRequest(CamelModel):
    """Request schema for a presigned upload URL."""
    file_name: str = Field(..., min_length=1, max_length=255, description="Original file name")


class UploadUrlResponse(CamelModel):
    """Response schema carrying a presigned upload URL."""
    job_id: str = Field(..., description="Job id to pass when starting ingestion")
    object_key: str = Field(..., description="S3 key the file must be uploaded to")
    upload_url: str = Field(..., description="Presigned PUT URL")


class StartUploadResponse(CamelModel):
    """Response schema for an accepted upload."""
    job_id: str = Field(..., description="Unique identifier for the batch job")
    status: str = Field(default="pending", description="Job status")
    message: str = Field(default="Upload accepted. Processing in progress.", description="Status message")


class RowErrorResponse(CamelModel):
    """A row-level error on a batch job."""
    row: int
    error: str


class BatchJobResponse(CamelModel):
    """Response schema for batch job status."""
    job_id: str
    seller_id: str
    status: str
    file_name: str
    total_rows: int = 0
    processed_rows: int = 0
    created_count: int = 0
    error_count: int = 0
    total_chunks: int = 0
    chunks_completed: int = 0
    chunks_failed: int = 0
    retry_count: int = 0
    max_retries: int = 3
    errors: list[RowErrorResponse] = []
    created_at: datetime
    updated_at: datetime


class BatchJobListResponse(CamelModel):
    """Response schema for listing a seller's batch jobs."""
    jobs: list[BatchJobResponse]
    count: int
