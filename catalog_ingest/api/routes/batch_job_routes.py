"""
Batch job API routes.
Handles HTTP endpoints for starting CSV uploads and tracking their jobs.
"""
from fastapi import APIRouter, Depends, UploadFile, File, HTTPException, status, Query
from catalog_ingest.services.ingestion_service import IngestionService
from catalog_ingest.core.dependencies import get_ingestion_service, get_seller_id
from catalog_ingest.models.dto.batch_job_dto import (
    BatchJobListResponse,
    BatchJobResponse,
    StartUploadRequest,
    StartUploadResponse,
    UploadUrlRequest,
    UploadUrlResponse
)
from catalog_ingest.core import config

router = APIRouter(prefix="/v1/api", tags=["Batch Jobs"])


@router.post("/batch-jobs/upload-url", response_model=UploadUrlResponse)
async def create_upload_url(
    request: UploadUrlRequest,
    ingestion_service: IngestionService = Depends(get_ingestion_service),
    seller_id: str = Depends(get_seller_id)
):
    """
    Get a presigned URL to upload a catalog CSV directly to storage.

    Pass the returned jobId and objectKey to POST /batch-jobs once the upload finishes.
    """
    if not request.file_name.lower().endswith('.csv'):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only CSV files are allowed"
        )
    return ingestion_service.create_upload_url(seller_id, request.file_name)


@router.post("/batch-jobs", response_model=StartUploadResponse, status_code=status.HTTP_202_ACCEPTED)
async def start_upload(
    request: StartUploadRequest,
    ingestion_service: IngestionService = Depends(get_ingestion_service),
    seller_id: str = Depends(get_seller_id)
):
    """
    Start asynchronous ingestion of an uploaded CSV file.

    - **objectKey**: Storage key the file was uploaded to
    - **fileName**: Original file name
    - **totalRows**: Number of data rows, excluding the header
    """
    job_id = ingestion_service.start_upload(
        seller_id,
        request.job_id,
        request.object_key,
        request.file_name,
        request.total_rows
    )
    return StartUploadResponse(job_id=job_id)


@router.post("/batch-jobs/file", response_model=StartUploadResponse, status_code=status.HTTP_202_ACCEPTED)
async def upload_csv(
    file: UploadFile = File(..., description="CSV file containing product rows"),
    ingestion_service: IngestionService = Depends(get_ingestion_service),
    seller_id: str = Depends(get_seller_id)
):
    """
    Upload a CSV file with product data.

    The file will be stored and processed asynchronously.
    """
    # Validate file type
    if not file.filename or not file.filename.lower().endswith('.csv'):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only CSV files are allowed"
        )

    # Validate file size
    content = await file.read()
    file_size = len(content)
    max_size_bytes = config.settings.max_file_size_mb * 1024 * 1024

    if file_size > max_size_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File size ({file_size / (1024 * 1024):.2f}MB) exceeds maximum allowed size of {config.settings.max_file_size_mb}MB"
        )

    # Reset file pointer for processing
    await file.seek(0)

    job_id = ingestion_service.start_upload_from_file(seller_id, file.file, file.filename)
    return StartUploadResponse(job_id=job_id)


@router.get("/batch-jobs", response_model=BatchJobListResponse)
async def list_batch_jobs(
    limit: int = Query(default=20, ge=1, le=100, description="Maximum number of jobs to return"),
    ingestion_service: IngestionService = Depends(get_ingestion_service),
    seller_id: str = Depends(get_seller_id)
):
    """List the caller's most recent batch jobs, newest first."""
    return ingestion_service.list_batch_jobs(seller_id, limit)


@router.get("/batch-jobs/{job_id}", response_model=BatchJobResponse)
async def get_batch_job(
    job_id: str,
    ingestion_service: IngestionService = Depends(get_ingestion_service),
    seller_id: str = Depends(get_seller_id)
):
    """
    Get the processing status of a batch job.
    """
    return ingestion_service.get_batch_job(seller_id, job_id)


@router.post("/batch-jobs/{job_id}/retry", response_model=StartUploadResponse, status_code=status.HTTP_202_ACCEPTED)
async def retry_batch_job(
    job_id: str,
    ingestion_service: IngestionService = Depends(get_ingestion_service),
    seller_id: str = Depends(get_seller_id)
):
    """
    Retry a failed batch job from its original file.
    """
    ingestion_service.retry_batch_job(seller_id, job_id)
    return StartUploadResponse(job_id=job_id, message="Retry accepted. Processing in progress.")
