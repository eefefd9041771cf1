"""
Global exception handler for the Catalog Batch Ingest API.
Provides centralized error handling for all API exceptions.
"""
import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from .exceptions import (
    BatchJobNotFoundException,
    NotificationNotFoundException,
    ValidationException,
    S3Exception,
    DynamoDBException,
    SQSException,
    CSVProcessingException
)

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application."""

    @app.exception_handler(BatchJobNotFoundException)
    async def handle_job_not_found(request: Request, exc: BatchJobNotFoundException):
        return JSONResponse(
            status_code=404,
            content={"error": "Not Found", "message": exc.message}
        )

    @app.exception_handler(NotificationNotFoundException)
    async def handle_notification_not_found(request: Request, exc: NotificationNotFoundException):
        return JSONResponse(
            status_code=404,
            content={"error": "Not Found", "message": exc.message}
        )

    @app.exception_handler(ValidationException)
    async def handle_validation_error(request: Request, exc: ValidationException):
        return JSONResponse(
            status_code=400,
            content={"error": "Validation Error", "message": exc.message}
        )

    @app.exception_handler(S3Exception)
    async def handle_s3_error(request: Request, exc: S3Exception):
        logger.error("S3 error on %s: %s", request.url.path, exc.message)
        return JSONResponse(
            status_code=500,
            content={"error": "Storage Error", "message": exc.message}
        )

    @app.exception_handler(DynamoDBException)
    async def handle_dynamodb_error(request: Request, exc: DynamoDBException):
        logger.error("DynamoDB error on %s: %s", request.url.path, exc.message)
        return JSONResponse(
            status_code=500,
            content={"error": "Database Error", "message": exc.message}
        )

    @app.exception_handler(SQSException)
    async def handle_sqs_error(request: Request, exc: SQSException):
        logger.error("SQS error on %s: %s", request.url.path, exc.message)
        return JSONResponse(
            status_code=500,
            content={"error": "Queue Error", "message": exc.message}
        )

    @app.exception_handler(CSVProcessingException)
    async def handle_csv_error(request: Request, exc: CSVProcessingException):
        return JSONResponse(
            status_code=400,
            content={"error": "CSV Processing Failed", "message": exc.message}
        )

    @app.exception_handler(Exception)
    async def handle_generic_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal Server Error", "message": "An unexpected error occurred"}
        )
