"""
Custom exceptions for the Catalog Batch Ingest service.
Provides specific error types for different failure scenarios.
"""


class BatchIngestException(Exception):
    """Base exception for all application errors."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ValidationException(BatchIngestException):
    """Raised when upload parameters, headers or row data are invalid."""
    pass


class RetryNotAllowedException(ValidationException):
    """Raised when a batch job cannot be retried in its current state."""
    pass


class BatchJobNotFoundException(BatchIngestException):
    """Raised when a batch job does not exist or belongs to another seller."""
    pass


class NotificationNotFoundException(BatchIngestException):
    """Raised when a seller notification does not exist."""
    pass


class S3Exception(BatchIngestException):
    """Raised when S3 operation fails."""
    pass


class DynamoDBException(BatchIngestException):
    """Raised when DynamoDB operation fails."""
    pass


class SQSException(BatchIngestException):
    """Raised when SQS operation fails."""
    pass


class CSVProcessingException(BatchIngestException):
    """Raised when CSV file processing fails."""
    pass
