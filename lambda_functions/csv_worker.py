"""
Lambda function to process CSV queue messages.
Triggered by the CSV processing SQS queue (event source mapping with
ReportBatchItemFailures enabled).
"""
import logging
from catalog_ingest.core.logging_config import configure_logging
from catalog_ingest.repositories.sqs_repository import SQSRepository
from catalog_ingest.services.ingestion_service import IngestionService

logger = logging.getLogger(__name__)


def handler(event, context):
    """
    Lambda handler for SQS batch processing.

    Args:
        event: SQS event containing Records
        context: Lambda context object

    Returns:
        dict: batchItemFailures listing the messages to redeliver
    """
    configure_logging()
    ingestion_service = IngestionService()
    failures = []

    for record in event.get('Records', []):
        message_id = record.get('messageId')
        try:
            body = SQSRepository.parse_message_body(record)
            receive_count = SQSRepository.get_receive_count(record)
            ingestion_service.handle_queue_message(body, receive_count)
        except Exception:
            logger.exception("Failed to process message %s", message_id)
            failures.append({'itemIdentifier': message_id})

    if failures:
        logger.warning("%d of %d messages left for redelivery", len(failures), len(event.get('Records', [])))
    return {'batchItemFailures': failures}
