"""
Lambda function to process dead-lettered CSV messages.
Triggered by the CSV dead-letter SQS queue.
"""
import logging
from catalog_ingest.core.logging_config import configure_logging
from catalog_ingest.repositories.sqs_repository import SQSRepository
from catalog_ingest.services.ingestion_service import IngestionService

logger = logging.getLogger(__name__)


def handler(event, context):
    """
    Lambda handler for dead-letter processing.

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
            ingestion_service.handle_dead_letter_message(body, receive_count)
        except Exception:
            logger.exception("Failed to process dead letter %s", message_id)
            failures.append({'itemIdentifier': message_id})

    return {'batchItemFailures': failures}
