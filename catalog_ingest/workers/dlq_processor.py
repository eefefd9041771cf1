"""
Dead-Letter Processor.
Drains the dead-letter queue and accounts for permanently failed chunks.
"""
import logging
import threading
from catalog_ingest.core import config
from catalog_ingest.repositories.sqs_repository import SQSRepository
from catalog_ingest.services.ingestion_service import IngestionService

logger = logging.getLogger(__name__)


class DlqProcessor:
    """Poller for the dead-letter queue. Polls less aggressively than the chunk worker."""

    def __init__(
        self,
        ingestion_service: IngestionService = None,
        sqs_repository: SQSRepository = None,
        queue_url: str = None,
        poll_interval_seconds: float = None,
        visibility_timeout: int = None
    ):
        settings = config.settings
        self.sqs_repository = sqs_repository or SQSRepository()
        self.ingestion_service = ingestion_service or IngestionService(sqs_repository=self.sqs_repository)
        self.queue_url = queue_url or settings.csv_dlq_url
        self.poll_interval_seconds = (settings.dlq_poll_interval_seconds
                                      if poll_interval_seconds is None else poll_interval_seconds)
        self.visibility_timeout = visibility_timeout or settings.dlq_visibility_timeout
        self._stop_event = threading.Event()

    def start(self) -> None:
        logger.info("DLQ processor started (queue=%s)", self.queue_url)
        while not self._stop_event.is_set():
            try:
                handled = self.poll_once()
            except Exception:
                logger.exception("DLQ poll failed")
                handled = 0
            if handled == 0:
                self._stop_event.wait(self.poll_interval_seconds)
        logger.info("DLQ processor stopped")

    def stop(self) -> None:
        self._stop_event.set()

    def poll_once(self) -> int:
        """
        Receive and handle one batch of dead-lettered messages.

        Returns:
            Number of messages received
        """
        messages = self.sqs_repository.receive_messages(
            self.queue_url,
            max_messages=10,
            wait_time_seconds=0,
            visibility_timeout=self.visibility_timeout
        )
        for message in messages:
            self.handle_message(message)
        return len(messages)

    def handle_message(self, message: dict) -> bool:
        message_id = message.get('MessageId')
        try:
            body = self.sqs_repository.parse_message_body(message)
            receive_count = self.sqs_repository.get_receive_count(message)
            self.ingestion_service.handle_dead_letter_message(body, receive_count)
        except Exception:
            logger.exception("Failed to process dead letter %s", message_id)
            return False

        self.sqs_repository.delete_message(self.queue_url, message['ReceiptHandle'])
        return True
