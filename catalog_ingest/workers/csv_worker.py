"""
Chunk Worker.
Long-polls the CSV processing queue and hands each message to the
Ingestion Service. Messages are deleted only after they were handled;
anything that raises is left for queue redelivery.
"""
import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from catalog_ingest.core import config
from catalog_ingest.repositories.sqs_repository import SQSRepository
from catalog_ingest.services.ingestion_service import IngestionService

logger = logging.getLogger(__name__)


class CsvWorker:
    """Poller for the main CSV processing queue."""

    def __init__(
        self,
        ingestion_service: IngestionService = None,
        sqs_repository: SQSRepository = None,
        queue_url: str = None,
        concurrency: int = None,
        wait_time_seconds: int = None,
        visibility_timeout: int = None,
        error_backoff_seconds: float = None
    ):
        settings = config.settings
        self.sqs_repository = sqs_repository or SQSRepository()
        self.ingestion_service = ingestion_service or IngestionService(sqs_repository=self.sqs_repository)
        self.queue_url = queue_url or settings.csv_processing_queue_url
        self.concurrency = concurrency or settings.worker_concurrency
        self.wait_time_seconds = settings.worker_wait_time_seconds if wait_time_seconds is None else wait_time_seconds
        self.visibility_timeout = visibility_timeout or settings.worker_visibility_timeout
        self.error_backoff_seconds = (settings.worker_error_backoff_seconds
                                      if error_backoff_seconds is None else error_backoff_seconds)
        self._stop_event = threading.Event()

    @property
    def running(self) -> bool:
        return not self._stop_event.is_set()

    def start(self) -> None:
        """Poll until stop() is called. The in-flight batch always finishes."""
        logger.info("CSV worker started (queue=%s, concurrency=%d)", self.queue_url, self.concurrency)
        with ThreadPoolExecutor(max_workers=self.concurrency) as executor:
            while not self._stop_event.is_set():
                try:
                    self.poll_once(executor)
                except Exception:
                    logger.exception("CSV worker poll failed")
                    self._stop_event.wait(self.error_backoff_seconds)
        logger.info("CSV worker stopped")

    def stop(self) -> None:
        self._stop_event.set()

    def poll_once(self, executor: ThreadPoolExecutor = None) -> int:
        """
        Receive one batch and process it concurrently.

        Args:
            executor: Pool to run messages on; a temporary one is used when omitted

        Returns:
            Number of messages handled successfully (and deleted)
        """
        messages = self.sqs_repository.receive_messages(
            self.queue_url,
            max_messages=min(self.concurrency, 10),
            wait_time_seconds=self.wait_time_seconds,
            visibility_timeout=self.visibility_timeout
        )
        if not messages:
            return 0

        if executor is None:
            with ThreadPoolExecutor(max_workers=self.concurrency) as pool:
                return self._run_batch(pool, messages)
        return self._run_batch(executor, messages)

    def handle_message(self, message: dict) -> bool:
        """
        Process and acknowledge a single SQS message.

        Returns:
            True if the message was deleted, False if it was left for redelivery
        """
        message_id = message.get('MessageId')
        try:
            body = self.sqs_repository.parse_message_body(message)
            receive_count = self.sqs_repository.get_receive_count(message)
            self.ingestion_service.handle_queue_message(body, receive_count)
        except Exception:
            logger.exception("Failed to process message %s, leaving it for redelivery", message_id)
            return False

        self.sqs_repository.delete_message(self.queue_url, message['ReceiptHandle'])
        return True

    def _run_batch(self, executor: ThreadPoolExecutor, messages: list) -> int:
        futures = [executor.submit(self.handle_message, message) for message in messages]
        handled = 0
        for future in as_completed(futures):
            try:
                if future.result():
                    handled += 1
            except Exception:
                logger.exception("Failed to acknowledge message")
        return handled
