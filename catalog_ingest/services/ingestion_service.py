"""
Ingestion Service for business logic.
Orchestrates the batch CSV pipeline: job creation, file splitting, chunk
processing, dead-lettering, finalization, retries and seller notifications.
"""
import io
import logging
import math
import uuid
from datetime import datetime, timezone
from typing import BinaryIO, List, Optional
from pydantic import ValidationError
from catalog_ingest.core import config
from catalog_ingest.core.exceptions import (
    BatchJobNotFoundException,
    CSVProcessingException,
    RetryNotAllowedException,
    ValidationException
)
from catalog_ingest.core.retry import with_retry
from catalog_ingest.models.batch_job import (
    BatchJob,
    RowError,
    STATUS_COMPLETED,
    STATUS_FAILED,
    STATUS_PENDING,
    STATUS_PROCESSING
)
from catalog_ingest.models.dto.batch_job_dto import (
    BatchJobListResponse,
    BatchJobResponse,
    RowErrorResponse,
    UploadUrlResponse
)
from catalog_ingest.models.messages import (
    CSV_CHUNK,
    CSV_FILE_UPLOADED,
    ChunkMessage,
    DeadLetterMessage,
    FileUploadedMessage,
    parse_dead_letter_message,
    parse_queue_message
)
from catalog_ingest.models.notification import BATCH_COMPLETED, BATCH_COMPLETED_WITH_ERRORS, BATCH_FAILED
from catalog_ingest.models.product_model import Product
from catalog_ingest.repositories.batch_job_repository import BatchJobRepository
from catalog_ingest.repositories.dynamo_product_repository import DynamoProductRepository
from catalog_ingest.repositories.product_repository import ProductRepository
from catalog_ingest.repositories.s3_repository import S3Repository
from catalog_ingest.repositories.sqs_repository import SQSRepository
from catalog_ingest.services.file_service import FileService
from catalog_ingest.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

DB_RETRY_OPTS = {'max_retries': 3, 'base_delay': 0.5, 'max_delay': 10.0}
QUEUE_RETRY_OPTS = {'max_retries': 3, 'base_delay': 0.2, 'max_delay': 5.0}


class IngestionService:
    """Service for batch catalog ingestion."""

    def __init__(
        self,
        batch_job_repository: BatchJobRepository = None,
        product_repository: ProductRepository = None,
        s3_repository: S3Repository = None,
        sqs_repository: SQSRepository = None,
        notification_service: NotificationService = None,
        file_service: FileService = None
    ):
        self.batch_job_repository = batch_job_repository or BatchJobRepository()
        self.product_repository = product_repository or DynamoProductRepository()
        self.s3_repository = s3_repository or S3Repository()
        self.sqs_repository = sqs_repository or SQSRepository()
        self.notification_service = notification_service or NotificationService()
        self.file_service = file_service or FileService()

    def create_upload_url(self, seller_id: str, file_name: str) -> UploadUrlResponse:
        """
        Reserve a job id and issue a presigned URL the seller uploads the CSV to.

        Raises:
            S3Exception: If the URL cannot be generated
        """
        job_id = str(uuid.uuid4())
        object_key = self.s3_repository.build_csv_key(seller_id, job_id, file_name)
        upload_url = self.s3_repository.generate_presigned_upload_url(object_key)
        return UploadUrlResponse(job_id=job_id, object_key=object_key, upload_url=upload_url)

    def start_upload(
        self,
        seller_id: str,
        job_id: Optional[str],
        object_key: str,
        file_name: str,
        total_rows: int
    ) -> str:
        """
        Accept an uploaded catalog file for asynchronous processing.

        Nothing is persisted when validation fails, and the job record is
        removed again if the trigger message cannot be enqueued.

        Args:
            seller_id: Owner of the upload
            job_id: Pre-issued job id, or None to generate one
            object_key: S3 key of the uploaded CSV
            file_name: Original file name
            total_rows: Data rows reported by the caller

        Returns:
            The job id

        Raises:
            ValidationException: If the row count is out of range
            DynamoDBException: If the job cannot be stored
            SQSException: If the trigger message cannot be sent
        """
        self._validate_row_count(total_rows)
        if not object_key:
            raise ValidationException("objectKey is required")

        job_id = job_id or str(uuid.uuid4())
        now = datetime.now(timezone.utc)
        job = BatchJob(
            job_id=job_id,
            seller_id=seller_id,
            status=STATUS_PENDING,
            file_name=file_name,
            object_key=object_key,
            created_at=now,
            updated_at=now,
            total_rows=total_rows,
            max_retries=config.settings.max_job_retries
        )
        self.batch_job_repository.create(job)

        message = FileUploadedMessage(
            job_id=job_id,
            seller_id=seller_id,
            object_key=object_key,
            file_name=file_name,
            total_rows=total_rows
        )
        try:
            self.sqs_repository.send_message(config.settings.csv_processing_queue_url, message.to_body())
        except Exception:
            logger.exception("Could not enqueue job %s, removing it", job_id)
            try:
                self.batch_job_repository.delete(job_id)
            except Exception:
                logger.exception("Failed to remove job %s after enqueue failure", job_id)
            raise

        logger.info("Accepted upload %s for seller %s: job=%s rows=%d", file_name, seller_id, job_id, total_rows)
        return job_id

    def start_upload_from_file(self, seller_id: str, file: BinaryIO, file_name: str) -> str:
        """
        Store a directly uploaded CSV in S3 and start processing it.

        Raises:
            ValidationException: If the file is not UTF-8 or its row count is out of range
            S3Exception: If the upload fails
        """
        content = file.read()
        try:
            text = content.decode('utf-8')
        except UnicodeDecodeError as e:
            raise CSVProcessingException("File must be a valid UTF-8 encoded CSV") from e

        total_rows = self.file_service.count_data_rows(text)
        self._validate_row_count(total_rows)

        job_id = str(uuid.uuid4())
        object_key = self.s3_repository.build_csv_key(seller_id, job_id, file_name)
        self.s3_repository.upload_file(io.BytesIO(content), object_key)

        try:
            return self.start_upload(seller_id, job_id, object_key, file_name, total_rows)
        except Exception:
            self._delete_source_quietly(object_key)
            raise

    def get_batch_job(self, seller_id: str, job_id: str) -> BatchJobResponse:
        """
        Get a batch job's full projection.

        Raises:
            BatchJobNotFoundException: If the job is missing or not the seller's
        """
        job = self.batch_job_repository.get_for_seller(job_id, seller_id)
        if not job:
            raise BatchJobNotFoundException(f"Batch job '{job_id}' not found")
        return self._to_response(job)

    def list_batch_jobs(self, seller_id: str, limit: int = 20) -> BatchJobListResponse:
        jobs = self.batch_job_repository.list_recent_for_seller(seller_id, limit)
        responses = [self._to_response(job) for job in jobs]
        return BatchJobListResponse(jobs=responses, count=len(responses))

    def retry_batch_job(self, seller_id: str, job_id: str) -> str:
        """
        Re-run a failed job from its original file.

        Resets progress and chunk counters, bumps retry_count (which also
        becomes the generation of the new chunk messages) and enqueues a
        fresh split.

        Raises:
            BatchJobNotFoundException: If the job is missing or not the seller's
            RetryNotAllowedException: If the job is not retryable
        """
        job = self.batch_job_repository.get_for_seller(job_id, seller_id)
        if not job:
            raise BatchJobNotFoundException(f"Batch job '{job_id}' not found")

        if job.status != STATUS_FAILED:
            raise RetryNotAllowedException("Only failed jobs can be retried")

        if job.retry_count >= job.max_retries:
            raise RetryNotAllowedException("Maximum retries reached")

        if not job.object_key or not self.s3_repository.file_exists(job.object_key):
            raise RetryNotAllowedException("source file no longer available")

        if not self.batch_job_repository.reset_for_retry(job_id):
            raise RetryNotAllowedException("Only failed jobs can be retried")

        message = FileUploadedMessage(
            job_id=job_id,
            seller_id=seller_id,
            object_key=job.object_key,
            file_name=job.file_name,
            total_rows=job.total_rows
        )
        try:
            self.sqs_repository.send_message(config.settings.csv_processing_queue_url, message.to_body())
        except Exception:
            logger.exception("Could not enqueue retry of job %s, returning it to failed", job_id)
            self.batch_job_repository.update(job_id, {'status': STATUS_FAILED})
            raise

        logger.info("Retrying job %s (attempt %d of %d)", job_id, job.retry_count + 1, job.max_retries)
        return job_id

    def handle_queue_message(self, body: dict, receive_count: int = 1) -> None:
        """
        Dispatch one main-queue message.

        Messages past the receive budget are dead-lettered without being
        processed. Unknown types are logged and dropped. Exceptions propagate
        so the caller leaves the message unacknowledged.
        """
        if receive_count > config.settings.max_receive_count:
            logger.warning("Message exceeded max receives (%d), sending to DLQ", receive_count)
            self.send_to_dead_letter(body, "Max receive count exceeded", receive_count)
            return

        try:
            message = parse_queue_message(body)
        except ValidationError as e:
            logger.error("Dropping malformed %s message: %s", body.get('type'), e)
            return

        if isinstance(message, FileUploadedMessage):
            self.handle_file_uploaded(message)
        elif isinstance(message, ChunkMessage):
            self.process_chunk(message)

    def handle_file_uploaded(self, message: FileUploadedMessage) -> None:
        """Split an uploaded file; any failure fails the job and notifies the seller."""
        logger.info("Processing file upload: job=%s, file=%s", message.job_id, message.file_name)
        try:
            chunks = self.split_and_enqueue(message.job_id, message.seller_id, message.object_key)
            logger.info("Enqueued %d chunks for job %s", chunks, message.job_id)
        except Exception as e:
            error = getattr(e, 'message', str(e))
            logger.exception("Failed to split file for job %s", message.job_id)
            self._fail_job(message.job_id, message.seller_id, message.file_name,
                           f"File processing failed: {error}")

    def split_and_enqueue(self, job_id: str, seller_id: str, object_key: str) -> int:
        """
        Split a job's file into chunk messages and enqueue them.

        Returns:
            Number of chunks enqueued (0 when the job was skipped or failed validation)

        Raises:
            S3Exception: If the file cannot be read
            DynamoDBException: If the job cannot be updated
            SQSException: If the chunk messages cannot be sent
        """
        settings = config.settings

        if not self.batch_job_repository.mark_processing(job_id):
            logger.warning("Job %s is not awaiting a split, skipping", job_id)
            return 0

        job = self.batch_job_repository.get_by_id(job_id)
        file_name = job.file_name if job else object_key
        generation = job.retry_count if job else 0

        raw = self.s3_repository.get_file(object_key)
        try:
            content = raw.decode('utf-8')
        except UnicodeDecodeError:
            self._fail_job(job_id, seller_id, file_name, "File must be a valid UTF-8 encoded CSV")
            return 0

        lines = self.file_service.normalize_lines(content)
        if len(lines) < 2:
            self._fail_job(job_id, seller_id, file_name, "CSV file is empty or has no data rows")
            return 0

        header_line = lines[0]
        try:
            self.file_service.validate_header(header_line)
        except ValidationException as e:
            self._fail_job(job_id, seller_id, file_name, e.message)
            return 0

        data_lines = lines[1:]
        chunk_size = settings.csv_chunk_size
        total_chunks = math.ceil(len(data_lines) / chunk_size)

        messages = []
        for chunk_index in range(total_chunks):
            offset = chunk_index * chunk_size
            rows = data_lines[offset:offset + chunk_size]
            messages.append(ChunkMessage(
                job_id=job_id,
                seller_id=seller_id,
                object_key=object_key,
                chunk_index=chunk_index,
                total_chunks=total_chunks,
                start_row=offset + 1,
                end_row=offset + len(rows),
                header_line=header_line,
                rows=rows,
                generation=generation
            ))

        self.batch_job_repository.update(job_id, {
            'total_chunks': total_chunks,
            'total_rows': len(data_lines)
        })

        bodies = [m.to_body() for m in messages]
        with_retry(
            lambda: self.sqs_repository.send_message_batch(settings.csv_processing_queue_url, bodies),
            **QUEUE_RETRY_OPTS,
            on_retry=lambda err, attempt, delay: logger.warning(
                "Job %s: chunk enqueue retry %d in %.2fs: %s", job_id, attempt, delay, err)
        )
        return total_chunks

    def process_chunk(self, message: ChunkMessage) -> None:
        """
        Validate and persist one chunk of rows and record its outcome.

        Raises:
            The bulk insert error after recording the chunk as failed, so the
            message is not acknowledged
        """
        settings = config.settings
        job_id = message.job_id
        logger.info("Processing chunk %d/%d for job %s", message.chunk_index + 1, message.total_chunks, job_id)

        job = self.batch_job_repository.get_by_id(job_id)
        if job is None:
            logger.warning("Job %s no longer exists, dropping chunk %d", job_id, message.chunk_index)
            return
        if message.generation != job.retry_count:
            logger.warning("Dropping stale chunk %d of job %s (generation %d, current %d)",
                           message.chunk_index, job_id, message.generation, job.retry_count)
            return
        if message.chunk_index in job.settled_chunks:
            logger.info("Chunk %d of job %s already settled", message.chunk_index, job_id)
            self.finalize_batch_job(job_id)
            return
        if job.status != STATUS_PROCESSING:
            logger.warning("Job %s is %s, dropping chunk %d", job_id, job.status, message.chunk_index)
            return

        positions = self.file_service.column_positions(message.header_line)
        valid_products: List[Product] = []
        chunk_errors: List[RowError] = []
        processed_count = 0
        invalid_count = 0

        for i, line in enumerate(message.rows):
            row_num = message.start_row + i
            processed_count += 1
            fields = self.file_service.parse_csv_line(line)
            if self.file_service.is_blank(fields):
                continue

            row = self.file_service.row_from_fields(fields, positions)
            error, price, stock = self.file_service.validate_row(row)
            if error:
                invalid_count += 1
                if len(chunk_errors) < settings.max_stored_errors_per_chunk:
                    chunk_errors.append(RowError(row_num, error))
                continue

            valid_products.append(self.file_service.to_product(row, price, stock, message.seller_id, job_id))

        created_count = 0
        if valid_products:
            try:
                created_count = with_retry(
                    lambda: self.product_repository.add_products_bulk(valid_products),
                    **DB_RETRY_OPTS,
                    on_retry=lambda err, attempt, delay: logger.warning(
                        "Job %s chunk %d: DB retry %d in %.2fs: %s",
                        job_id, message.chunk_index, attempt, delay, err)
                )
            except Exception as db_error:
                self._record_failed_insert(message, db_error, processed_count,
                                           invalid_count + len(valid_products), chunk_errors)
                raise

        progress = self.batch_job_repository.increment_chunk_completed(
            job_id,
            message.chunk_index,
            processed_rows=processed_count,
            created_count=created_count,
            error_count=invalid_count,
            errors=chunk_errors
        )
        if progress is None:
            logger.info("Chunk %d of job %s was settled concurrently", message.chunk_index, job_id)
            return

        logger.info("Chunk %d/%d done for job %s: created=%d, errors=%d, progress=%d/%d",
                    message.chunk_index + 1, message.total_chunks, job_id, created_count,
                    invalid_count, progress.settled, progress.total_chunks)

        if progress.is_complete:
            self.finalize_batch_job(job_id)

    def send_to_dead_letter(self, body: dict, error: str, receive_count: int) -> None:
        """
        Route a message that exhausted its receive budget.

        Chunk messages go to the DLQ wrapped with the failure details. A
        trigger message that keeps failing fails its job directly.

        Raises:
            SQSException: If the DLQ send fails
        """
        message_type = body.get('type') if isinstance(body, dict) else None

        if message_type == CSV_CHUNK:
            chunk = ChunkMessage.model_validate(body)
            dead_letter = DeadLetterMessage(
                original_message=chunk,
                error=error,
                receive_count=receive_count,
                failed_at=datetime.now(timezone.utc)
            )
            self.sqs_repository.send_message(config.settings.csv_dlq_url, dead_letter.to_body())
        elif message_type == CSV_FILE_UPLOADED:
            self._fail_file_message(FileUploadedMessage.model_validate(body), error, receive_count)
        else:
            logger.warning("Dropping poison message of unknown type %r", message_type)

    def handle_dead_letter_message(self, body: dict, receive_count: int = 1) -> None:
        """
        Account for a permanently failed message.

        The chunk's whole row range is counted as processed and errored, the
        chunk is recorded as failed, the job is finalized if this was its last
        chunk, and the seller is told which rows were lost.
        """
        message = parse_dead_letter_message(body)
        if message is None:
            return

        if isinstance(message, FileUploadedMessage):
            self._fail_file_message(message, "Max receive count exceeded", receive_count)
            return

        if isinstance(message, DeadLetterMessage):
            chunk = message.original_message
            error = message.error
            attempts = message.receive_count
            failed_at = message.failed_at.isoformat()
        else:
            chunk = message
            error = "Max receive count exceeded"
            attempts = receive_count
            failed_at = datetime.now(timezone.utc).isoformat()

        logger.error(
            "Permanently failed chunk: job=%s, chunk=%d/%d, rows=%d-%d, receiveCount=%d, error=%r, failedAt=%s",
            chunk.job_id, chunk.chunk_index + 1, chunk.total_chunks, chunk.start_row, chunk.end_row,
            attempts, error, failed_at
        )

        job = self.batch_job_repository.get_by_id(chunk.job_id)
        if job is None:
            logger.warning("Job %s no longer exists, dropping dead letter", chunk.job_id)
            return
        if chunk.generation != job.retry_count:
            logger.warning("Dropping stale dead letter for job %s (generation %d, current %d)",
                           chunk.job_id, chunk.generation, job.retry_count)
            return

        row_count = chunk.row_count
        progress = self.batch_job_repository.increment_chunk_failed(
            chunk.job_id,
            chunk.chunk_index,
            processed_rows=row_count,
            created_count=0,
            error_count=row_count,
            errors=[RowError(chunk.start_row, f"Chunk permanently failed after {attempts} attempts: {error}")]
        )
        if progress is None:
            logger.info("Chunk %d of job %s was already settled", chunk.chunk_index, chunk.job_id)
            self.finalize_batch_job(chunk.job_id)
            return
        if progress.is_complete:
            self.finalize_batch_job(chunk.job_id)

        self.notification_service.create_notification(
            chunk.seller_id,
            BATCH_FAILED,
            "CSV chunk failed permanently",
            f"Rows {chunk.start_row}-{chunk.end_row} could not be processed after {attempts} attempts. "
            f"Error: {error}",
            {
                'jobId': chunk.job_id,
                'chunkIndex': chunk.chunk_index,
                'startRow': chunk.start_row,
                'endRow': chunk.end_row,
                'error': error,
                'receiveCount': attempts
            }
        )

    def finalize_batch_job(self, job_id: str) -> bool:
        """
        Move a job whose chunks have all settled into its terminal state.

        Safe to call from every completion path: it is a no-op until all
        chunks have settled, and the conditional transition out of
        processing lets exactly one caller clean up and notify.

        Returns:
            True if this call finalized the job

        Raises:
            DynamoDBException: If the job cannot be read or transitioned
        """
        job = self.batch_job_repository.get_by_id(job_id)
        if job is None:
            logger.warning("Cannot finalize missing job %s", job_id)
            return False
        if job.status != STATUS_PROCESSING:
            return False
        if not job.chunk_progress.is_complete:
            return False

        status = STATUS_FAILED if job.chunks_failed > 0 and job.created_count == 0 else STATUS_COMPLETED
        if not self.batch_job_repository.mark_terminal(job_id, status):
            logger.info("Job %s was finalized by another worker", job_id)
            return False

        job.status = status
        logger.info("Job %s %s: created=%d, errors=%d, chunks failed=%d/%d", job_id, status,
                    job.created_count, job.error_count, job.chunks_failed, job.total_chunks)

        self._cleanup_source(job)
        self._notify_outcome(job)
        return True

    def _validate_row_count(self, total_rows: int) -> None:
        max_rows = config.settings.max_bulk_upload_rows
        if total_rows <= 0:
            raise ValidationException("CSV file is empty or has no data rows")
        if total_rows > max_rows:
            raise ValidationException(f"Maximum {max_rows:,} rows per upload")

    def _record_failed_insert(
        self,
        message: ChunkMessage,
        db_error: Exception,
        processed_count: int,
        error_count: int,
        chunk_errors: List[RowError]
    ) -> None:
        error_text = getattr(db_error, 'message', None) or str(db_error) or "Database insert failed"
        chunk_errors.append(RowError(
            message.start_row,
            f"DB insert failed for chunk (rows {message.start_row}-{message.end_row}): {error_text}"
        ))
        logger.error("Job %s chunk %d: bulk insert failed: %s", message.job_id, message.chunk_index, error_text)

        try:
            progress = self.batch_job_repository.increment_chunk_failed(
                message.job_id,
                message.chunk_index,
                processed_rows=processed_count,
                created_count=0,
                error_count=error_count,
                errors=chunk_errors
            )
            if progress is not None and progress.is_complete:
                self.finalize_batch_job(message.job_id)
        except Exception:
            logger.exception("Failed to record failed chunk %d of job %s", message.chunk_index, message.job_id)

    def _fail_file_message(self, message: FileUploadedMessage, error: str, receive_count: int) -> None:
        job = self.batch_job_repository.get_by_id(message.job_id)
        if job is None or job.is_terminal:
            logger.warning("Dropping dead trigger for job %s", message.job_id)
            return
        self._fail_job(message.job_id, message.seller_id, message.file_name,
                       f"File processing failed after {receive_count} attempts: {error}")

    def _fail_job(self, job_id: str, seller_id: str, file_name: str, error: str) -> None:
        """Fail a job before any chunk exists and tell the seller."""
        logger.error("Job %s failed: %s", job_id, error)
        self.batch_job_repository.update(job_id, {
            'status': STATUS_FAILED,
            'total_chunks': 0,
            'errors': [RowError(0, error)]
        })
        self.notification_service.create_notification(
            seller_id,
            BATCH_FAILED,
            f'CSV upload "{file_name}" failed',
            f"Failed to process the uploaded file: {error}. You can retry from the batch upload page.",
            {'jobId': job_id, 'errorMessage': error}
        )

    def _cleanup_source(self, job: BatchJob) -> None:
        """Delete the source blob unless a failed job can still be retried."""
        if not job.object_key:
            return
        # retry_batch_job re-splits from this blob, so it must outlive a retryable failure
        if job.status == STATUS_FAILED and job.retry_count < job.max_retries:
            return
        try:
            self.s3_repository.delete_file(job.object_key)
            self.batch_job_repository.clear_object_key(job.job_id)
        except Exception as e:
            logger.warning("Failed to delete source file %s for job %s: %s", job.object_key, job.job_id, e)

    def _delete_source_quietly(self, object_key: str) -> None:
        try:
            self.s3_repository.delete_file(object_key)
        except Exception as e:
            logger.warning("Failed to delete orphaned upload %s: %s", object_key, e)

    def _notify_outcome(self, job: BatchJob) -> None:
        metadata = {
            'jobId': job.job_id,
            'createdCount': job.created_count,
            'errorCount': job.error_count,
            'chunksFailed': job.chunks_failed
        }

        if job.status == STATUS_FAILED:
            retry_hint = (" You can retry this job from the batch upload page."
                          if job.retry_count < job.max_retries else "")
            self.notification_service.create_notification(
                job.seller_id,
                BATCH_FAILED,
                f'CSV upload "{job.file_name}" failed',
                f"No products were created. {job.error_count:,} rows had errors and "
                f"{job.chunks_failed} of {job.total_chunks} chunks failed.{retry_hint}",
                metadata
            )
        elif job.error_count == 0 and job.chunks_failed == 0:
            self.notification_service.create_notification(
                job.seller_id,
                BATCH_COMPLETED,
                "CSV upload completed successfully",
                f"All {job.created_count:,} products from your upload have been created.",
                metadata
            )
        else:
            self.notification_service.create_notification(
                job.seller_id,
                BATCH_COMPLETED_WITH_ERRORS,
                f'CSV upload "{job.file_name}" completed with errors',
                f"{job.created_count:,} products created, {job.error_count:,} rows had errors. "
                "Check the batch job details for specifics.",
                metadata
            )

    def _to_response(self, job: BatchJob) -> BatchJobResponse:
        return BatchJobResponse(
            job_id=job.job_id,
            seller_id=job.seller_id,
            status=job.status,
            file_name=job.file_name,
            total_rows=job.total_rows,
            processed_rows=job.processed_rows,
            created_count=job.created_count,
            error_count=job.error_count,
            total_chunks=job.total_chunks,
            chunks_completed=job.chunks_completed,
            chunks_failed=job.chunks_failed,
            retry_count=job.retry_count,
            max_retries=job.max_retries,
            errors=[RowErrorResponse(row=e.row, error=e.error) for e in job.errors],
            created_at=job.created_at,
            updated_at=job.updated_at
        )
