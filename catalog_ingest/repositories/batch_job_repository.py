"""
Batch Job Repository for DynamoDB operations.
Persists BatchJob records and mutates their counters atomically.

Every counter change is a single UpdateItem with ADD and ReturnValues=ALL_NEW,
so concurrent chunk workers never lose updates and each one sees the totals
that include its own increment.
"""
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional
import boto3
from boto3.dynamodb.conditions import Key
from botocore.exceptions import ClientError
from catalog_ingest.core import config
from catalog_ingest.core.exceptions import DynamoDBException
from catalog_ingest.models.batch_job import (
    BatchJob,
    ChunkProgress,
    RowError,
    STATUS_FAILED,
    STATUS_PENDING,
    STATUS_PROCESSING
)

SELLER_INDEX = 'SellerIndex'


def _is_conditional_failure(error: ClientError) -> bool:
    return error.response.get('Error', {}).get('Code') == 'ConditionalCheckFailedException'


class BatchJobRepository:
    """Repository for batch job DynamoDB operations."""

    def __init__(self):
        self.dynamodb = boto3.resource('dynamodb', region_name=config.settings.aws_region)
        self.table = self.dynamodb.Table(config.settings.batch_jobs_table_name)

    def create(self, job: BatchJob) -> None:
        """
        Create new batch job record.

        Args:
            job: BatchJob domain model

        Raises:
            DynamoDBException: If create operation fails
        """
        try:
            item = {
                'job_id': job.job_id,
                'seller_id': job.seller_id,
                'status': job.status,
                'file_name': job.file_name,
                'created_at': job.created_at.isoformat(),
                'updated_at': job.updated_at.isoformat(),
                'total_rows': job.total_rows,
                'processed_rows': job.processed_rows,
                'created_count': job.created_count,
                'error_count': job.error_count,
                'total_chunks': job.total_chunks,
                'chunks_completed': job.chunks_completed,
                'chunks_failed': job.chunks_failed,
                'retry_count': job.retry_count,
                'max_retries': job.max_retries,
                'errors': [e.to_dict() for e in job.errors]
            }

            if job.object_key:
                item['object_key'] = job.object_key

            self.table.put_item(
                Item=item,
                ConditionExpression='attribute_not_exists(job_id)'
            )

        except ClientError as e:
            raise DynamoDBException(f"Failed to create batch job: {str(e)}") from e
        except Exception as e:
            raise DynamoDBException(f"Unexpected error creating batch job: {str(e)}") from e

    def delete(self, job_id: str) -> None:
        """
        Delete a batch job record.

        Raises:
            DynamoDBException: If delete operation fails
        """
        try:
            self.table.delete_item(Key={'job_id': job_id})
        except ClientError as e:
            raise DynamoDBException(f"Failed to delete batch job: {str(e)}") from e

    def get_by_id(self, job_id: str) -> Optional[BatchJob]:
        """
        Retrieve batch job by ID.

        Args:
            job_id: Job identifier

        Returns:
            BatchJob object or None if not found

        Raises:
            DynamoDBException: If query fails
        """
        try:
            response = self.table.get_item(Key={'job_id': job_id}, ConsistentRead=True)

            if 'Item' not in response:
                return None

            return self._item_to_batch_job(response['Item'])

        except ClientError as e:
            raise DynamoDBException(f"Failed to get batch job: {str(e)}") from e
        except Exception as e:
            raise DynamoDBException(f"Unexpected error getting batch job: {str(e)}") from e

    def get_for_seller(self, job_id: str, seller_id: str) -> Optional[BatchJob]:
        """Retrieve a batch job only if it belongs to the given seller."""
        job = self.get_by_id(job_id)
        if job is None or job.seller_id != seller_id:
            return None
        return job

    def list_recent_for_seller(self, seller_id: str, limit: int = 20) -> List[BatchJob]:
        """
        List a seller's most recent batch jobs, newest first.

        Raises:
            DynamoDBException: If query fails
        """
        try:
            response = self.table.query(
                IndexName=SELLER_INDEX,
                KeyConditionExpression=Key('seller_id').eq(seller_id),
                ScanIndexForward=False,
                Limit=limit
            )
            return [self._item_to_batch_job(item) for item in response.get('Items', [])]
        except ClientError as e:
            raise DynamoDBException(f"Failed to list batch jobs: {str(e)}") from e

    def update(self, job_id: str, updates: dict) -> None:
        """
        Update batch job fields.

        Args:
            job_id: Job identifier
            updates: Dictionary of fields to update

        Raises:
            DynamoDBException: If update operation fails
        """
        try:
            updates = {**updates, 'updated_at': self._now()}
            update_expression = "SET "
            expression_values = {}
            expression_names = {}

            for key, value in updates.items():
                update_expression += f"#{key} = :{key}, "
                expression_values[f":{key}"] = self._to_dynamo(value)
                expression_names[f"#{key}"] = key

            update_expression = update_expression.rstrip(", ")

            self.table.update_item(
                Key={'job_id': job_id},
                UpdateExpression=update_expression,
                ExpressionAttributeNames=expression_names,
                ExpressionAttributeValues=expression_values
            )

        except ClientError as e:
            raise DynamoDBException(f"Failed to update batch job: {str(e)}") from e
        except Exception as e:
            raise DynamoDBException(f"Unexpected error updating batch job: {str(e)}") from e

    def increment_chunk_completed(
        self,
        job_id: str,
        chunk_index: int,
        processed_rows: int = 0,
        created_count: int = 0,
        error_count: int = 0,
        errors: Optional[List[RowError]] = None
    ) -> Optional[ChunkProgress]:
        """
        Record a completed chunk and its counters in one atomic update.

        Returns:
            Chunk totals after the increment, or None if this chunk index was
            already settled in the current generation

        Raises:
            DynamoDBException: If update operation fails
        """
        return self._settle_chunk(job_id, chunk_index, 'chunks_completed',
                                  processed_rows, created_count, error_count, errors or [])

    def increment_chunk_failed(
        self,
        job_id: str,
        chunk_index: int,
        processed_rows: int = 0,
        created_count: int = 0,
        error_count: int = 0,
        errors: Optional[List[RowError]] = None
    ) -> Optional[ChunkProgress]:
        """
        Record a failed chunk and its counters in one atomic update.

        Returns:
            Chunk totals after the increment, or None if this chunk index was
            already settled in the current generation

        Raises:
            DynamoDBException: If update operation fails
        """
        return self._settle_chunk(job_id, chunk_index, 'chunks_failed',
                                  processed_rows, created_count, error_count, errors or [])

    def mark_processing(self, job_id: str) -> bool:
        """
        Claim a job for splitting.

        Returns:
            True if the job moved into processing, False if it was already
            split or has reached a terminal status

        Raises:
            DynamoDBException: If update operation fails
        """
        try:
            self.table.update_item(
                Key={'job_id': job_id},
                UpdateExpression="SET #status = :processing, #updated_at = :now",
                ConditionExpression="#status IN (:pending, :processing) AND total_chunks = :zero",
                ExpressionAttributeNames={'#status': 'status', '#updated_at': 'updated_at'},
                ExpressionAttributeValues={
                    ':processing': STATUS_PROCESSING,
                    ':pending': STATUS_PENDING,
                    ':zero': 0,
                    ':now': self._now()
                }
            )
            return True
        except ClientError as e:
            if _is_conditional_failure(e):
                return False
            raise DynamoDBException(f"Failed to claim batch job: {str(e)}") from e

    def mark_terminal(self, job_id: str, status: str) -> bool:
        """
        Move a job out of processing into a terminal status.

        Returns:
            True if this call performed the transition, False if the job was
            not in processing (another caller already finalized it)

        Raises:
            DynamoDBException: If update operation fails
        """
        try:
            self.table.update_item(
                Key={'job_id': job_id},
                UpdateExpression="SET #status = :status, #updated_at = :now",
                ConditionExpression="#status = :processing",
                ExpressionAttributeNames={'#status': 'status', '#updated_at': 'updated_at'},
                ExpressionAttributeValues={
                    ':status': status,
                    ':processing': STATUS_PROCESSING,
                    ':now': self._now()
                }
            )
            return True
        except ClientError as e:
            if _is_conditional_failure(e):
                return False
            raise DynamoDBException(f"Failed to finalize batch job: {str(e)}") from e

    def reset_for_retry(self, job_id: str) -> bool:
        """
        Reset progress and chunk counters of a failed job and re-enter pending.

        Returns:
            True if the job was reset, False if it was no longer failed

        Raises:
            DynamoDBException: If update operation fails
        """
        try:
            self.table.update_item(
                Key={'job_id': job_id},
                UpdateExpression=(
                    "SET #status = :pending, processed_rows = :zero, created_count = :zero, "
                    "error_count = :zero, #errors = :empty, chunks_completed = :zero, "
                    "chunks_failed = :zero, total_chunks = :zero, "
                    "retry_count = retry_count + :one, #updated_at = :now "
                    "REMOVE settled_chunks"
                ),
                ConditionExpression="#status = :failed",
                ExpressionAttributeNames={
                    '#status': 'status',
                    '#errors': 'errors',
                    '#updated_at': 'updated_at'
                },
                ExpressionAttributeValues={
                    ':pending': STATUS_PENDING,
                    ':failed': STATUS_FAILED,
                    ':zero': 0,
                    ':one': 1,
                    ':empty': [],
                    ':now': self._now()
                }
            )
            return True
        except ClientError as e:
            if _is_conditional_failure(e):
                return False
            raise DynamoDBException(f"Failed to reset batch job: {str(e)}") from e

    def clear_object_key(self, job_id: str) -> None:
        """
        Drop the source blob pointer once the blob is gone.

        Raises:
            DynamoDBException: If update operation fails
        """
        try:
            self.table.update_item(
                Key={'job_id': job_id},
                UpdateExpression="SET #updated_at = :now REMOVE object_key",
                ExpressionAttributeNames={'#updated_at': 'updated_at'},
                ExpressionAttributeValues={':now': self._now()}
            )
        except ClientError as e:
            raise DynamoDBException(f"Failed to clear object key: {str(e)}") from e

    def _settle_chunk(
        self,
        job_id: str,
        chunk_index: int,
        counter: str,
        processed_rows: int,
        created_count: int,
        error_count: int,
        errors: List[RowError]
    ) -> Optional[ChunkProgress]:
        try:
            response = self.table.update_item(
                Key={'job_id': job_id},
                UpdateExpression=(
                    "SET #errors = list_append(if_not_exists(#errors, :empty), :errors), #updated_at = :now "
                    "ADD processed_rows :processed, created_count :created, error_count :error_count, "
                    f"{counter} :one, settled_chunks :chunk_set"
                ),
                ConditionExpression="attribute_exists(job_id) AND NOT contains(settled_chunks, :chunk)",
                ExpressionAttributeNames={'#errors': 'errors', '#updated_at': 'updated_at'},
                ExpressionAttributeValues={
                    ':empty': [],
                    ':errors': [e.to_dict() for e in errors],
                    ':now': self._now(),
                    ':processed': processed_rows,
                    ':created': created_count,
                    ':error_count': error_count,
                    ':one': 1,
                    ':chunk': chunk_index,
                    ':chunk_set': {chunk_index}
                },
                ReturnValues='ALL_NEW'
            )
        except ClientError as e:
            if _is_conditional_failure(e):
                return None
            raise DynamoDBException(f"Failed to update chunk counters: {str(e)}") from e

        attributes = response['Attributes']
        return ChunkProgress(
            total_chunks=int(attributes.get('total_chunks', 0)),
            chunks_completed=int(attributes.get('chunks_completed', 0)),
            chunks_failed=int(attributes.get('chunks_failed', 0))
        )

    def _now(self) -> str:
        return datetime.now(timezone.utc).isoformat()

    def _to_dynamo(self, value):
        """Convert domain values to types boto3 can serialize."""
        if isinstance(value, float):
            return Decimal(str(value))
        if isinstance(value, datetime):
            return value.isoformat()
        if isinstance(value, list):
            return [v.to_dict() if isinstance(v, RowError) else v for v in value]
        return value

    def _item_to_batch_job(self, item: dict) -> BatchJob:
        """Convert DynamoDB item to BatchJob domain model."""
        return BatchJob(
            job_id=item['job_id'],
            seller_id=item['seller_id'],
            status=item['status'],
            file_name=item['file_name'],
            object_key=item.get('object_key'),
            created_at=datetime.fromisoformat(item['created_at']),
            updated_at=datetime.fromisoformat(item['updated_at']) if item.get('updated_at') else None,
            total_rows=int(item.get('total_rows', 0)),
            processed_rows=int(item.get('processed_rows', 0)),
            created_count=int(item.get('created_count', 0)),
            error_count=int(item.get('error_count', 0)),
            total_chunks=int(item.get('total_chunks', 0)),
            chunks_completed=int(item.get('chunks_completed', 0)),
            chunks_failed=int(item.get('chunks_failed', 0)),
            retry_count=int(item.get('retry_count', 0)),
            max_retries=int(item.get('max_retries', 3)),
            errors=[RowError(int(e['row']), e['error']) for e in item.get('errors', [])],
            settled_chunks={int(i) for i in item.get('settled_chunks', set())}
        )
