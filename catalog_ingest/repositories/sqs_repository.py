"""
SQS Repository for queue transport.
Send, batch-send, receive, delete and decode messages on the CSV processing
queue and its dead-letter queue. No business logic lives here.
"""
import json
from typing import Any, List
import boto3
from botocore.exceptions import ClientError
from catalog_ingest.core import config
from catalog_ingest.core.exceptions import SQSException

# SQS limit for SendMessageBatch and ReceiveMessage
MAX_BATCH_ENTRIES = 10


class SQSRepository:
    """Repository for SQS operations."""

    def __init__(self):
        self.sqs_client = boto3.client('sqs', region_name=config.settings.aws_region)

    def send_message(self, queue_url: str, body: Any) -> str:
        """
        Send a single JSON message.

        Args:
            queue_url: Target queue URL
            body: JSON-serializable payload

        Returns:
            The SQS message id

        Raises:
            SQSException: If the send fails
        """
        try:
            response = self.sqs_client.send_message(
                QueueUrl=queue_url,
                MessageBody=json.dumps(body)
            )
            return response['MessageId']
        except ClientError as e:
            raise SQSException(f"Failed to send message: {str(e)}") from e

    def send_message_batch(self, queue_url: str, bodies: List[Any]) -> int:
        """
        Send many JSON messages, one SendMessageBatch call per 10 entries.

        Args:
            queue_url: Target queue URL
            bodies: JSON-serializable payloads

        Returns:
            Number of messages sent

        Raises:
            SQSException: If a call fails or SQS rejects any entry
        """
        sent = 0
        for offset in range(0, len(bodies), MAX_BATCH_ENTRIES):
            batch = bodies[offset:offset + MAX_BATCH_ENTRIES]
            entries = [
                {'Id': f"msg-{offset + idx}", 'MessageBody': json.dumps(body)}
                for idx, body in enumerate(batch)
            ]

            try:
                response = self.sqs_client.send_message_batch(QueueUrl=queue_url, Entries=entries)
            except ClientError as e:
                raise SQSException(f"Failed to send message batch: {str(e)}") from e

            failed = response.get('Failed', [])
            if failed:
                ids = ", ".join(entry['Id'] for entry in failed)
                raise SQSException(f"SQS rejected {len(failed)} batch entries: {ids}")

            sent += len(batch)

        return sent

    def receive_messages(
        self,
        queue_url: str,
        max_messages: int = 10,
        wait_time_seconds: int = 20,
        visibility_timeout: int = 120
    ) -> List[dict]:
        """
        Long-poll for messages, including their ApproximateReceiveCount.

        Raises:
            SQSException: If the receive fails
        """
        try:
            response = self.sqs_client.receive_message(
                QueueUrl=queue_url,
                MaxNumberOfMessages=min(max_messages, MAX_BATCH_ENTRIES),
                WaitTimeSeconds=wait_time_seconds,
                VisibilityTimeout=visibility_timeout,
                AttributeNames=['ApproximateReceiveCount']
            )
            return response.get('Messages', [])
        except ClientError as e:
            raise SQSException(f"Failed to receive messages: {str(e)}") from e

    def delete_message(self, queue_url: str, receipt_handle: str) -> None:
        """
        Acknowledge a message.

        Raises:
            SQSException: If the delete fails
        """
        try:
            self.sqs_client.delete_message(QueueUrl=queue_url, ReceiptHandle=receipt_handle)
        except ClientError as e:
            raise SQSException(f"Failed to delete message: {str(e)}") from e

    @staticmethod
    def parse_message_body(message: dict) -> Any:
        """
        Decode a received message's JSON body.
        Accepts both ReceiveMessage results and Lambda SQS event records.

        Raises:
            SQSException: If the message has no body or it is not JSON
        """
        body = message.get('Body') or message.get('body')
        if not body:
            raise SQSException("SQS message has no body")
        try:
            return json.loads(body)
        except json.JSONDecodeError as e:
            raise SQSException(f"SQS message body is not valid JSON: {str(e)}") from e

    @staticmethod
    def get_receive_count(message: dict) -> int:
        """Read ApproximateReceiveCount, defaulting to 1."""
        attributes = message.get('Attributes') or message.get('attributes') or {}
        return int(attributes.get('ApproximateReceiveCount', '1'))
