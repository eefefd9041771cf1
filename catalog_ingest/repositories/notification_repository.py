"""
Notification Repository for DynamoDB operations.
Stores seller notifications emitted by the ingestion pipeline.
"""
from datetime import datetime
from decimal import Decimal
from typing import List
import boto3
from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import ClientError
from catalog_ingest.core import config
from catalog_ingest.core.exceptions import DynamoDBException
from catalog_ingest.models.notification import SellerNotification

SELLER_INDEX = 'SellerIndex'


def _from_dynamo(value):
    """Turn Decimals returned by boto3 back into ints and floats."""
    if isinstance(value, dict):
        return {k: _from_dynamo(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_from_dynamo(v) for v in value]
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    return value


class NotificationRepository:
    """Repository for seller notification DynamoDB operations."""

    def __init__(self):
        self.dynamodb = boto3.resource('dynamodb', region_name=config.settings.aws_region)
        self.table = self.dynamodb.Table(config.settings.notifications_table_name)

    def create(self, notification: SellerNotification) -> None:
        """
        Create new notification record.

        Args:
            notification: SellerNotification domain model

        Raises:
            DynamoDBException: If create operation fails
        """
        try:
            self.table.put_item(Item={
                'notification_id': notification.notification_id,
                'seller_id': notification.seller_id,
                'type': notification.type,
                'title': notification.title,
                'message': notification.message,
                'metadata': notification.metadata,
                'read': notification.read,
                'created_at': notification.created_at.isoformat()
            })
        except ClientError as e:
            raise DynamoDBException(f"Failed to create notification: {str(e)}") from e
        except Exception as e:
            raise DynamoDBException(f"Unexpected error creating notification: {str(e)}") from e

    def list_for_seller(self, seller_id: str, limit: int = 50) -> List[SellerNotification]:
        """
        List a seller's notifications, newest first.

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
            return [self._item_to_notification(item) for item in response.get('Items', [])]
        except ClientError as e:
            raise DynamoDBException(f"Failed to list notifications: {str(e)}") from e

    def count_unread(self, seller_id: str) -> int:
        """
        Count a seller's unread notifications.

        Raises:
            DynamoDBException: If query fails
        """
        try:
            count = 0
            query_kwargs = {
                'IndexName': SELLER_INDEX,
                'KeyConditionExpression': Key('seller_id').eq(seller_id),
                'FilterExpression': Attr('read').eq(False),
                'Select': 'COUNT'
            }
            while True:
                response = self.table.query(**query_kwargs)
                count += response.get('Count', 0)
                if 'LastEvaluatedKey' not in response:
                    return count
                query_kwargs['ExclusiveStartKey'] = response['LastEvaluatedKey']
        except ClientError as e:
            raise DynamoDBException(f"Failed to count notifications: {str(e)}") from e

    def mark_read(self, notification_id: str, seller_id: str) -> bool:
        """
        Mark one notification read.

        Returns:
            True if the notification exists and belongs to the seller

        Raises:
            DynamoDBException: If update operation fails
        """
        try:
            self.table.update_item(
                Key={'notification_id': notification_id},
                UpdateExpression="SET #read = :true",
                ConditionExpression="seller_id = :seller_id",
                ExpressionAttributeNames={'#read': 'read'},
                ExpressionAttributeValues={':true': True, ':seller_id': seller_id}
            )
            return True
        except ClientError as e:
            if e.response.get('Error', {}).get('Code') == 'ConditionalCheckFailedException':
                return False
            raise DynamoDBException(f"Failed to mark notification read: {str(e)}") from e

    def mark_all_read(self, seller_id: str) -> int:
        """
        Mark every unread notification of a seller read.

        Returns:
            Number of notifications updated

        Raises:
            DynamoDBException: If query or update fails
        """
        unread = [n for n in self.list_for_seller(seller_id, limit=1000) if not n.read]
        for notification in unread:
            self.mark_read(notification.notification_id, seller_id)
        return len(unread)

    def _item_to_notification(self, item: dict) -> SellerNotification:
        """Convert DynamoDB item to SellerNotification domain model."""
        return SellerNotification(
            notification_id=item['notification_id'],
            seller_id=item['seller_id'],
            type=item['type'],
            title=item['title'],
            message=item['message'],
            metadata=_from_dynamo(item.get('metadata') or {}),
            read=bool(item.get('read', False)),
            created_at=datetime.fromisoformat(item['created_at'])
        )
