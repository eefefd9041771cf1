"""
Notification Service.
Emits seller notifications for batch outcomes and serves them back to the seller.
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional
from catalog_ingest.core.exceptions import NotificationNotFoundException, ValidationException
from catalog_ingest.models.notification import NOTIFICATION_TYPES, SellerNotification
from catalog_ingest.repositories.notification_repository import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationService:
    """Service for seller notifications."""

    def __init__(self, notification_repository: NotificationRepository = None):
        self.notification_repository = notification_repository or NotificationRepository()

    def create_notification(
        self,
        seller_id: str,
        notification_type: str,
        title: str,
        message: str,
        metadata: Optional[dict] = None
    ) -> Optional[SellerNotification]:
        """
        Record a notification for a seller.

        Never raises: a lost notification must not fail the pipeline step
        that produced it.

        Returns:
            The stored notification, or None if it could not be stored
        """
        if notification_type not in NOTIFICATION_TYPES:
            logger.error("Refusing notification with unknown type %r for seller %s", notification_type, seller_id)
            return None

        notification = SellerNotification(
            notification_id=str(uuid.uuid4()),
            seller_id=seller_id,
            type=notification_type,
            title=title,
            message=message,
            metadata=metadata or {},
            created_at=datetime.now(timezone.utc)
        )
        try:
            self.notification_repository.create(notification)
        except Exception:
            logger.exception("Failed to create %s notification for seller %s", notification_type, seller_id)
            return None

        logger.info("Notified seller %s: %s", seller_id, title)
        return notification

    def list_notifications(self, seller_id: str, limit: int = 50) -> List[SellerNotification]:
        if limit < 1:
            raise ValidationException("limit must be positive")
        return self.notification_repository.list_for_seller(seller_id, limit)

    def get_unread_count(self, seller_id: str) -> int:
        return self.notification_repository.count_unread(seller_id)

    def mark_read(self, seller_id: str, notification_id: str) -> None:
        """
        Raises:
            NotificationNotFoundException: If the notification is not the seller's
        """
        if not self.notification_repository.mark_read(notification_id, seller_id):
            raise NotificationNotFoundException(f"Notification '{notification_id}' not found")

    def mark_all_read(self, seller_id: str) -> int:
        return self.notification_repository.mark_all_read(seller_id)
