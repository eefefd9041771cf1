"""
Seller notification domain model.
"""
from datetime import datetime
from typing import Optional

BATCH_COMPLETED = "batch_completed"
BATCH_FAILED = "batch_failed"
BATCH_COMPLETED_WITH_ERRORS = "batch_completed_with_errors"

NOTIFICATION_TYPES = {BATCH_COMPLETED, BATCH_FAILED, BATCH_COMPLETED_WITH_ERRORS}


class SellerNotification:
    """A message telling a seller how a batch upload ended."""

    def __init__(
        self,
        notification_id: str,
        seller_id: str,
        type: str,
        title: str,
        message: str,
        created_at: datetime,
        metadata: Optional[dict] = None,
        read: bool = False
    ):
        self.notification_id = notification_id
        self.seller_id = seller_id
        self.type = type
        self.title = title
        self.message = message
        self.created_at = created_at
        self.metadata = metadata or {}
        self.read = read

    def __repr__(self):
        return f"SellerNotification(type={self.type}, seller_id={self.seller_id}, read={self.read})"
