"""
Data Transfer Objects for seller notification endpoints.
"""
from datetime import datetime
from typing import Any, Dict
from pydantic import Field
from catalog_ingest.models.dto.batch_job_dto import CamelModel


class NotificationResponse(CamelModel):
    """Response model for a single notification."""
    notification_id: str = Field(..., description="Notification identifier")
    type: str = Field(..., description="batch_completed, batch_failed or batch_completed_with_errors")
    title: str
    message: str
    metadata: Dict[str, Any] = {}
    read: bool = False
    created_at: datetime


class NotificationListResponse(CamelModel):
    """Response model for a seller's notifications."""
    notifications: list[NotificationResponse]
    count: int


class UnreadCountResponse(CamelModel):
    """Response model for the unread notification counter."""
    unread: int
