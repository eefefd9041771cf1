"""
Seller notification API routes.
"""
from fastapi import APIRouter, Depends, Query, status
from catalog_ingest.core.dependencies import get_notification_service, get_seller_id
from catalog_ingest.models.dto.notification_dto import (
    NotificationListResponse,
    NotificationResponse,
    UnreadCountResponse
)
from catalog_ingest.models.notification import SellerNotification
from catalog_ingest.services.notification_service import NotificationService

router = APIRouter(prefix="/v1/api/notifications", tags=["Notifications"])


def _to_response(notification: SellerNotification) -> NotificationResponse:
    return NotificationResponse(
        notification_id=notification.notification_id,
        type=notification.type,
        title=notification.title,
        message=notification.message,
        metadata=notification.metadata,
        read=notification.read,
        created_at=notification.created_at
    )


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    limit: int = Query(default=50, ge=1, le=100, description="Maximum number of notifications to return"),
    notification_service: NotificationService = Depends(get_notification_service),
    seller_id: str = Depends(get_seller_id)
):
    """List the caller's notifications, newest first."""
    notifications = [_to_response(n) for n in notification_service.list_notifications(seller_id, limit)]
    return NotificationListResponse(notifications=notifications, count=len(notifications))


@router.get("/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(
    notification_service: NotificationService = Depends(get_notification_service),
    seller_id: str = Depends(get_seller_id)
):
    return UnreadCountResponse(unread=notification_service.get_unread_count(seller_id))


@router.post("/read-all")
async def mark_all_read(
    notification_service: NotificationService = Depends(get_notification_service),
    seller_id: str = Depends(get_seller_id)
):
    """Mark every unread notification of the caller as read."""
    return {"updated": notification_service.mark_all_read(seller_id)}


@router.post("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
async def mark_read(
    notification_id: str,
    notification_service: NotificationService = Depends(get_notification_service),
    seller_id: str = Depends(get_seller_id)
):
    notification_service.mark_read(seller_id, notification_id)
