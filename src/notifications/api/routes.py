"""FastAPI routes for the Notifications domain.

Thin adapters over ``NotificationService``; the service instance is read
from ``app.state.notification_service``.
"""

from fastapi import APIRouter, Depends, HTTPException, Request
from protean.exceptions import ObjectNotFoundError, ValidationError

from notifications.api.schemas import (
    BatchResultResponse,
    NotificationListResponse,
    NotificationResponse,
)
from notifications.notification.errors import BatchProcessingError, NotificationError, RetryExhaustedError
from notifications.notification.service import NotificationService

router = APIRouter(prefix="/notifications", tags=["notifications"])


def get_notification_service(request: Request) -> NotificationService:
    return request.app.state.notification_service


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------
@router.get("/booking/{booking_id}", response_model=NotificationListResponse)
async def list_booking_notifications(
    booking_id: str,
    service: NotificationService = Depends(get_notification_service),
) -> NotificationListResponse:
    """List every notification correlated with a booking."""
    notifications = service.repository.find_by_booking_id(booking_id)
    return NotificationListResponse(
        notifications=[NotificationResponse.from_notification(n) for n in notifications],
        total=len(notifications),
    )


@router.get("/{notification_id}", response_model=NotificationResponse)
async def get_notification(
    notification_id: str,
    service: NotificationService = Depends(get_notification_service),
) -> NotificationResponse:
    notification = service.repository.find_by_id(notification_id)
    if notification is None:
        raise HTTPException(status_code=404, detail=f"Notification {notification_id} not found")
    return NotificationResponse.from_notification(notification)


# ---------------------------------------------------------------------------
# Maintenance
# ---------------------------------------------------------------------------
@router.post("/process-pending", response_model=BatchResultResponse)
async def process_pending(
    service: NotificationService = Depends(get_notification_service),
) -> BatchResultResponse:
    """Deliver every PENDING notification; failures are reported, not raised."""
    try:
        message = service.process_pending_notifications()
    except BatchProcessingError as e:
        return _batch_response(e)
    return BatchResultResponse(batch_type="pending", message=message)


@router.post("/retry-failed", response_model=BatchResultResponse)
async def retry_failed(
    service: NotificationService = Depends(get_notification_service),
) -> BatchResultResponse:
    try:
        message = service.retry_failed_notifications()
    except BatchProcessingError as e:
        return _batch_response(e)
    return BatchResultResponse(batch_type="retry", message=message)


@router.post("/{notification_id}/retry", response_model=NotificationResponse)
async def retry_notification(
    notification_id: str,
    service: NotificationService = Depends(get_notification_service),
) -> NotificationResponse:
    try:
        notification = service.retry_notification(notification_id)
    except ObjectNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except RetryExhaustedError as e:
        raise HTTPException(status_code=409, detail=e.message)
    except NotificationError as e:
        raise HTTPException(status_code=502, detail=e.message)
    return NotificationResponse.from_notification(notification)


@router.post("/{notification_id}/delivered", response_model=NotificationResponse)
async def mark_delivered(
    notification_id: str,
    service: NotificationService = Depends(get_notification_service),
) -> NotificationResponse:
    """Delivery receipt callback from a channel provider."""
    try:
        notification = service.mark_delivered(notification_id)
    except ObjectNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=409, detail=e.messages)
    return NotificationResponse.from_notification(notification)


def _batch_response(error: BatchProcessingError) -> BatchResultResponse:
    return BatchResultResponse(
        batch_type=error.batch_type,
        failed=True,
        total=error.total,
        success_count=error.success_count,
        failure_count=error.failure_count,
        errors=error.errors,
        message=error.message,
    )
