"""Integration tests for the Notifications API endpoints."""

from datetime import UTC, datetime

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
from notifications.api.routes import router
from notifications.notification.errors import EmailDeliveryError
from hyre.domain import hyre
from notifications.notification.notification import NotificationStatus
from notifications.notification.payloads import OtpNotificationData


@pytest.fixture
def client(notification_service):
    app = FastAPI()

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        with hyre.domain_context():
            return await call_next(request)

    app.include_router(router)
    app.state.notification_service = notification_service
    return TestClient(app)


def _send_otp(service, email_address="ada@example.com"):
    data = OtpNotificationData(
        email=email_address,
        otp_code="123456",
        otp_type="login",
        expires_at=datetime(2025, 6, 2, 8, 10, tzinfo=UTC),
    )
    service.send_otp(data)


class TestQueries:
    def test_get_notification(self, client, notification_service, notification_repo):
        _send_otp(notification_service)
        [stored] = notification_repo.find_by_status(NotificationStatus.SENT)

        response = client.get(f"/notifications/{stored.id}")

        assert response.status_code == 200
        body = response.json()
        assert body["notification_type"] == "OTP_LOGIN"
        assert body["status"] == "SENT"
        assert body["attempt_count"] == 1

    def test_get_unknown_notification(self, client):
        response = client.get("/notifications/missing")
        assert response.status_code == 404

    def test_list_by_booking_empty(self, client):
        response = client.get("/notifications/booking/b-404")
        assert response.status_code == 200
        assert response.json() == {"notifications": [], "total": 0}


class TestMaintenance:
    def test_process_pending_with_nothing_to_do(self, client):
        response = client.post("/notifications/process-pending")

        assert response.status_code == 200
        assert response.json()["failed"] is False

    def test_retry_failed_reports_batch_failure(self, client, notification_service, email):
        email.configure(should_succeed=False)
        with pytest.raises(EmailDeliveryError):
            _send_otp(notification_service)

        response = client.post("/notifications/retry-failed")

        assert response.status_code == 200
        body = response.json()
        assert body["failed"] is True
        assert body["batch_type"] == "retry"
        assert body["failure_count"] == 1

    def test_retry_single_delivery_fails_again(self, client, notification_service, notification_repo, email):
        email.configure(should_succeed=False)
        with pytest.raises(EmailDeliveryError):
            _send_otp(notification_service)
        [failed] = notification_repo.find_failed()

        response = client.post(f"/notifications/{failed.id}/retry")
        assert response.status_code == 502

    def test_retry_single_succeeds(self, client, notification_service, notification_repo, email):
        email.configure(should_succeed=False)
        with pytest.raises(EmailDeliveryError):
            _send_otp(notification_service)
        email.configure(should_succeed=True)
        [failed] = notification_repo.find_failed()

        response = client.post(f"/notifications/{failed.id}/retry")

        assert response.status_code == 200
        assert response.json()["status"] == "SENT"

    def test_retry_sent_notification_conflicts(self, client, notification_service, notification_repo):
        _send_otp(notification_service)
        [sent] = notification_repo.find_by_status(NotificationStatus.SENT)

        response = client.post(f"/notifications/{sent.id}/retry")
        assert response.status_code == 409

    def test_retry_unknown(self, client):
        assert client.post("/notifications/missing/retry").status_code == 404

    def test_delivery_receipt(self, client, notification_service, notification_repo):
        _send_otp(notification_service)
        [sent] = notification_repo.find_by_status(NotificationStatus.SENT)

        response = client.post(f"/notifications/{sent.id}/delivered")

        assert response.status_code == 200
        assert response.json()["status"] == "DELIVERED"
        assert client.post(f"/notifications/{sent.id}/delivered").status_code == 409
