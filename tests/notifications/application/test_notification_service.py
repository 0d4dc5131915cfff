"""Tests for NotificationService: build, persist, deliver and maintain."""

from datetime import UTC, datetime

import pytest
from notifications.channel.fake_email import FakeEmailAdapter
from notifications.channel.messages import DeliveryResult
from notifications.notification.errors import (
    BatchProcessingError,
    EmailDeliveryError,
    RetryExhaustedError,
    SmsDeliveryError,
)
from notifications.notification.factory import NotificationFactory
from notifications.notification.notification import NotificationStatus, NotificationType
from notifications.notification.payloads import (
    BookingLegReminderData,
    BookingStatusUpdateData,
    OtpNotificationData,
    PayoutNotificationData,
)
from notifications.notification.service import NO_CONTACT_SUMMARY, NotificationService
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain


def _leg_data(**overrides):
    defaults = {
        "booking_id": "b-1",
        "booking_leg_id": "leg-1",
        "booking_reference": "BK-ABC12345",
        "customer_id": "cust-1",
        "customer_name": "Ada Obi",
        "customer_email": "ada@example.com",
        "customer_phone": "+2348012345678",
        "chauffeur_id": "chauf-1",
        "chauffeur_name": "Tunde Bello",
        "chauffeur_email": "tunde@example.com",
        "car_name": "Toyota Camry 2022",
        "leg_start_time": "2025-06-02 08:30 UTC",
        "leg_end_time": "2025-06-02 16:30 UTC",
        "pickup_location": "Lekki",
        "return_location": "Airport",
    }
    defaults.update(overrides)
    return BookingLegReminderData(**defaults)


def _otp_data(email="ada@example.com"):
    return OtpNotificationData(
        email=email,
        otp_code="123456",
        otp_type="login",
        expires_at=datetime(2025, 6, 2, 8, 10, tzinfo=UTC),
    )


def _store_pending(repo, emails=("ada@example.com",)):
    """Persist PENDING notifications without delivering them."""
    factory = NotificationFactory()
    stored = []
    for address in emails:
        notification = factory.create_otp_notification(_otp_data(address))
        repo.add(notification)
        stored.append(notification)
    return stored


def _stored_event_types() -> list[str]:
    messages = current_domain.event_store.store.read("hyre::notification")
    return [m.metadata.headers.type for m in messages if m.metadata and m.metadata.headers]


class _BouncingEmailAdapter(FakeEmailAdapter):
    """Rejects every message to one address and delivers the rest."""

    def __init__(self, bounce_to: str):
        super().__init__()
        self.bounce_to = bounce_to

    def send_email(self, request):
        if request.to == self.bounce_to:
            return DeliveryResult(success=False, error="Mailbox unavailable")
        return super().send_email(request)


class TestLegReminders:
    def test_sends_to_both_participants(self, notification_service, notification_repo, email, sms):
        summary = notification_service.send_booking_leg_start_reminders(_leg_data())

        assert summary == "Sent 2 booking leg start reminders"
        assert [e["to"] for e in email.sent_emails] == ["ada@example.com", "tunde@example.com"]
        assert [m["to"] for m in sms.sent_messages] == ["+2348012345678"]
        stored = notification_repo.find_by_booking_leg_id("leg-1")
        assert {n.status for n in stored} == {NotificationStatus.SENT.value}
        assert all(n.attempt_count == 1 for n in stored)

    def test_placeholders_filled_in_delivered_message(self, notification_service, email):
        notification_service.send_booking_leg_end_reminders(_leg_data())

        sent = email.sent_emails[0]
        assert "{{" not in sent["subject"]
        assert "{{" not in sent["text_content"]
        assert "Dear Ada Obi," in sent["text_content"]
        assert "<p>Dear Ada Obi,</p>" in sent["html_content"]

    def test_no_reachable_participant(self, notification_service, email):
        data = _leg_data(customer_email=None, customer_phone=None, chauffeur_email=None)
        summary = notification_service.send_booking_leg_start_reminders(data)

        assert summary == "Sent 0 booking leg start reminders"
        assert email.sent_emails == []

    def test_delivery_failure_propagates(self, notification_service, notification_repo, email):
        email.configure(should_succeed=False, failure_reason="Mailbox full")

        with pytest.raises(EmailDeliveryError, match="Mailbox full"):
            notification_service.send_booking_leg_start_reminders(_leg_data())

        failed = notification_repo.find_failed()
        assert len(failed) == 1
        assert failed[0].attempt_count == 1
        assert "Mailbox full" in failed[0].failure_reason


class TestSingleSends:
    def test_status_update_without_contact_skips(self, notification_service, notification_repo):
        data = BookingStatusUpdateData(
            booking_id="b-1",
            booking_reference="BK-1",
            status="CONFIRMED",
            recipient_id="cust-1",
            recipient_name="Ada",
            customer_name="Ada",
            car_name="Camry",
            start_date="s",
            end_date="e",
            pickup_location="p",
            return_location="r",
        )
        assert notification_service.send_booking_status_update(data) == NO_CONTACT_SUMMARY
        assert notification_repo.find_by_booking_id("b-1") == []

    def test_otp_is_email_only(self, notification_service, email, sms):
        assert notification_service.send_otp(_otp_data()) == "Sent OTP notification"
        assert len(email.sent_emails) == 1
        assert sms.sent_messages == []

    def test_payout_summary_names_outcome(self, notification_service):
        data = PayoutNotificationData(
            outcome="failed",
            payout_id="po-1",
            fleet_owner_id="owner-1",
            fleet_owner_name="Kemi",
            fleet_owner_phone="+2348011112222",
            amount=1000,
            failure_reason="Bank offline",
        )
        assert notification_service.send_payout_notification(data) == "Sent payout failed notification"


class TestDelivery:
    def test_transport_exception_wrapped(self, notification_service, email):
        email.configure(should_raise=True, failure_reason="Connection reset")
        with pytest.raises(EmailDeliveryError) as exc_info:
            notification_service.send_otp(_otp_data())
        assert exc_info.value.service_error == "Connection reset"
        assert isinstance(exc_info.value.__cause__, ConnectionError)

    def test_sms_failure_after_email_marks_failed(self, notification_service, notification_repo, email, sms):
        sms.configure(should_succeed=False)
        data = _leg_data(chauffeur_email=None)

        with pytest.raises(SmsDeliveryError):
            notification_service.send_booking_leg_start_reminders(data)

        assert len(email.sent_emails) == 1
        [failed] = notification_repo.find_failed()
        assert failed.recipient.id == "cust-1"

    def test_events_stored_on_save(self, notification_service, email):
        notification_service.send_otp(_otp_data())
        email.configure(should_succeed=False)
        with pytest.raises(EmailDeliveryError):
            notification_service.send_otp(_otp_data())

        types = _stored_event_types()
        assert types.count("Hyre.NotificationCreated.v1") == 2
        assert "Hyre.NotificationSent.v1" in types
        assert "Hyre.NotificationFailed.v1" in types


class TestProcessPending:
    def test_delivers_all_pending(self, notification_service, notification_repo, email):
        _store_pending(notification_repo, emails=("ada@example.com", "tunde@example.com"))

        summary = notification_service.process_pending_notifications()

        assert summary == "Processed 2 pending notifications: 2 successful, 0 failed"
        assert len(email.sent_emails) == 2
        assert notification_repo.find_pending() == []

    def test_nothing_pending(self, notification_service):
        summary = notification_service.process_pending_notifications()
        assert summary == "Processed 0 pending notifications: 0 successful, 0 failed"

    def test_failures_reported_together(self, notification_service, notification_repo, email):
        _store_pending(notification_repo, emails=("ada@example.com", "tunde@example.com"))
        email.configure(should_succeed=False)

        with pytest.raises(BatchProcessingError) as exc_info:
            notification_service.process_pending_notifications()

        error = exc_info.value
        assert error.batch_type == "pending"
        assert (error.total, error.success_count, error.failure_count) == (2, 0, 2)
        assert len(error.errors) == 2
        assert len(notification_repo.find_failed()) == 2

    def test_mixed_batch_delivers_the_rest(self, notification_repo, sms):
        service = NotificationService(_BouncingEmailAdapter("kemi@example.com"), sms)
        stored = _store_pending(
            notification_repo,
            emails=("ada@example.com", "kemi@example.com", "tunde@example.com"),
        )
        bounced_id = str(stored[1].id)

        with pytest.raises(BatchProcessingError) as exc_info:
            service.process_pending_notifications()

        error = exc_info.value
        assert (error.total, error.success_count, error.failure_count) == (3, 2, 1)
        assert len(error.errors) == 1
        assert error.errors[0].startswith(bounced_id)

        assert len(notification_repo.find_by_status(NotificationStatus.SENT)) == 2
        [failed] = notification_repo.find_failed()
        assert str(failed.id) == bounced_id
        assert failed.attempt_count == 1
        assert "Mailbox unavailable" in failed.failure_reason
        assert notification_repo.find_pending() == []


class TestRetry:
    def test_retry_failed_notifications(self, notification_service, notification_repo, email):
        email.configure(should_succeed=False)
        with pytest.raises(EmailDeliveryError):
            notification_service.send_otp(_otp_data())
        email.configure(should_succeed=True)

        summary = notification_service.retry_failed_notifications()

        assert summary == "Retried 1 failed notifications"
        [sent] = notification_repo.find_by_status(NotificationStatus.SENT)
        assert sent.attempt_count == 2
        assert sent.failure_reason is None

    def test_retry_failed_batch_error(self, notification_service, email):
        email.configure(should_succeed=False)
        with pytest.raises(EmailDeliveryError):
            notification_service.send_otp(_otp_data())

        with pytest.raises(BatchProcessingError) as exc_info:
            notification_service.retry_failed_notifications()
        assert exc_info.value.batch_type == "retry"

    def test_retry_unknown_notification(self, notification_service):
        with pytest.raises(ObjectNotFoundError):
            notification_service.retry_notification("missing")

    def test_retry_stops_after_three_attempts(self, notification_service, notification_repo, email):
        email.configure(should_succeed=False)
        with pytest.raises(EmailDeliveryError):
            notification_service.send_otp(_otp_data())
        [failed] = notification_repo.find_failed()

        for _ in range(2):
            with pytest.raises(EmailDeliveryError):
                notification_service.retry_notification(failed.id)

        with pytest.raises(RetryExhaustedError) as exc_info:
            notification_service.retry_notification(failed.id)
        assert exc_info.value.reason == RetryExhaustedError.MAX_ATTEMPTS_EXCEEDED
        assert notification_repo.find_to_retry() == []


class TestMarkDelivered:
    def test_sent_notification_becomes_delivered(self, notification_service, notification_repo):
        notification_service.send_otp(_otp_data())
        [sent] = notification_repo.find_by_status(NotificationStatus.SENT)

        delivered = notification_service.mark_delivered(sent.id)

        assert delivered.status == NotificationStatus.DELIVERED.value
        assert delivered.delivered_at is not None

    def test_pending_cannot_be_delivered(self, notification_service, notification_repo):
        [pending] = _store_pending(notification_repo)
        with pytest.raises(ValidationError):
            notification_service.mark_delivered(pending.id)

    def test_repository_queries_by_type(self, notification_service, notification_repo):
        notification_service.send_otp(_otp_data())
        assert len(notification_repo.find_by_type(NotificationType.OTP_LOGIN)) == 1
