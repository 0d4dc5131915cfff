"""Tests for the booking sagas: status notifications, alerts and payouts."""

from datetime import UTC, datetime

import pytest
from booking.booking.booking import BookingStatus
from booking.booking.events import (
    BookingActivated,
    BookingCancelled,
    BookingChauffeurAssigned,
    BookingChauffeurUnassigned,
    BookingCompleted,
    BookingPaymentConfirmed,
)
from orchestration.booking import (
    BookingActivationOrchestrator,
    BookingCancellationOrchestrator,
    BookingCompletionOrchestrator,
    ChauffeurAssignmentOrchestrator,
    ChauffeurUnassignmentOrchestrator,
    PaymentConfirmationOrchestrator,
    PaymentVerificationOrchestrator,
)
from orchestration.ports import CarSummary, UserProfile
from shared.events.payments import PaymentVerified

AT = datetime(2025, 6, 2, 9, 0, tzinfo=UTC)

pytestmark = pytest.mark.usefixtures("parties")


def _recipients(email):
    return sorted(e["to"] for e in email.sent_emails)


def _subjects(email):
    return {e["subject"] for e in email.sent_emails}


def _completed(booking):
    return BookingCompleted(booking_id=booking.id, customer_id="cust-1", completed_at=AT)


class TestActivation:
    def test_notifies_customer(self, email, save_booking):
        booking = save_booking("ACTIVE")

        BookingActivationOrchestrator().on_booking_activated(
            BookingActivated(booking_id=booking.id, customer_id="cust-1", activated_at=AT)
        )

        assert _recipients(email) == ["ada@example.com"]
        assert "ACTIVE" in email.sent_emails[0]["text_content"]

    def test_missing_booking_is_dropped(self, email):
        BookingActivationOrchestrator().on_booking_activated(
            BookingActivated(booking_id="gone", customer_id="cust-1", activated_at=AT)
        )
        assert email.sent_emails == []

    def test_unknown_customer_skipped(self, email, save_booking):
        booking = save_booking("ACTIVE", customer_id="ghost")

        BookingActivationOrchestrator().on_booking_activated(
            BookingActivated(booking_id=booking.id, customer_id="ghost", activated_at=AT)
        )

        assert email.sent_emails == []


class TestCompletion:
    def test_notifies_customer_and_initiates_payout(self, payouts, email, save_booking):
        booking = save_booking("COMPLETED")

        BookingCompletionOrchestrator().on_booking_completed(_completed(booking))

        assert _subjects(email) == {"Your booking has been completed"}
        [request] = payouts.requests.values()
        assert request.fleet_owner_id == "owner-1"
        assert request.booking_id == str(booking.id)
        assert request.amount == 45000.0

    def test_payout_initiated_once_per_booking(self, payouts, save_booking):
        booking = save_booking("COMPLETED")
        orchestrator = BookingCompletionOrchestrator()

        orchestrator.on_booking_completed(_completed(booking))
        orchestrator.on_booking_completed(_completed(booking))

        assert len(payouts.requests) == 1

    def test_zero_amount_skips_payout(self, payouts, email, save_booking):
        booking = save_booking("COMPLETED", fleet_owner_payout_amount=0.0)

        BookingCompletionOrchestrator().on_booking_completed(_completed(booking))

        assert payouts.requests == {}
        assert _recipients(email) == ["ada@example.com"]

    def test_unknown_car_skips_payout_but_notifies(self, payouts, email, save_booking):
        booking = save_booking("COMPLETED", car_id="car-404")

        BookingCompletionOrchestrator().on_booking_completed(_completed(booking))

        assert payouts.requests == {}
        assert "Vehicle: Vehicle" in email.sent_emails[0]["text_content"]

    def test_notification_failure_does_not_block_payout(self, payouts, email, save_booking):
        booking = save_booking("COMPLETED")
        email.configure(should_succeed=False)

        BookingCompletionOrchestrator().on_booking_completed(_completed(booking))

        assert len(payouts.requests) == 1


class TestCancellation:
    def test_notifies_all_three_parties(self, email, save_booking):
        booking = save_booking("CANCELLED")

        BookingCancellationOrchestrator().on_booking_cancelled(
            BookingCancelled(
                booking_id=booking.id,
                customer_id="cust-1",
                chauffeur_id="chauf-1",
                reason="Plans changed",
                cancelled_at=AT,
            )
        )

        assert _recipients(email) == ["ada@example.com", "kemi@example.com", "tunde@example.com"]
        assert _subjects(email) == {"Your booking has been cancelled"}

    def test_no_chauffeur(self, email, save_booking):
        booking = save_booking("CANCELLED", chauffeur_id=None)

        BookingCancellationOrchestrator().on_booking_cancelled(
            BookingCancelled(booking_id=booking.id, customer_id="cust-1", reason="x", cancelled_at=AT)
        )

        assert _recipients(email) == ["ada@example.com", "kemi@example.com"]

    def test_failing_branch_does_not_stop_others(self, directory, email, save_booking):
        directory.add_user(UserProfile(id="cust-1", name="Ada Obi", email="not-an-email"))
        booking = save_booking("CANCELLED")

        BookingCancellationOrchestrator().on_booking_cancelled(
            BookingCancelled(
                booking_id=booking.id,
                customer_id="cust-1",
                chauffeur_id="chauf-1",
                reason="x",
                cancelled_at=AT,
            )
        )

        assert _recipients(email) == ["kemi@example.com", "tunde@example.com"]


class TestPaymentConfirmation:
    def test_confirms_customer_and_alerts_owner(self, email, save_booking):
        booking = save_booking("CONFIRMED")

        PaymentConfirmationOrchestrator().on_payment_confirmed(
            BookingPaymentConfirmed(booking_id=booking.id, customer_id="cust-1", payment_id="pay-1", confirmed_at=AT)
        )

        by_recipient = {e["to"]: e for e in email.sent_emails}
        assert by_recipient["ada@example.com"]["subject"] == "Your booking has been confirmed"
        assert by_recipient["kemi@example.com"]["subject"] == "New Booking Alert"
        assert "Ada Obi" in by_recipient["kemi@example.com"]["text_content"]

    def test_car_without_owner_skips_alert(self, directory, email, save_booking):
        directory.add_car(CarSummary(id="car-2", display_name="Lexus RX"))
        booking = save_booking("CONFIRMED", car_id="car-2")

        PaymentConfirmationOrchestrator().on_payment_confirmed(
            BookingPaymentConfirmed(booking_id=booking.id, customer_id="cust-1", payment_id="pay-1", confirmed_at=AT)
        )

        assert _recipients(email) == ["ada@example.com"]


class TestChauffeurAssignment:
    def test_assignment_notifies_three_parties(self, email, save_booking):
        booking = save_booking("CONFIRMED")

        ChauffeurAssignmentOrchestrator().on_chauffeur_assigned(
            BookingChauffeurAssigned(
                booking_id=booking.id,
                booking_reference=booking.booking_reference,
                chauffeur_id="chauf-1",
                assigned_at=AT,
            )
        )

        assert _recipients(email) == ["ada@example.com", "kemi@example.com", "tunde@example.com"]
        assert _subjects(email) == {"Your booking has been assigned"}

    def test_unassignment_uses_previous_chauffeur(self, email, save_booking):
        booking = save_booking("CONFIRMED", chauffeur_id=None)

        ChauffeurUnassignmentOrchestrator().on_chauffeur_unassigned(
            BookingChauffeurUnassigned(
                booking_id=booking.id,
                booking_reference=booking.booking_reference,
                chauffeur_id="chauf-1",
                unassigned_at=AT,
            )
        )

        assert _recipients(email) == ["ada@example.com", "tunde@example.com"]


class TestPaymentVerification:
    def test_success_confirms_booking(self, booking_repo, save_booking):
        booking = save_booking("PENDING")

        PaymentVerificationOrchestrator().on_payment_verified(
            PaymentVerified(payment_id="pay-9", booking_id=booking.id, verified_at=AT)
        )

        stored = booking_repo.find_booking_by_id(booking.id)
        assert stored.status == BookingStatus.CONFIRMED.value
        assert stored.payment_id == "pay-9"

    def test_confirmation_reaches_customer(self, email, save_booking):
        booking = save_booking("PENDING")

        PaymentVerificationOrchestrator().on_payment_verified(
            PaymentVerified(payment_id="pay-9", booking_id=booking.id, verified_at=AT)
        )

        assert "Your booking has been confirmed" in _subjects(email)

    def test_declined_leaves_booking_pending(self, booking_repo, save_booking):
        booking = save_booking("PENDING")

        PaymentVerificationOrchestrator().on_payment_verified(
            PaymentVerified(
                payment_id="pay-9",
                booking_id=booking.id,
                succeeded=False,
                error_message="Card declined",
                verified_at=AT,
            )
        )

        stored = booking_repo.find_booking_by_id(booking.id)
        assert stored.status == BookingStatus.PENDING.value

    def test_unknown_booking_is_logged_not_raised(self):
        PaymentVerificationOrchestrator().on_payment_verified(
            PaymentVerified(payment_id="pay-9", booking_id="missing", verified_at=AT)
        )
