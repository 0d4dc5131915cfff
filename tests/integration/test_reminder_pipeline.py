"""End-to-end flows through the composed container.

Bookings are created through the lifecycle service, jobs are enqueued by the
scheduler and drained by the real queue workers, and every notification
lands in the fake channel adapters.
"""

from datetime import UTC, datetime, timedelta

import pytest
from app import create_app
from booking.booking.booking import BookingStatus, LegStatus
from container import Container
from fastapi.testclient import TestClient
from notifications.notification.notification import NotificationStatus
from scheduling.config import Settings
from scheduling.jobs import PROCESSING_QUEUE, REMINDER_QUEUE, STATUS_UPDATE_QUEUE
from scheduling.queue import JobState


@pytest.fixture
def container(directory, email, sms):
    return Container(directory=directory, email_sender=email, sms_sender=sms)


def _worker(container, queue_name):
    return next(w for w in container.workers() if w.queue.name == queue_name)


def _create_booking(container, start, hours=8):
    return container.lifecycle.create_booking(
        customer_id="cust-1",
        car_id="car-1",
        start_date=start,
        end_date=start + timedelta(hours=hours),
        pickup_location="12 Admiralty Way, Lekki",
        return_location="Murtala Muhammed Airport",
        chauffeur_id="chauf-1",
        fleet_owner_payout_amount=45000.0,
    )


class TestBookingConfirmation:
    def test_payment_confirmation_notifies_customer_and_owner(self, container, email, notification_repo):
        booking = _create_booking(container, datetime.now(UTC) + timedelta(days=2))

        container.lifecycle.confirm_payment(booking.id, "pay-1")

        subjects = {e["to"]: e["subject"] for e in email.sent_emails}
        assert subjects == {
            "ada@example.com": "Your booking has been confirmed",
            "kemi@example.com": "New Booking Alert",
        }
        stored = notification_repo.find_by_booking_id(str(booking.id))
        assert {n.status for n in stored} == {NotificationStatus.SENT.value}


class TestLegReminderJob:
    async def test_scheduled_scan_reminds_both_participants(self, container, email, notification_repo):
        booking = _create_booking(container, datetime.now(UTC) + timedelta(minutes=30))
        container.lifecycle.confirm_payment(booking.id, "pay-1")
        email.reset()

        job = await container.scheduler.schedule_booking_leg_start_reminders()
        processed = await _worker(container, REMINDER_QUEUE).drain()

        assert processed == 1
        assert job.state == JobState.COMPLETED
        assert job.result["result"] == "Processed 1 booking leg start reminders"
        assert sorted(e["to"] for e in email.sent_emails) == ["ada@example.com", "tunde@example.com"]
        first_leg = min(booking.legs, key=lambda leg: leg.leg_start_time)
        assert len(notification_repo.find_by_booking_leg_id(str(first_leg.id))) == 2

    async def test_manual_trip_reminder_runs_leg_scan(self, container, email):
        booking = _create_booking(container, datetime.now(UTC) + timedelta(minutes=30))
        container.lifecycle.confirm_payment(booking.id, "pay-1")
        email.reset()

        job = await container.scheduler.trigger_manual_reminder_job("trip-start")
        await _worker(container, REMINDER_QUEUE).drain()

        assert job.result["result"] == "Processed 1 booking leg start reminders"


class TestStatusUpdateJobs:
    async def test_booking_runs_to_payout(self, container, email, booking_repo):
        booking = _create_booking(container, datetime.now(UTC) - timedelta(hours=3), hours=2)
        container.lifecycle.confirm_payment(booking.id, "pay-1")
        email.reset()
        status_worker = _worker(container, STATUS_UPDATE_QUEUE)

        activate = await container.scheduler.schedule_confirmed_to_active_updates()
        await status_worker.drain()
        assert activate.result["result"].startswith("Activated 1 booking(s)")
        active = booking_repo.find_booking_by_id(booking.id)
        assert active.status == BookingStatus.ACTIVE.value
        first_leg = min(active.legs, key=lambda leg: leg.leg_start_time)
        assert first_leg.status == LegStatus.ACTIVE.value

        complete = await container.scheduler.schedule_active_to_completed_updates()
        await status_worker.drain()
        assert complete.result["result"] == "Completed 1 booking(s)"
        assert booking_repo.find_booking_by_id(booking.id).status == BookingStatus.COMPLETED.value
        assert len(container.payouts.pending) == 1

        payout_job = await container.scheduler.schedule_pending_payout_processing()
        await _worker(container, PROCESSING_QUEUE).drain()

        assert payout_job.result["result"] == "Processed 1 pending payouts"
        assert [e["subject"] for e in email.sent_emails] == [
            "Your booking has been active",
            "Your booking has been completed",
            "Your Hyre payout has been sent",
        ]

    async def test_hourly_scan_starts_next_day_leg(self, container, booking_repo):
        today = datetime.now(UTC).replace(hour=0, minute=0, second=0, microsecond=0)
        start = today - timedelta(days=1)
        booking = _create_booking(container, start, hours=47)
        container.lifecycle.confirm_payment(booking.id, "pay-1")
        container.lifecycle.process_activations(start)
        legs = booking_repo.find_booking_by_id(booking.id).legs
        first, second = sorted(legs, key=lambda leg: leg.leg_start_time)[:2]
        assert second.status == LegStatus.PENDING.value

        await container.scheduler.schedule_confirmed_to_active_updates()
        await _worker(container, STATUS_UPDATE_QUEUE).drain()

        legs = {leg.id: leg for leg in booking_repo.find_booking_by_id(booking.id).legs}
        assert legs[first.id].status == LegStatus.ACTIVE.value
        assert legs[second.id].status == LegStatus.ACTIVE.value


class TestPendingNotificationJob:
    async def test_failed_deliveries_are_not_pending(self, container, email, notification_repo):
        booking = _create_booking(container, datetime.now(UTC) + timedelta(days=2))
        email.configure(should_succeed=False)
        container.lifecycle.confirm_payment(booking.id, "pay-1")
        assert notification_repo.find_failed()

        job = await container.scheduler.trigger_manual_processing("pending-notifications")
        await _worker(container, PROCESSING_QUEUE).drain()

        assert job.state == JobState.COMPLETED
        assert job.result["result"].startswith("Processed 0 pending notifications")


class TestJobHistory:
    async def test_repeated_scans_keep_bounded_history(self, directory, email, sms):
        container = Container(
            settings=Settings(queue_keep_completed=5), directory=directory, email_sender=email, sms_sender=sms
        )
        worker = _worker(container, REMINDER_QUEUE)

        for _ in range(50):
            await container.scheduler.schedule_booking_leg_end_reminders()
            await worker.drain()

        queue = container.queues[REMINDER_QUEUE]
        assert len(queue.jobs(JobState.COMPLETED)) == 5
        assert (await queue.get_counts())["completed"] == 50


class TestHttpSurface:
    def test_health_and_manual_trigger(self, container):
        client = TestClient(create_app(container))

        health = client.get("/health")
        assert health.status_code == 200
        assert health.json()["queues"] == sorted([PROCESSING_QUEUE, REMINDER_QUEUE, STATUS_UPDATE_QUEUE])

        response = client.post("/operations/reminders/leg-end")
        assert response.status_code == 202
        assert container.queues[REMINDER_QUEUE].jobs(JobState.WAITING)

    def test_notifications_routes_use_container_service(self, container):
        client = TestClient(create_app(container))

        response = client.post("/notifications/process-pending")

        assert response.status_code == 200
        assert response.json()["batch_type"] == "pending"
