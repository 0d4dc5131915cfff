from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from booking.booking.booking import Booking
from hyre.domain import hyre, init_domain
from notifications.channel import reset_channels
from notifications.channel.fake_email import FakeEmailAdapter
from notifications.channel.fake_sms import FakeSMSAdapter
from notifications.notification.notification import Notification
from notifications.notification.service import NotificationService
from orchestration.adapters import InMemoryDirectory
from orchestration.collaborators import configure, reset_collaborators
from orchestration.ports import CarSummary, UserProfile
from protean.integrations.pytest import DomainFixture
from protean.utils.globals import current_domain


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/bdd/" in str(test_path):
            item.add_marker(pytest.mark.bdd)
        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def hyre_bed():
    init_domain()
    bed = DomainFixture(hyre)
    with hyre.domain_context():
        hyre.setup_database()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(hyre_bed):
    with hyre_bed.domain_context():
        yield


@pytest.fixture(autouse=True)
def _reset_adapters():
    reset_channels()
    reset_collaborators()
    yield
    reset_channels()
    reset_collaborators()


@pytest.fixture
def now():
    return datetime(2025, 6, 2, 8, 0, tzinfo=UTC)


@pytest.fixture
def email():
    return FakeEmailAdapter()


@pytest.fixture
def sms():
    return FakeSMSAdapter()


@pytest.fixture
def booking_repo():
    return current_domain.repository_for(Booking)


@pytest.fixture
def notification_repo():
    return current_domain.repository_for(Notification)


@pytest.fixture
def notification_service(email, sms):
    """Service on the fake channels, also installed for the orchestration handlers."""
    service = NotificationService(email, sms)
    configure(notifications=service)
    return service


@pytest.fixture
def directory():
    directory = InMemoryDirectory()
    directory.add_user(
        UserProfile(id="cust-1", name="Ada Obi", email="ada@example.com", phone="+2348012345678", role="customer")
    )
    directory.add_user(
        UserProfile(
            id="chauf-1",
            name="Tunde Bello",
            email="tunde@example.com",
            phone="+2348098765432",
            role="chauffeur",
        )
    )
    directory.add_user(
        UserProfile(id="owner-1", name="Kemi Fleet", email="kemi@example.com", role="fleetOwner")
    )
    directory.add_car(CarSummary(id="car-1", display_name="Toyota Camry 2022", owner_id="owner-1"))
    configure(profiles=directory, fleet=directory)
    return directory


@pytest.fixture
def make_booking(now):
    """Build a two-leg booking starting 30 minutes from ``now``, advanced to ``status``."""

    def _make(status="CONFIRMED", chauffeur_id="chauf-1", start=None, **overrides):
        start = start or now + timedelta(minutes=30)
        attrs = {
            "customer_id": "cust-1",
            "car_id": "car-1",
            "start_date": start,
            "end_date": start + timedelta(days=1, hours=8),
            "pickup_location": "12 Admiralty Way, Lekki",
            "return_location": "Murtala Muhammed Airport",
            "chauffeur_id": chauffeur_id,
            "fleet_owner_payout_amount": 45000.0,
        }
        attrs.update(overrides)
        booking = Booking.create(**attrs)

        if status in ("CONFIRMED", "ACTIVE", "COMPLETED"):
            booking.confirm_with_payment("pay-1")
        if status in ("ACTIVE", "COMPLETED"):
            booking.activate(start)
        if status == "COMPLETED":
            booking.complete(attrs["end_date"])
        if status == "CANCELLED":
            booking.cancel("Plans changed")
        booking._events.clear()
        return booking

    return _make


@pytest.fixture
def save_booking(booking_repo, make_booking):
    """Build a booking with ``make_booking`` and persist it."""

    def _save(*args, **kwargs):
        booking = make_booking(*args, **kwargs)
        booking_repo.add(booking)
        return booking

    return _save
