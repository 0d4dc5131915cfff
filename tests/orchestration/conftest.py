import pytest
from orchestration.adapters import InMemoryOtpStore, InMemoryPayoutService
from orchestration.collaborators import configure


@pytest.fixture
def payouts():
    payouts = InMemoryPayoutService()
    configure(payouts=payouts)
    return payouts


@pytest.fixture
def otp_store():
    store = InMemoryOtpStore()
    configure(otp_store=store)
    return store


@pytest.fixture
def parties(directory, notification_service):
    """Directory and notification service installed for the handlers."""
    return directory, notification_service
