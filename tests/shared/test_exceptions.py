"""Tests for the shared exception base."""

from notifications.notification.errors import NotificationError
from scheduling.errors import UnknownJobError
from shared.exceptions import DomainError


class TestDomainError:
    def test_default_code(self):
        err = DomainError("Something broke")
        assert err.code == "DOMAIN_ERROR"
        assert str(err) == "Something broke"
        assert err.details == {}

    def test_to_dict(self):
        err = DomainError("Broke", code="CUSTOM", context="booking", details={"id": "b-1"})
        assert err.to_dict() == {
            "error": "CUSTOM",
            "message": "Broke",
            "context": "booking",
            "details": {"id": "b-1"},
        }

    def test_context_errors_share_the_base(self):
        assert issubclass(NotificationError, DomainError)
        assert isinstance(UnknownJobError("reminder-emails", "x"), DomainError)
