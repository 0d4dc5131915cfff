"""Given and Then steps shared by the orchestration scenarios."""

from datetime import timedelta

import pytest
from orchestration.adapters import InMemoryDirectory
from orchestration.collaborators import configure
from orchestration.ports import CarSummary, UserProfile
from pytest_bdd import given, parsers, then


class _UnavailableFleet(InMemoryDirectory):
    def get_car_by_id(self, car_id):
        raise ConnectionError("fleet service timeout")


@pytest.fixture
def people(notification_service):
    """Empty directory installed for profiles and fleet."""
    directory = InMemoryDirectory()
    configure(profiles=directory, fleet=directory)
    return directory


@given(parsers.cfparse('a chauffeur "{name}" reachable at "{email_address}" and "{phone}"'))
def chauffeur(people, name, email_address, phone):
    people.add_user(UserProfile(id="chauf-1", name=name, email=email_address, phone=phone, role="chauffeur"))


@given(parsers.cfparse('a car "{display_name}" in the fleet'))
def car(people, display_name):
    people.add_user(UserProfile(id="owner-1", name="Kemi Fleet", email="kemi@example.com", role="fleetOwner"))
    people.add_car(CarSummary(id="car-1", display_name=display_name, owner_id="owner-1"))


@given(parsers.cfparse('a customer "{name}" with email "{email_address}" and no phone'))
def email_only_customer(people, name, email_address):
    people.add_user(UserProfile(id="cust-1", name=name, email=email_address))


@given(parsers.cfparse('a customer "{name}" with email "{email_address}" and phone "{phone}"'))
def customer(people, name, email_address, phone):
    people.add_user(UserProfile(id="cust-1", name=name, email=email_address, phone=phone))


@given("the fleet service is unavailable")
def fleet_unavailable(people):
    configure(fleet=_UnavailableFleet())


@given("a confirmed booking whose first leg starts in 30 minutes", target_fixture="booking")
def confirmed_booking(save_booking, now):
    return save_booking("CONFIRMED", start=now + timedelta(minutes=30))


@then(parsers.cfparse("the scan reports {count:d} leg reminded"))
def scan_reports(summary, count):
    assert summary == f"Processed {count} booking leg start reminders"


@then(parsers.cfparse('an email reminder is sent to "{address}"'))
def email_sent_to(email, address):
    assert address in [e["to"] for e in email.sent_emails]


@then(parsers.cfparse('text messages go only to "{phone}"'))
def texts_only_to(sms, phone):
    assert [m["to"] for m in sms.sent_messages] == [phone]


@then(parsers.cfparse('every email reminder names the car "{display_name}"'))
def every_email_names(email, display_name):
    assert email.sent_emails
    assert all(display_name in e["text_content"] for e in email.sent_emails)


@then(parsers.cfparse('no email reminder names the car "{display_name}"'))
def no_email_names(email, display_name):
    assert not any(display_name in e["text_content"] for e in email.sent_emails)
