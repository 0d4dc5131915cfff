"""Leg start reminder scenarios run against the real notification service."""

from orchestration.leg_reminders import LegReminderScanner
from pytest_bdd import scenarios, when

scenarios("features/leg_start_reminders.feature")


@when("the leg start reminder scan runs", target_fixture="summary")
def run_leg_start_scan(now):
    return LegReminderScanner().process_leg_start_reminders(now)
