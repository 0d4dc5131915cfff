"""Channel adapter registry: pluggable notification dispatch channels.

Provides singleton access to channel adapters. Uses fake adapters by
default; the HTTP adapters are selected with ``EMAIL_ADAPTER=http`` and
``SMS_ADAPTER=http`` plus their credentials in the environment.
"""

import os

EMAIL = "EMAIL"
SMS = "SMS"

_channel_instances: dict[str, object] = {}


def get_channel(channel_type: str):
    """Return the configured channel adapter (singleton per channel type).

    Args:
        channel_type: "EMAIL" or "SMS"
    """
    if channel_type not in _channel_instances:
        if channel_type == EMAIL:
            _channel_instances[channel_type] = _build_email_adapter(os.environ.get("EMAIL_ADAPTER", "fake"))
        elif channel_type == SMS:
            _channel_instances[channel_type] = _build_sms_adapter(os.environ.get("SMS_ADAPTER", "fake"))
        else:
            raise ValueError(f"Unknown channel type: {channel_type}")

    return _channel_instances[channel_type]


def _build_email_adapter(adapter: str):
    if adapter == "fake":
        from notifications.channel.fake_email import FakeEmailAdapter

        return FakeEmailAdapter()
    if adapter == "http":
        from notifications.channel.http_email import HttpEmailAdapter

        return HttpEmailAdapter(
            api_key=os.environ["EMAIL_API_KEY"],
            sender=os.environ.get("EMAIL_FROM", "Hyre <noreply@hyre.app>"),
            base_url=os.environ.get("EMAIL_API_URL", "https://api.resend.com"),
        )
    raise ValueError(f"Unknown email adapter: {adapter}")


def _build_sms_adapter(adapter: str):
    if adapter == "fake":
        from notifications.channel.fake_sms import FakeSMSAdapter

        return FakeSMSAdapter()
    if adapter == "http":
        from notifications.channel.http_sms import HttpSMSAdapter

        return HttpSMSAdapter(
            account_sid=os.environ["SMS_ACCOUNT_SID"],
            auth_token=os.environ["SMS_AUTH_TOKEN"],
            from_number=os.environ["SMS_FROM_NUMBER"],
        )
    raise ValueError(f"Unknown SMS adapter: {adapter}")


def reset_channels():
    """Reset all channel singletons (useful for testing)."""
    _channel_instances.clear()
