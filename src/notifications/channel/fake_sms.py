"""Fake SMS adapter: records sent messages for testing."""

from uuid import uuid4

from notifications.channel.messages import DeliveryResult, SmsRequest
from notifications.channel.sms_port import SMSPort


class FakeSMSAdapter(SMSPort):
    """SMS adapter that records messages in memory for test assertions."""

    def __init__(self):
        self.sent_messages: list[dict] = []
        self.should_succeed = True
        self.should_raise = False
        self.failure_reason = "SMS delivery failed"

    def configure(
        self,
        should_succeed: bool = True,
        failure_reason: str = "SMS delivery failed",
        should_raise: bool = False,
    ):
        """Configure the fake adapter behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.should_raise = should_raise

    def send(self, request: SmsRequest) -> DeliveryResult:
        if self.should_raise:
            raise ConnectionError(self.failure_reason)
        if not self.should_succeed:
            return DeliveryResult(success=False, error=self.failure_reason)

        message_id = f"sms-{uuid4().hex[:12]}"
        self.sent_messages.append(
            {
                "message_id": message_id,
                "to": request.to,
                "body": request.message,
                "template_key": request.template_key,
            }
        )

        return DeliveryResult(success=True, message_id=message_id)

    def reset(self):
        """Clear sent messages (useful between tests)."""
        self.sent_messages.clear()
        self.should_succeed = True
        self.should_raise = False
        self.failure_reason = "SMS delivery failed"
