"""SMS channel port: abstract interface for SMS dispatch."""

from abc import ABC, abstractmethod

from notifications.channel.messages import DeliveryResult, SmsRequest


class SMSPort(ABC):
    """Abstract interface for SMS dispatch adapters."""

    @abstractmethod
    def send(self, request: SmsRequest) -> DeliveryResult:
        """Send an SMS message."""
        ...
