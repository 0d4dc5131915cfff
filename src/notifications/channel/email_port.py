"""Email channel port: abstract interface for email dispatch."""

import html
from abc import ABC, abstractmethod

from notifications.channel.messages import DeliveryResult, EmailRequest
from notifications.notification.content import NotificationContent


class EmailPort(ABC):
    """Abstract interface for email dispatch adapters."""

    @abstractmethod
    def send_email(self, request: EmailRequest) -> DeliveryResult:
        """Send an email message.

        Provider rejections come back as ``DeliveryResult(success=False)``;
        transport failures may raise.
        """
        ...

    def render_template(self, content: NotificationContent) -> str:
        """Render already-interpolated content as an HTML document."""
        paragraphs = [p.strip() for p in content.body.split("\n\n") if p.strip()]
        rendered = "\n".join(
            "<p>" + "<br>".join(html.escape(line.strip()) for line in p.splitlines()) + "</p>" for p in paragraphs
        )
        return (
            "<!DOCTYPE html>\n<html>\n<head><meta charset=\"utf-8\">"
            f"<title>{html.escape(content.subject)}</title></head>\n"
            f"<body>\n{rendered}\n</body>\n</html>"
        )
