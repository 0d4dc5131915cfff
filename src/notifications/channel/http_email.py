"""HTTP email adapter for a Resend-compatible ``POST /emails`` API."""

import httpx
import structlog

from notifications.channel.email_port import EmailPort
from notifications.channel.messages import DeliveryResult, EmailRequest

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT = 10.0


class HttpEmailAdapter(EmailPort):
    def __init__(
        self,
        api_key: str,
        sender: str,
        base_url: str = "https://api.resend.com",
        transport: httpx.BaseTransport | None = None,
    ):
        self.api_key = api_key
        self.sender = sender
        self.base_url = base_url.rstrip("/")
        self._transport = transport

    def send_email(self, request: EmailRequest) -> DeliveryResult:
        payload = {
            "from": self.sender,
            "to": [request.to],
            "subject": request.subject,
            "html": request.html_content,
        }
        if request.text_content:
            payload["text"] = request.text_content

        try:
            with httpx.Client(timeout=DEFAULT_TIMEOUT, transport=self._transport) as client:
                resp = client.post(
                    f"{self.base_url}/emails",
                    json=payload,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                )
                resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Email provider rejected message",
                to=request.to,
                status_code=e.response.status_code,
            )
            return DeliveryResult(success=False, error=f"{e.response.status_code}: {e.response.text}")

        body = resp.json() if resp.content else {}
        return DeliveryResult(success=True, message_id=body.get("id"))
