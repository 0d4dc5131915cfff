"""HTTP SMS adapter for the Twilio Messages REST API."""

import httpx
import structlog

from notifications.channel.messages import DeliveryResult, SmsRequest
from notifications.channel.sms_port import SMSPort

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT = 10.0


class HttpSMSAdapter(SMSPort):
    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        from_number: str,
        base_url: str = "https://api.twilio.com/2010-04-01",
        transport: httpx.BaseTransport | None = None,
    ):
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.from_number = from_number
        self.base_url = base_url.rstrip("/")
        self._transport = transport

    def send(self, request: SmsRequest) -> DeliveryResult:
        url = f"{self.base_url}/Accounts/{self.account_sid}/Messages.json"
        form = {"To": request.to, "From": self.from_number, "Body": request.message}

        try:
            with httpx.Client(timeout=DEFAULT_TIMEOUT, transport=self._transport) as client:
                resp = client.post(url, data=form, auth=(self.account_sid, self.auth_token))
                resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "SMS provider rejected message",
                to=request.to,
                status_code=e.response.status_code,
            )
            return DeliveryResult(success=False, error=f"{e.response.status_code}: {e.response.text}")

        body = resp.json() if resp.content else {}
        return DeliveryResult(success=True, message_id=body.get("sid"))
