"""Request and result shapes exchanged with channel adapters."""

from pydantic import BaseModel, Field


class EmailRequest(BaseModel):
    to: str
    subject: str
    html_content: str
    text_content: str | None = None


class SmsRequest(BaseModel):
    to: str
    message: str
    template_key: str | None = None
    variables: dict[str, str] = Field(default_factory=dict)


class DeliveryResult(BaseModel):
    success: bool
    message_id: str | None = None
    error: str | None = None
