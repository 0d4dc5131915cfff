"""NotificationContent value object: subject, body and template variables."""

from protean.fields import Dict, String, Text

from hyre.domain import hyre
from notifications.notification.errors import InvalidContentError


@hyre.value_object
class NotificationContent:
    """Message text with ``{{name}}`` placeholders and the values to fill them.

    ``interpolate()`` always works from this instance's own text, so the
    stored content on a notification stays the un-rendered original and can
    be rendered again on every delivery attempt.
    """

    subject: String(required=True, max_length=500, sanitize=False)
    body: Text(required=True, sanitize=False)
    template_variables: Dict()

    @classmethod
    def build(cls, subject, body, template_variables=None) -> "NotificationContent":
        """Trim subject and body and render every variable value as text."""
        for field_name, value in (("subject", subject), ("body", body)):
            if value is None or not str(value).strip():
                raise InvalidContentError(f"Notification {field_name} cannot be empty")
        return cls(
            subject=str(subject).strip(),
            body=str(body).strip(),
            template_variables={
                str(k): "" if v is None else str(v) for k, v in (template_variables or {}).items()
            },
        )

    def interpolate(self) -> "NotificationContent":
        subject = self.subject
        body = self.body
        for key, value in (self.template_variables or {}).items():
            placeholder = "{{" + key + "}}"
            subject = subject.replace(placeholder, value)
            body = body.replace(placeholder, value)
        return NotificationContent(
            subject=subject,
            body=body,
            template_variables=dict(self.template_variables or {}),
        )
