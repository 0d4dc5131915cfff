"""Shared template behaviour: fixed body text with ``{{name}}`` placeholders."""

import textwrap

from notifications.notification.content import NotificationContent


class NotificationTemplate:
    notification_type = None
    role = None
    subject = ""
    body = ""

    def render_subject(self, context: dict) -> str:
        return self.subject

    def render(self, context: dict) -> NotificationContent:
        """Build un-interpolated content; placeholders are filled at delivery time."""
        return NotificationContent.build(
            subject=self.render_subject(context),
            body=textwrap.dedent(self.body),
            template_variables=context,
        )
