"""Template lookup: one template per (notification type, recipient role) pair.

Trip-level start/end reminder types have no templates; reminders are only
built per booking leg.
"""

from notifications.notification.errors import TemplateNotFoundError
from notifications.notification.notification import NotificationType
from notifications.notification.recipient import RecipientRole
from notifications.templates.account import (
    ChauffeurWelcomeTemplate,
    CustomerWelcomeTemplate,
    FleetOwnerApprovedTemplate,
    FleetOwnerWelcomeTemplate,
    LoginConfirmationTemplate,
    LoginOtpTemplate,
    RegistrationOtpTemplate,
)
from notifications.templates.base import NotificationTemplate
from notifications.templates.booking_leg import (
    ChauffeurLegEndReminderTemplate,
    ChauffeurLegStartReminderTemplate,
    CustomerLegEndReminderTemplate,
    CustomerLegStartReminderTemplate,
)
from notifications.templates.booking_status import (
    ChauffeurStatusUpdateTemplate,
    CustomerStatusUpdateTemplate,
    FleetOwnerBookingAlertTemplate,
    FleetOwnerStatusUpdateTemplate,
)
from notifications.templates.payout import PayoutCompletedTemplate, PayoutFailedTemplate


def get_template(notification_type: NotificationType, role: RecipientRole) -> NotificationTemplate:
    """Look up the template for a notification type addressed to a role."""
    notification_type = NotificationType(notification_type)
    role = RecipientRole(role)
    match (notification_type, role):
        case (NotificationType.BOOKING_LEG_START_REMINDER, RecipientRole.CUSTOMER):
            return CustomerLegStartReminderTemplate()
        case (NotificationType.BOOKING_LEG_START_REMINDER, RecipientRole.CHAUFFEUR):
            return ChauffeurLegStartReminderTemplate()
        case (NotificationType.BOOKING_LEG_END_REMINDER, RecipientRole.CUSTOMER):
            return CustomerLegEndReminderTemplate()
        case (NotificationType.BOOKING_LEG_END_REMINDER, RecipientRole.CHAUFFEUR):
            return ChauffeurLegEndReminderTemplate()
        case (NotificationType.BOOKING_STATUS_UPDATE, RecipientRole.CUSTOMER):
            return CustomerStatusUpdateTemplate()
        case (NotificationType.BOOKING_STATUS_UPDATE, RecipientRole.CHAUFFEUR):
            return ChauffeurStatusUpdateTemplate()
        case (NotificationType.BOOKING_STATUS_UPDATE, RecipientRole.FLEET_OWNER):
            return FleetOwnerStatusUpdateTemplate()
        case (NotificationType.FLEET_OWNER_BOOKING_ALERT, RecipientRole.FLEET_OWNER):
            return FleetOwnerBookingAlertTemplate()
        case (NotificationType.OTP_REGISTRATION, _):
            return RegistrationOtpTemplate()
        case (NotificationType.OTP_LOGIN, _):
            return LoginOtpTemplate()
        case (NotificationType.USER_REGISTERED, RecipientRole.CUSTOMER):
            return CustomerWelcomeTemplate()
        case (NotificationType.USER_REGISTERED, RecipientRole.CHAUFFEUR):
            return ChauffeurWelcomeTemplate()
        case (NotificationType.USER_REGISTERED, RecipientRole.FLEET_OWNER):
            return FleetOwnerWelcomeTemplate()
        case (NotificationType.LOGIN_CONFIRMATION, _):
            return LoginConfirmationTemplate()
        case (NotificationType.FLEET_OWNER_APPROVED, RecipientRole.FLEET_OWNER):
            return FleetOwnerApprovedTemplate()
        case (NotificationType.PAYOUT_COMPLETED, RecipientRole.FLEET_OWNER):
            return PayoutCompletedTemplate()
        case (NotificationType.PAYOUT_FAILED, RecipientRole.FLEET_OWNER):
            return PayoutFailedTemplate()
        case _:
            raise TemplateNotFoundError(notification_type.value, role.value)
