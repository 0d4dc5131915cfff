"""Notification factory: pure construction from flat payloads.

No I/O happens here. Booking notifications skip any participant without an
email or phone; account notifications always go out by email.
"""

from notifications.notification.notification import (
    DeliveryChannel,
    Notification,
    NotificationType,
)
from notifications.notification.payloads import (
    BookingLegReminderData,
    BookingStatusUpdateData,
    FleetOwnerApprovalData,
    FleetOwnerBookingAlertData,
    LoginConfirmationData,
    OtpNotificationData,
    PayoutNotificationData,
    WelcomeNotificationData,
)
from notifications.notification.recipient import Recipient, RecipientRole
from notifications.templates import get_template

DISPLAY_TIME_FORMAT = "%Y-%m-%d %H:%M UTC"


def determine_channel(email, phone) -> DeliveryChannel | None:
    """Pick the channel covering every contact method the recipient has."""
    if email and phone:
        return DeliveryChannel.BOTH
    if email:
        return DeliveryChannel.EMAIL
    if phone:
        return DeliveryChannel.SMS
    return None


def _has_contact(email, phone) -> bool:
    return bool((email or "").strip() or (phone or "").strip())


def _build(notification_type, recipient, context, channel=None, booking_id=None, booking_leg_id=None):
    content = get_template(notification_type, recipient.role).render(context)
    return Notification.create(
        notification_type=notification_type,
        recipient=recipient,
        content=content,
        channel=channel or determine_channel(recipient.email, recipient.phone),
        booking_id=booking_id,
        booking_leg_id=booking_leg_id,
    )


class NotificationFactory:
    # -------------------------------------------------------------------
    # Booking legs
    # -------------------------------------------------------------------
    def create_booking_leg_start_reminders(self, data: BookingLegReminderData) -> list[Notification]:
        return self._leg_reminders(NotificationType.BOOKING_LEG_START_REMINDER, data)

    def create_booking_leg_end_reminders(self, data: BookingLegReminderData) -> list[Notification]:
        return self._leg_reminders(NotificationType.BOOKING_LEG_END_REMINDER, data)

    def _leg_reminders(self, notification_type, data: BookingLegReminderData) -> list[Notification]:
        context = {
            "customerName": data.customer_name,
            "chauffeurName": data.chauffeur_name,
            "carName": data.car_name,
            "legStartTime": data.leg_start_time,
            "legEndTime": data.leg_end_time,
            "pickupLocation": data.pickup_location,
            "returnLocation": data.return_location,
            "bookingReference": data.booking_reference,
        }
        sides = [
            (data.customer_id, data.customer_name, RecipientRole.CUSTOMER, data.customer_email, data.customer_phone),
            (
                data.chauffeur_id,
                data.chauffeur_name,
                RecipientRole.CHAUFFEUR,
                data.chauffeur_email,
                data.chauffeur_phone,
            ),
        ]

        notifications = []
        for recipient_id, name, role, email, phone in sides:
            if not _has_contact(email, phone):
                continue
            recipient = Recipient.build(id=recipient_id, name=name, role=role, email=email, phone=phone)
            notifications.append(
                _build(
                    notification_type,
                    recipient,
                    context,
                    booking_id=data.booking_id,
                    booking_leg_id=data.booking_leg_id,
                )
            )
        return notifications

    # -------------------------------------------------------------------
    # Booking status
    # -------------------------------------------------------------------
    def create_booking_status_update(self, data: BookingStatusUpdateData) -> Notification | None:
        if not _has_contact(data.recipient_email, data.recipient_phone):
            return None

        recipient = Recipient.build(
            id=data.recipient_id,
            name=data.recipient_name,
            role=data.recipient_role,
            email=data.recipient_email,
            phone=data.recipient_phone,
        )
        context = {
            "recipientName": data.recipient_name,
            "customerName": data.customer_name,
            "carName": data.car_name,
            "status": data.status,
            "startDate": data.start_date,
            "endDate": data.end_date,
            "pickupLocation": data.pickup_location,
            "returnLocation": data.return_location,
            "bookingReference": data.booking_reference,
        }
        return _build(NotificationType.BOOKING_STATUS_UPDATE, recipient, context, booking_id=data.booking_id)

    def create_fleet_owner_booking_alert(self, data: FleetOwnerBookingAlertData) -> Notification | None:
        if not _has_contact(data.fleet_owner_email, data.fleet_owner_phone):
            return None

        recipient = Recipient.build(
            id=data.fleet_owner_id,
            name=data.fleet_owner_name,
            role=RecipientRole.FLEET_OWNER,
            email=data.fleet_owner_email,
            phone=data.fleet_owner_phone,
        )
        context = {
            "fleetOwnerName": data.fleet_owner_name,
            "customerName": data.customer_name,
            "carName": data.car_name,
            "startDate": data.start_date,
            "endDate": data.end_date,
            "pickupLocation": data.pickup_location,
            "returnLocation": data.return_location,
            "bookingReference": data.booking_reference,
        }
        return _build(NotificationType.FLEET_OWNER_BOOKING_ALERT, recipient, context, booking_id=data.booking_id)

    # -------------------------------------------------------------------
    # Accounts
    # -------------------------------------------------------------------
    def create_otp_notification(self, data: OtpNotificationData) -> Notification:
        recipient = Recipient.build(
            id=data.user_id or "anonymous",
            name=data.email,
            role=RecipientRole.CUSTOMER,
            email=data.email,
        )
        notification_type = (
            NotificationType.OTP_REGISTRATION if data.otp_type == "registration" else NotificationType.OTP_LOGIN
        )
        context = {
            "email": data.email,
            "otpCode": data.otp_code,
            "otpType": data.otp_type,
            "expiresAt": data.expires_at.strftime(DISPLAY_TIME_FORMAT),
        }
        return _build(notification_type, recipient, context, channel=DeliveryChannel.EMAIL)

    def create_welcome_notification(self, data: WelcomeNotificationData) -> Notification:
        name = data.name or data.email
        recipient = Recipient.build(
            id=data.user_id,
            name=name,
            role=RecipientRole.from_user_role(data.role),
            email=data.email,
        )
        context = {"name": name, "email": data.email, "role": data.role}
        return _build(NotificationType.USER_REGISTERED, recipient, context, channel=DeliveryChannel.EMAIL)

    def create_login_confirmation(self, data: LoginConfirmationData) -> Notification:
        name = data.name or data.email
        recipient = Recipient.build(id=data.user_id, name=name, role=RecipientRole.CUSTOMER, email=data.email)
        context = {
            "name": name,
            "email": data.email,
            "loginTime": data.login_time.strftime(DISPLAY_TIME_FORMAT),
            "ipAddress": data.ip_address or "Unknown",
            "userAgent": data.user_agent or "Unknown",
        }
        return _build(NotificationType.LOGIN_CONFIRMATION, recipient, context, channel=DeliveryChannel.EMAIL)

    def create_fleet_owner_approval(self, data: FleetOwnerApprovalData) -> Notification | None:
        if not _has_contact(data.email, data.phone):
            return None

        recipient = Recipient.build(
            id=data.fleet_owner_id,
            name=data.name,
            role=RecipientRole.FLEET_OWNER,
            email=data.email,
            phone=data.phone,
        )
        return _build(NotificationType.FLEET_OWNER_APPROVED, recipient, {"name": data.name})

    # -------------------------------------------------------------------
    # Payouts
    # -------------------------------------------------------------------
    def create_payout_notification(self, data: PayoutNotificationData) -> Notification | None:
        if not _has_contact(data.fleet_owner_email, data.fleet_owner_phone):
            return None

        recipient = Recipient.build(
            id=data.fleet_owner_id,
            name=data.fleet_owner_name,
            role=RecipientRole.FLEET_OWNER,
            email=data.fleet_owner_email,
            phone=data.fleet_owner_phone,
        )
        notification_type = (
            NotificationType.PAYOUT_COMPLETED if data.outcome == "completed" else NotificationType.PAYOUT_FAILED
        )
        context = {
            "fleetOwnerName": data.fleet_owner_name,
            "amount": f"{data.amount:,.2f}",
            "currency": data.currency,
            "payoutId": data.payout_id,
            "bookingReference": data.booking_reference or "N/A",
            "failureReason": data.failure_reason or "Unknown",
        }
        return _build(notification_type, recipient, context, booking_id=data.booking_id)
