"""Identity sagas: welcome, login confirmation, approval and OTP delivery.

The OTP orchestrator is the one handler that raises: a user waiting on a
passcode must see the failure, so it propagates to whoever published
``OtpGenerated``.
"""

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.mixins import handle

from hyre.domain import hyre
from notifications.notification.notification import Notification
from notifications.notification.payloads import (
    FleetOwnerApprovalData,
    LoginConfirmationData,
    OtpNotificationData,
    WelcomeNotificationData,
)
from orchestration.base import FLEET_OWNER_FALLBACK, contained
from orchestration.collaborators import NOTIFICATIONS, OTP_STORE, PROFILES, get_collaborator
from shared.events.identity import FleetOwnerApproved, OtpGenerated, UserLoggedIn, UserRegistered

logger = structlog.get_logger(__name__)

hyre.register_external_event(UserRegistered, "Identity.UserRegistered.v1")
hyre.register_external_event(UserLoggedIn, "Identity.UserLoggedIn.v1")
hyre.register_external_event(FleetOwnerApproved, "Identity.FleetOwnerApproved.v1")
hyre.register_external_event(OtpGenerated, "Identity.OtpGenerated.v1")


@hyre.event_handler(part_of=Notification, stream_category="identity::user")
class AccountEventsHandler:
    """Reacts to Identity events with account notifications."""

    @handle(UserRegistered)
    @contained
    def on_user_registered(self, event: UserRegistered) -> None:
        get_collaborator(NOTIFICATIONS).send_welcome(
            WelcomeNotificationData(
                user_id=str(event.user_id),
                email=event.email,
                role=event.role,
                name=event.name,
            )
        )
        logger.info("Welcome notification sent", user_id=str(event.user_id), role=event.role)

    @handle(UserLoggedIn)
    @contained
    def on_user_logged_in(self, event: UserLoggedIn) -> None:
        profile = get_collaborator(PROFILES).get_user_by_id(str(event.user_id))
        if profile is None or not profile.email:
            logger.warning("Skipping login confirmation, no email on file", user_id=str(event.user_id))
            return

        get_collaborator(NOTIFICATIONS).send_login_confirmation(
            LoginConfirmationData(
                user_id=profile.id,
                email=profile.email,
                name=profile.name,
                login_time=event.login_time,
                ip_address=event.ip_address,
                user_agent=event.user_agent,
            )
        )

    @handle(FleetOwnerApproved)
    @contained
    def on_fleet_owner_approved(self, event: FleetOwnerApproved) -> None:
        profile = get_collaborator(PROFILES).get_user_by_id(str(event.fleet_owner_id))
        if profile is None:
            logger.warning(
                "Fleet owner not found, skipping approval notice",
                fleet_owner_id=str(event.fleet_owner_id),
            )
            return

        summary = get_collaborator(NOTIFICATIONS).send_fleet_owner_approval(
            FleetOwnerApprovalData(
                fleet_owner_id=profile.id,
                name=profile.name or FLEET_OWNER_FALLBACK,
                email=profile.email,
                phone=profile.phone,
            )
        )
        logger.info(summary, fleet_owner_id=profile.id, approved_by=event.approved_by)


@hyre.event_handler(part_of=Notification, stream_category="identity::otp")
class OtpNotificationHandler:
    @handle(OtpGenerated)
    def on_otp_generated(self, event: OtpGenerated) -> None:
        try:
            code = get_collaborator(OTP_STORE).get_otp(event.email)
            if not code:
                raise ObjectNotFoundError(f"No active OTP for {event.email}")

            get_collaborator(NOTIFICATIONS).send_otp(
                OtpNotificationData(
                    email=event.email,
                    otp_code=code,
                    otp_type=event.otp_type,
                    expires_at=event.expires_at,
                    user_id=str(event.user_id) if event.user_id else None,
                )
            )
        except Exception as exc:
            logger.error(
                "OTP delivery failed",
                email=event.email,
                otp_type=event.otp_type,
                error=str(exc),
            )
            raise
        logger.info("OTP notification sent", email=event.email, otp_type=event.otp_type)
