"""Account notifications: OTP codes, welcome messages, login confirmation and approvals."""

from notifications.notification.notification import NotificationType
from notifications.notification.recipient import RecipientRole
from notifications.templates.base import NotificationTemplate


class RegistrationOtpTemplate(NotificationTemplate):
    notification_type = NotificationType.OTP_REGISTRATION
    role = RecipientRole.CUSTOMER
    subject = "Welcome to Hyre! Complete your registration"
    body = """\
        Welcome to Hyre!

        Thank you for joining our premium car rental service. To complete your registration, please use the verification code below:

        Verification Code: {{otpCode}}

        This code expires at {{expiresAt}}

        Security Notice:
        Never share this code with anyone. If you didn't request this code, please ignore this email.

        Welcome aboard!
        The Hyre Team
        """


class LoginOtpTemplate(NotificationTemplate):
    notification_type = NotificationType.OTP_LOGIN
    role = RecipientRole.CUSTOMER
    subject = "Login to Hyre - Verification Code"
    body = """\
        Welcome back to Hyre!

        Here's your verification code to log in to your account:

        Verification Code: {{otpCode}}

        This code expires at {{expiresAt}}

        Security Notice:
        Never share this code with anyone. If you didn't request this code, please secure your account immediately.

        Best regards,
        The Hyre Team
        """


class _WelcomeTemplate(NotificationTemplate):
    notification_type = NotificationType.USER_REGISTERED
    subject = "Welcome to Hyre! Your account is ready"
    intro = ""
    next_step = ""

    @property
    def body(self):
        return f"""\
        Welcome to Hyre, {{{{name}}}}!

        Your account has been successfully created and is ready to use.

        {self.intro}

        Getting Started:
        1. Complete your profile setup
        2. {self.next_step}
        3. Explore our premium services

        Welcome to the Hyre family!
        The Hyre Team
        """


class CustomerWelcomeTemplate(_WelcomeTemplate):
    role = RecipientRole.CUSTOMER
    intro = "As a Customer, you can now book premium vehicles and chauffeur services."
    next_step = "Browse our fleet and make your first booking"


class ChauffeurWelcomeTemplate(_WelcomeTemplate):
    role = RecipientRole.CHAUFFEUR
    intro = "As a Chauffeur, you're ready to provide exceptional service to our premium customers."
    next_step = "Complete your driver verification"


class FleetOwnerWelcomeTemplate(_WelcomeTemplate):
    role = RecipientRole.FLEET_OWNER
    intro = "As a Fleet Owner, you can now list your premium vehicles and start earning with Hyre."
    next_step = "Add your vehicles to start earning"


class LoginConfirmationTemplate(NotificationTemplate):
    notification_type = NotificationType.LOGIN_CONFIRMATION
    role = RecipientRole.CUSTOMER
    subject = "Login confirmation - Hyre"
    body = """\
        Hello {{name}},

        This is to confirm that you successfully logged into your Hyre account.

        Login Details:
        - Time: {{loginTime}}
        - IP Address: {{ipAddress}}
        - Device: {{userAgent}}

        If this wasn't you, please secure your account immediately and contact our support team.

        Best regards,
        The Hyre Team
        """


class FleetOwnerApprovedTemplate(NotificationTemplate):
    notification_type = NotificationType.FLEET_OWNER_APPROVED
    role = RecipientRole.FLEET_OWNER
    subject = "Your Hyre fleet owner account has been approved"
    body = """\
        Dear {{name}},

        Your fleet owner account has been approved. You can now list vehicles and receive bookings.

        Next steps:
        1. Add your vehicles and their availability
        2. Add your bank account details for payouts

        Best regards,
        The Hyre Team
        """
