import smtplib

from django.conf import settings
from django.core.mail import send_mail

from apps.common import get_logger

logger = get_logger(__name__).bind(component="auth", layer="mail")

WELCOME_SUBJECT = "Welcome to Our Service!"
WELCOME_BODY = (
    "Hello {name},\n\n"
    "Thank you for registering with us. We're excited to have you on board!\n\n"
    "Best regards,\nYour Service Team"
)


def send_welcome_email(email: str, name: str) -> bool:
    """Send the registration greeting. Delivery problems are logged, never raised."""
    try:
        send_mail(
            WELCOME_SUBJECT,
            WELCOME_BODY.format(name=name),
            settings.DEFAULT_FROM_EMAIL,
            [email],
            fail_silently=False,
        )
    except (smtplib.SMTPException, OSError):
        logger.exception("Welcome email could not be sent", recipient=email)
        return False
    logger.info("Welcome email sent", recipient=email)
    return True
