from __future__ import annotations

from .mail import send_welcome_email
from .repositories import DjangoUserRegistrationRepository
from .services import RegistrationService


def build_registration_service() -> RegistrationService:
    return RegistrationService(
        users=DjangoUserRegistrationRepository(), mailer=send_welcome_email
    )
