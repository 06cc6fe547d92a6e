from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Union

from rest_framework_simplejwt.tokens import RefreshToken

from apps.api.utils import ServiceError
from apps.common import get_logger
from apps.users.models import DEFAULT_AVATAR_URL
from .protocols import UserRegistrationRepositoryProtocol, WelcomeMailerProtocol

logger = get_logger(__name__).bind(component="auth", service="RegistrationService")


def issue_token_pair(user) -> Dict[str, str]:
    refresh = RefreshToken.for_user(user)
    return {"access": str(refresh.access_token), "refresh": str(refresh)}


class RegistrationService:
    def __init__(
        self,
        users: UserRegistrationRepositoryProtocol,
        mailer: WelcomeMailerProtocol,
        token_issuer: Callable[[Any], Dict[str, str]] = issue_token_pair,
    ):
        self.users = users
        self.mailer = mailer
        self.token_issuer = token_issuer
        self.logger = logger

    def _build_payload(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "username": data["username"].strip(),
            "email": data["email"].strip(),
            "name": data["name"].strip(),
            "phone": data["phone"].strip(),
            "gender": data["gender"].upper(),
            "address": data.get("address") or None,
            "dob": data.get("dob"),
            "avatar_url": data.get("avatarUrl") or DEFAULT_AVATAR_URL,
        }

    def _check_uniqueness(self, username: str, email: str) -> Optional[ServiceError]:
        if self.users.username_exists(username) or self.users.email_exists(email):
            self.logger.info(
                "Registration rejected: identity taken", username=username, email=email
            )
            return (
                "VALIDATION_ERROR",
                "Username or email is already taken",
                {"username": username, "email": email},
            )
        return None

    def register(self, data: Dict[str, Any]) -> Union[Dict[str, Any], ServiceError]:
        """Create the account, greet it by mail and hand back a token pair."""
        payload = self._build_payload(data)
        self.logger.debug(
            "Received registration request",
            username=payload["username"],
            email=payload["email"],
        )
        conflict = self._check_uniqueness(payload["username"], payload["email"])
        if conflict:
            return conflict
        user = self.users.create_user(password=data["password"], **payload)
        self.logger.info(
            "User registered successfully", user_id=user.id, username=user.username
        )
        self.mailer(user.email, user.name)
        return {"user": user, **self.token_issuer(user)}
