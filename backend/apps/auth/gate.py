from typing import Any, Optional, Tuple, Union

from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication

from apps.api.exceptions import UnauthorizedError
from apps.common import get_logger

logger = get_logger(__name__).bind(component="auth", layer="gate")

HEADER_ENCODING = "iso-8859-1"


class AuthGate:
    """Turns a presented ``Authorization`` header into a user or a rejection.

    Parsing, signature and expiry checks are delegated to simplejwt's
    ``JWTAuthentication`` so the gate follows the ``SIMPLE_JWT`` settings.
    Every failure surfaces as :class:`UnauthorizedError` and nothing else.
    """

    def __init__(self, authenticator: Optional[JWTAuthentication] = None):
        self.authenticator = authenticator or JWTAuthentication()

    def authenticate(self, header: Optional[Union[str, bytes]]) -> Tuple[Any, Any]:
        if not header:
            logger.debug("Rejecting request without credential")
            raise UnauthorizedError("Authentication required")
        raw_header = self._encode(header)
        try:
            raw_token = self.authenticator.get_raw_token(raw_header)
        except AuthenticationFailed as exc:
            logger.warning("Malformed authorization header", error=str(exc))
            raise UnauthorizedError("Malformed authorization header") from exc
        if raw_token is None:
            logger.warning("Authorization header uses an unsupported scheme")
            raise UnauthorizedError("Authorization header must use the Bearer scheme")
        try:
            token = self.authenticator.get_validated_token(raw_token)
            user = self.authenticator.get_user(token)
        except AuthenticationFailed as exc:
            # InvalidToken is a subclass; also covers unknown and inactive users
            logger.warning("Credential rejected", error=str(exc))
            raise UnauthorizedError("Invalid or expired token") from exc
        if user is None or not getattr(user, "is_active", True):
            logger.warning("Credential names an unusable account")
            raise UnauthorizedError("Invalid or expired token")
        logger.debug("Credential accepted", user_id=getattr(user, "id", None))
        return user, token

    def resolve_user_id(self, header: Optional[Union[str, bytes]]) -> int:
        user, _ = self.authenticate(header)
        return int(user.id)

    @staticmethod
    def _encode(header: Union[str, bytes]) -> bytes:
        if isinstance(header, bytes):
            return header
        try:
            return header.encode(HEADER_ENCODING)
        except UnicodeEncodeError as exc:
            raise UnauthorizedError("Malformed authorization header") from exc
