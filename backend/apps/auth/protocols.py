from __future__ import annotations

from typing import Any, Protocol


class UserRegistrationRepositoryProtocol(Protocol):
    def username_exists(self, username: str) -> bool:
        ...

    def email_exists(self, email: str) -> bool:
        ...

    def create_user(self, password: str, **data: Any) -> Any:
        ...


class WelcomeMailerProtocol(Protocol):
    def __call__(self, email: str, name: str) -> bool:
        ...
