import re

from rest_framework import serializers

_USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9._]+$")

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 8


def validate_username(value: str) -> str:
    """Trimmed, at least three characters of letters, digits, dots or underscores."""
    if value is None:
        raise serializers.ValidationError("Username is required.")
    trimmed = value.strip()
    if len(trimmed) < MIN_USERNAME_LENGTH:
        raise serializers.ValidationError(
            f"Username must be at least {MIN_USERNAME_LENGTH} characters long."
        )
    if not _USERNAME_PATTERN.match(trimmed):
        raise serializers.ValidationError(
            "Username may contain only letters, numbers, dots and underscores."
        )
    return trimmed


def validate_password(value: str) -> str:
    if value is None:
        raise serializers.ValidationError("Password is required.")
    if len(value) < MIN_PASSWORD_LENGTH:
        raise serializers.ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long."
        )
    if not any(ch.isalpha() for ch in value) or not any(ch.isdigit() for ch in value):
        raise serializers.ValidationError(
            "Password must include at least one letter and one number."
        )
    return value


def validate_gender(value: str) -> str:
    from apps.users.models import User

    normalized = (value or "").strip().upper()
    if normalized not in User.Gender.values:
        allowed = ", ".join(User.Gender.values)
        raise serializers.ValidationError(f"Gender must be one of: {allowed}.")
    return normalized
