"""
Input validation predicates for the login and registration forms.
"""

import re

from quickplan.core.exceptions import ValidationError

# Mainland China mobile numbers: 1, then 3-9, then nine ASCII digits
PHONE_PATTERN = re.compile(r"^1[3-9][0-9]{9}$")

# local@domain where the domain has at least one dot
EMAIL_PATTERN = re.compile(
    r"^[a-zA-Z0-9+._%\-]{1,256}"
    r"@"
    r"[a-zA-Z0-9][a-zA-Z0-9\-]{0,64}"
    r"(\.[a-zA-Z0-9][a-zA-Z0-9\-]{0,25})+$"
)

MIN_PASSWORD_LENGTH = 6


def is_valid_phone(phone: str) -> bool:
    return PHONE_PATTERN.fullmatch(phone) is not None


def is_valid_email(email: str) -> bool:
    return EMAIL_PATTERN.fullmatch(email) is not None


def is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def require_phone(phone: str | None, blank_message: str = "Please enter a phone number") -> None:
    """
    Check a phone number field.

    Raises:
        ValidationError: Blank or malformed number
    """
    if is_blank(phone):
        raise ValidationError(blank_message)
    if not is_valid_phone(phone):
        raise ValidationError("Invalid phone number format")


def require_email(email: str | None, blank_message: str = "Please enter an email address") -> None:
    if is_blank(email):
        raise ValidationError(blank_message)
    if not is_valid_email(email):
        raise ValidationError("Invalid email format")


def require_new_password(password: str | None, confirm_password: str | None) -> None:
    """Check a registration password and its confirmation."""
    if is_blank(password):
        raise ValidationError("Please enter a password")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if password != confirm_password:
        raise ValidationError("Passwords do not match")
