import re

from clarity.errors import ValidationError

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_email(email: str) -> str:
    """Lower-case and validate an email address.

    Raises:
        ValidationError: If the address is not of the form local@domain.tld
    """
    email = email.strip().lower()
    if not EMAIL_RE.fullmatch(email):
        raise ValidationError(f"Invalid email address: '{email}'")
    return email


def validate_password(password: str) -> None:
    """Validate password meets requirements.

    Requirements:
    - No whitespace characters
    - Minimum length of 6 characters

    Raises:
        ValidationError: If password doesn't meet requirements
    """
    if len(password) < 6:
        raise ValidationError("Password must be at least 6 characters long")

    if any(char.isspace() for char in password):
        raise ValidationError("Password cannot contain whitespace characters")
