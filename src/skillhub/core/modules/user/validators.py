from skillhub.errors import ValidationError
from skillhub.utils import is_blank

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


def require_fields(message: str, *values: str | None) -> list[str]:
    """Return values unchanged, or raise ValidationError with message if any is missing or blank."""
    present = [value for value in values if value is not None and not is_blank(value)]
    if len(present) != len(values):
        raise ValidationError(message)
    return present


def validate_email(email: str) -> None:
    local, sep, domain = email.partition("@")
    if not sep or not local or not domain or any(char.isspace() for char in email):
        raise ValidationError("Invalid email address")


def validate_password(password: str) -> None:
    """Validate password meets requirements.

    Requirements:
    - Not blank
    - At most 72 bytes when UTF-8 encoded

    Raises:
        ValidationError: If password doesn't meet requirements
    """
    if is_blank(password):
        raise ValidationError("Password is required")

    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password cannot be longer than {MAX_PASSWORD_BYTES} bytes")
