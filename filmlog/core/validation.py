"""Input validation and sanitisation shared by the services.

Each validator raises ``ValidationError`` before anything is written.
Length limits on owned resources are checked here rather than in the
request schemas, so that a non-owner is refused before their payload is
looked at.
"""

import math
import re

import email_validator

from filmlog.core.exceptions import ErrorCode, ValidationError

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 20
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 128
EMAIL_MAX_LENGTH = 255
DISPLAY_NAME_MAX_LENGTH = 50
LIST_NAME_MAX_LENGTH = 100
LIST_DESCRIPTION_MAX_LENGTH = 2000
LIST_NOTES_MAX_LENGTH = 2000
REVIEW_TEXT_MAX_LENGTH = 10000

RATING_MIN = 0.5
RATING_MAX = 5.0

_USERNAME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9_]*$")
# Control characters except \t (0x09) and \n (0x0a)
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x08\x0b-\x1f\x7f]")


def sanitize_text(value: str | None) -> str | None:
    """Trim whitespace and strip NUL and control characters.

    Newlines and tabs are preserved. ``None`` passes through.
    """
    if value is None:
        return None
    return _CONTROL_CHARS_RE.sub("", value).strip()


def validate_username(username: str) -> str:
    if not (USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH):
        raise ValidationError.for_field(
            "username",
            f"Username must be {USERNAME_MIN_LENGTH}-{USERNAME_MAX_LENGTH} characters",
        )
    if not _USERNAME_RE.match(username):
        raise ValidationError.for_field(
            "username",
            "Username must start with a letter and contain only letters, numbers and underscores",
        )
    return username


def validate_email(email: str) -> str:
    """Check the address syntax and return its normalised form.

    Deliverability (DNS) is not checked.
    """
    email = email.strip()
    if len(email) > EMAIL_MAX_LENGTH:
        raise ValidationError.for_field("email", "Invalid email address")
    try:
        result = email_validator.validate_email(email, check_deliverability=False)
    except email_validator.EmailNotValidError:
        raise ValidationError.for_field("email", "Invalid email address") from None
    return result.normalized


def validate_password(password: str) -> str:
    if len(password) < PASSWORD_MIN_LENGTH:
        raise ValidationError.for_field(
            "password",
            f"Password must be at least {PASSWORD_MIN_LENGTH} characters",
        )
    if len(password) > PASSWORD_MAX_LENGTH:
        raise ValidationError.for_field(
            "password",
            f"Password must be at most {PASSWORD_MAX_LENGTH} characters",
        )
    return password


def validate_display_name(display_name: str | None) -> str | None:
    display_name = sanitize_text(display_name)
    if display_name and len(display_name) > DISPLAY_NAME_MAX_LENGTH:
        raise ValidationError.for_field(
            "display_name",
            f"Display name must be at most {DISPLAY_NAME_MAX_LENGTH} characters",
        )
    return display_name or None


def validate_rating(rating: float | None) -> float | None:
    """Check that a rating lies on the half-star grid between 0.5 and 5.0.

    ``None`` means "no rating" and is accepted.
    """
    if rating is None:
        return None
    if (
        not math.isfinite(rating)
        or rating < RATING_MIN
        or rating > RATING_MAX
        or not float(rating * 2).is_integer()
    ):
        raise ValidationError.for_field(
            "rating",
            "Rating must be between 0.5 and 5 in 0.5 increments",
            code=ErrorCode.INVALID_RATING,
        )
    return float(rating)


def validate_list_name(name: str | None) -> str:
    name = sanitize_text(name)
    if not name:
        raise ValidationError.for_field("name", "List name is required")
    if len(name) > LIST_NAME_MAX_LENGTH:
        raise ValidationError.for_field(
            "name",
            f"List name must be at most {LIST_NAME_MAX_LENGTH} characters",
        )
    return name


def _optional_text(value: str | None, field: str, label: str, max_length: int) -> str | None:
    value = sanitize_text(value)
    if value and len(value) > max_length:
        raise ValidationError.for_field(
            field, f"{label} must be at most {max_length} characters"
        )
    return value or None


def validate_list_description(description: str | None) -> str | None:
    return _optional_text(
        description, "description", "Description", LIST_DESCRIPTION_MAX_LENGTH
    )


def validate_list_notes(notes: str | None) -> str | None:
    return _optional_text(notes, "notes", "Notes", LIST_NOTES_MAX_LENGTH)


def validate_review_text(review_text: str | None) -> str | None:
    return _optional_text(
        review_text, "review_text", "Review text", REVIEW_TEXT_MAX_LENGTH
    )
