"""Field-level validation and normalization for user documents.

Every validator takes the raw value and raises
:class:`mongoengine.errors.ValidationError` when it is unacceptable. They are
attached to the document fields through ``validation=`` and are also run by
the user repository before a password is hashed, so bad input is rejected
before any CPU is spent on bcrypt.
"""
import re
from typing import Any, Callable, Iterable

from bson.objectid import ObjectId
from mongoengine.errors import ValidationError

from app.services.auth import is_password_hash
from app.utils.base import UserRole
from app.utils.config import settings


_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_email(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().lower()
    return value


def normalize_name(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip()
    return value


def validate_email(value: Any) -> None:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Email is required")
    if not _EMAIL_RE.match(value.strip()):
        raise ValidationError(f"Invalid email address: {value!r}")


def validate_password(value: Any) -> None:
    """Check a plaintext password before it is hashed."""
    if not isinstance(value, str) or not value:
        raise ValidationError("Password is required")
    if len(value) < settings.password_min_length:
        raise ValidationError(
            f"Password must be at least {settings.password_min_length} characters"
        )


def validate_password_hash(value: Any) -> None:
    """Check the value about to be persisted is a hash, never plaintext."""
    if not is_password_hash(value):
        raise ValidationError("Password must be stored as a hash")


def validate_name(value: Any) -> None:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Name is required")


def validate_role(value: Any) -> None:
    if value not in UserRole.values():
        raise ValidationError(
            f"Role must be one of {', '.join(UserRole.values())}, got {value!r}"
        )


def validate_avatar(value: Any) -> None:
    if value is not None and not isinstance(value, str):
        raise ValidationError("Avatar must be a string")


def validate_reference(value: Any) -> None:
    if value is not None and not ObjectId.is_valid(value):
        raise ValidationError(f"Invalid identifier: {value!r}")


def validate_references(values: Any) -> None:
    if values is None:
        return
    if isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
        raise ValidationError("Expected a list of identifiers")
    for value in values:
        if value is None:
            raise ValidationError("Identifier lists cannot contain nulls")
        validate_reference(value)


FIELD_VALIDATORS: dict[str, Callable[[Any], None]] = {
    "email": validate_email,
    "password": validate_password,
    "name": validate_name,
    "role": validate_role,
    "avatar": validate_avatar,
    "class_id": validate_reference,
    "teacher_id": validate_reference,
    "parent_id": validate_reference,
    "student_ids": validate_references,
    "class_ids": validate_references,
}

REQUIRED_FIELDS = ("email", "password", "name", "role")


def validate_user_fields(values: dict[str, Any], partial: bool = False) -> None:
    """Validate raw user values, collecting one error per bad field.

    With ``partial`` set, missing required fields are not reported; used for
    updates that only touch some fields.
    """
    errors: dict[str, ValidationError] = {}

    unknown = sorted(set(values) - set(FIELD_VALIDATORS))
    for field in unknown:
        errors[field] = ValidationError(f"Unknown user field: {field}", field_name=field)

    if not partial:
        for field in REQUIRED_FIELDS:
            if field not in values:
                errors[field] = ValidationError(f"Field is required: {field}", field_name=field)

    for field, value in values.items():
        validator = FIELD_VALIDATORS.get(field)
        if validator is None or field in errors:
            continue
        try:
            validator(value)
        except ValidationError as exc:
            errors[field] = ValidationError(exc.message, field_name=field)

    if errors:
        raise ValidationError("Invalid user fields", errors=errors)
