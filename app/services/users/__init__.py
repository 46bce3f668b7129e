"""User repository.

All writes of a :class:`User` go through this module so that a plaintext
password is replaced by its bcrypt hash immediately before the document is
inserted or updated. Email uniqueness is left to the unique index on the
``users`` collection; a duplicate surfaces as
:class:`mongoengine.errors.NotUniqueError` from ``save``.
"""
from __future__ import annotations

import logging
from typing import Any

from bson.objectid import ObjectId
from mongoengine.errors import ValidationError

from app.models.user import User
from app.models.validators import normalize_email, normalize_name, validate_user_fields
from app.services.auth import hash_password, pwd_context


logger = logging.getLogger(__name__)

_REFERENCE_FIELDS = ("class_id", "teacher_id", "parent_id")
_REFERENCE_LIST_FIELDS = ("student_ids", "class_ids")


def _normalize(values: dict[str, Any]) -> dict[str, Any]:
    values = dict(values)
    if "email" in values:
        values["email"] = normalize_email(values["email"])
    if "name" in values:
        values["name"] = normalize_name(values["name"])
    return values


def _coerce_references(values: dict[str, Any]) -> dict[str, Any]:
    for field in _REFERENCE_FIELDS:
        if values.get(field) is not None:
            values[field] = ObjectId(values[field])
    for field in _REFERENCE_LIST_FIELDS:
        if field in values:
            values[field] = [ObjectId(v) for v in (values[field] or [])]
    return values


def password_was_modified(user: User) -> bool:
    """True for a document never saved, or one whose password was reassigned."""
    return bool(user._created or "password" in user._get_changed_fields())


def prepare_for_write(user: User, password_changed: bool) -> User:
    """Substitute the bcrypt hash for the plaintext password about to be written.

    A no-op when ``password_changed`` is false. Each call with the flag set
    salts afresh, so the same plaintext never hashes to the same value twice.
    If hashing fails, :class:`PasswordHashingError` propagates and
    ``user.password`` is left as it was on entry, i.e. still the unhashed
    value the caller assigned; callers must not save the record.
    """
    if not password_changed:
        return user
    user.password = hash_password(user.password)
    logger.debug("Hashed password for user %s", user.id)
    return user


def _prepare_password(user: User, password_changed: bool) -> User:
    if password_changed:
        validate_user_fields({"password": user.password}, partial=True)
    return prepare_for_write(user, password_changed)


def save_user(user: User) -> User:
    """Persist ``user``, hashing the password only if it was modified since load.

    A modified password is checked against the plaintext rules first.
    """
    _prepare_password(user, password_was_modified(user))
    user.save()
    return user


def create_user(email: str, password: str, name: str, role: str, **extra: Any) -> User:
    """Insert a new user.

    ``extra`` may carry ``avatar`` and the relation identifiers. Every field
    is validated before the password is hashed.
    """
    values = _normalize({"email": email, "password": password, "name": name, "role": role, **extra})
    validate_user_fields(values)
    user = User(**_coerce_references(values))
    prepare_for_write(user, password_changed=True)
    user.save(force_insert=True)
    logger.info("Created %s user %s", user.role, user.id)
    return user


def update_user(user: User, **changes: Any) -> User:
    """Apply ``changes`` to a persisted user and save the changed fields.

    The password is re-hashed when it is part of ``changes`` or was already
    reassigned on ``user`` since it was loaded.
    """
    if not changes:
        return save_user(user)
    changes = _normalize(changes)
    validate_user_fields(changes, partial=True)
    for field, value in _coerce_references(changes).items():
        setattr(user, field, value)
    _prepare_password(user, "password" in changes or password_was_modified(user))
    user.save()
    logger.info("Updated user %s fields: %s", user.id, ", ".join(sorted(changes)))
    return user


def change_password(user: User, new_password: str) -> User:
    """Set a new password, always re-hashing with a fresh salt."""
    validate_user_fields({"password": new_password}, partial=True)
    user.password = new_password
    prepare_for_write(user, password_changed=True)
    user.save()
    logger.info("Changed password for user %s", user.id)
    return user


def find_by_email(email: str) -> User | None:
    normalized = normalize_email(email)
    if not isinstance(normalized, str) or not normalized:
        return None
    return User.objects(email=normalized).first()


def find_by_id(user_id: str | ObjectId) -> User | None:
    if not ObjectId.is_valid(user_id):
        return None
    return User.objects(id=user_id).first()


def delete_user(user: User) -> None:
    if user.id is None:
        raise ValidationError("Cannot delete a user that was never saved")
    user_id = user.id
    user.delete()
    logger.info("Deleted user %s", user_id)


def verify_credentials(email: str, password: str) -> User | None:
    """Return the user when ``password`` matches the one stored for ``email``.

    Unknown emails still cost one bcrypt round so the two failure cases take
    the same time.
    """
    user = find_by_email(email)
    if user is None:
        pwd_context.dummy_verify()
        return None
    if not user.compare_password(password):
        return None
    return user
