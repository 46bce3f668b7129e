"""Resolve the identifier-only relations stored on a user.

Nothing here follows a reference implicitly; callers ask for the related
document when they need it. Lookups for lists keep the stored order and
drop identifiers that no longer resolve (the referenced document was
deleted, there is no cascade).
"""
from __future__ import annotations

from typing import Iterable, TypeVar

from bson.objectid import ObjectId

from app.models.school_class import SchoolClass
from app.models.user import User
from app.utils.base import UserRole


D = TypeVar("D", User, SchoolClass)


def _get_one(document_type: type[D], object_id: ObjectId | None) -> D | None:
    if object_id is None:
        return None
    return document_type.objects(id=object_id).first()


def _get_many(document_type: type[D], object_ids: Iterable[ObjectId] | None) -> list[D]:
    ids = list(object_ids or [])
    if not ids:
        return []
    found = {doc.id: doc for doc in document_type.objects(id__in=ids)}
    return [found[object_id] for object_id in ids if object_id in found]


def get_class(user: User) -> SchoolClass | None:
    return _get_one(SchoolClass, user.class_id)


def get_classes(user: User) -> list[SchoolClass]:
    return _get_many(SchoolClass, user.class_ids)


def get_teacher(user: User) -> User | None:
    return _get_one(User, user.teacher_id)


def get_parent(user: User) -> User | None:
    return _get_one(User, user.parent_id)


def get_students(user: User) -> list[User]:
    return _get_many(User, user.student_ids)


def get_children(parent: User) -> list[User]:
    """Students whose ``parent_id`` points at ``parent``, oldest account first."""
    if parent.id is None:
        return []
    return list(
        User.objects(parent_id=parent.id, role=UserRole.STUDENT.value).order_by("created_at")
    )


def get_class_members(school_class: SchoolClass) -> list[User]:
    """Students whose ``class_id`` points at ``school_class``."""
    if school_class.id is None:
        return []
    return list(
        User.objects(class_id=school_class.id, role=UserRole.STUDENT.value).order_by("name")
    )
