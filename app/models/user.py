from mongoengine import EmailField, ListField, ObjectIdField, StringField

from app.models.base import BaseDocument
from app.models.validators import (
    normalize_email,
    normalize_name,
    validate_avatar,
    validate_email,
    validate_name,
    validate_password_hash,
    validate_role,
)
from app.services.auth import verify_password, verify_password_async
from app.utils.base import UserRole


class User(BaseDocument):
    """User document.

    Fields:
    - email (str, unique): Login identifier, stored lowercased and trimmed
    - password (str, hashed): Bcrypt hash, never the plaintext
    - name (str): Full name, trimmed
    - role (str): student/teacher/parent/admin
    - avatar (str|None): URL or storage reference
    - class_id (ObjectId|None): a student's class
    - teacher_id (ObjectId|None): the teacher of a student
    - parent_id (ObjectId|None): the parent of a student
    - student_ids (list[ObjectId]): a parent's children or a teacher's students
    - class_ids (list[ObjectId]): a teacher's classes

    Relations are plain identifiers; resolve them with
    ``app.services.directory``.
    """
    email = EmailField(required=True, null=False, unique=True, validation=validate_email)
    password = StringField(required=True, null=False, validation=validate_password_hash)
    name = StringField(required=True, null=False, validation=validate_name)
    role = StringField(required=True, null=False, choices=UserRole.choices(), validation=validate_role)
    avatar = StringField(required=False, null=True, validation=validate_avatar)

    class_id = ObjectIdField(required=False, null=True)
    teacher_id = ObjectIdField(required=False, null=True)
    parent_id = ObjectIdField(required=False, null=True)
    student_ids = ListField(ObjectIdField(), required=False, default=list)
    class_ids = ListField(ObjectIdField(), required=False, default=list)

    _hidden_fields = ("password",)

    meta = {
        "collection": "users",
        "indexes": [
            {"fields": ["email"], "unique": True},
            {"fields": ["role"]},
            {"fields": ["parent_id"]},
        ],
    }

    def clean(self):
        self.email = normalize_email(self.email)
        self.name = normalize_name(self.name)

    def compare_password(self, candidate: str) -> bool:
        return verify_password(candidate, self.password)

    async def compare_password_async(self, candidate: str) -> bool:
        return await verify_password_async(candidate, self.password)

    def __repr__(self):
        return f"<User {self.id} {self.email} ({self.role})>"
