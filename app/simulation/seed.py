from __future__ import annotations

import logging
import sys

from app.connections.mongo import mongo_connection
from app.models.school_class import SchoolClass
from app.models.user import User
from app.services.users import create_user, update_user
from app.utils.base import UserRole
from app.utils.config import settings


logger = logging.getLogger(__name__)

DEFAULT_PASSWORD = "Secret123!"


def _ensure_classes() -> list[SchoolClass]:
    classes: list[SchoolClass] = []
    for name, grade in (("5A", "5"), ("5B", "5")):
        school_class = SchoolClass.objects(name=name).first()
        if not school_class:
            school_class = SchoolClass(name=name, grade=grade)
            school_class.save()
        classes.append(school_class)
    return classes


def _ensure_users(classes: list[SchoolClass]) -> list[User]:
    class_5a, class_5b = classes

    admin = create_user("admin@school.example", DEFAULT_PASSWORD, "Ada Admin", UserRole.ADMIN.value)
    teacher = create_user(
        "turing@school.example",
        DEFAULT_PASSWORD,
        "Alan Turing",
        UserRole.TEACHER.value,
        class_ids=[class_5a.id, class_5b.id],
    )
    parent = create_user("parent@school.example", DEFAULT_PASSWORD, "Pat Parent", UserRole.PARENT.value)

    students: list[User] = []
    fixtures = [
        ("alice@school.example", "Alice Example", class_5a),
        ("bob@school.example", "Bob Example", class_5b),
    ]
    for email, name, school_class in fixtures:
        students.append(create_user(
            email,
            DEFAULT_PASSWORD,
            name,
            UserRole.STUDENT.value,
            class_id=school_class.id,
            teacher_id=teacher.id,
            parent_id=parent.id,
        ))

    student_ids = [student.id for student in students]
    update_user(parent, student_ids=student_ids)
    update_user(teacher, student_ids=student_ids)
    return [admin, teacher, parent, *students]


def seed() -> None:
    with mongo_connection():
        # Purge existing data so fixture emails never collide
        User.drop_collection()
        SchoolClass.drop_collection()

        classes = _ensure_classes()
        users = _ensure_users(classes)
        logger.info("Seed completed: %d classes, %d users", len(classes), len(users))


def main() -> int:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=[logging.StreamHandler()],
    )
    try:
        seed()
    except Exception:
        logger.exception("Seed failed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
