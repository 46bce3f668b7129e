from app.models.school_class import SchoolClass
from app.services import directory
from app.services.users import create_user, delete_user, update_user


def _school(school_class):
    class_5b = SchoolClass(name=" 5B ", grade="5")
    class_5b.save()
    teacher = create_user(
        "teacher@x.com", "secret1", "Tess", "teacher",
        class_ids=[class_5b.id, school_class.id],
    )
    parent = create_user("parent@x.com", "secret1", "Pat", "parent")
    students = [
        create_user(
            f"{name.lower()}@x.com", "secret1", name, "student",
            class_id=school_class.id, teacher_id=teacher.id, parent_id=parent.id,
        )
        for name in ("Zed", "Amy")
    ]
    update_user(parent, student_ids=[s.id for s in students])
    return class_5b, teacher, parent, students


def test_single_reference_lookups(school_class) -> None:
    _, teacher, parent, (zed, _) = _school(school_class)

    assert directory.get_class(zed) == school_class
    assert directory.get_teacher(zed) == teacher
    assert directory.get_parent(zed) == parent
    assert directory.get_parent(parent) is None


def test_list_lookups_keep_stored_order(school_class) -> None:
    class_5b, teacher, parent, (zed, amy) = _school(school_class)

    assert class_5b.name == "5B"
    assert directory.get_classes(teacher) == [class_5b, school_class]
    assert directory.get_students(parent) == [zed, amy]
    assert directory.get_students(teacher) == []


def test_list_lookups_skip_deleted_documents(school_class) -> None:
    _, _, parent, (zed, amy) = _school(school_class)

    delete_user(zed)

    assert directory.get_students(parent) == [amy]


def test_reverse_lookups(school_class) -> None:
    _, _, parent, (zed, amy) = _school(school_class)

    assert directory.get_children(parent) == [zed, amy]
    assert directory.get_class_members(school_class) == [amy, zed]
