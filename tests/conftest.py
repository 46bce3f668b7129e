import mongomock
import pytest

from app.connections import close_mongo, init_mongo
from app.models.school_class import SchoolClass
from app.models.user import User
from app.services.users import create_user


@pytest.fixture(autouse=True)
def mongo():
    init_mongo(
        host="mongodb://localhost",
        db="school_portal_test",
        mongo_client_class=mongomock.MongoClient,
    )
    User.ensure_indexes()
    SchoolClass.ensure_indexes()
    yield
    User.drop_collection()
    SchoolClass.drop_collection()
    close_mongo()


@pytest.fixture
def alice() -> User:
    return create_user(" Alice@X.com ", "secret1", "Alice", "student")


@pytest.fixture
def school_class() -> SchoolClass:
    school_class = SchoolClass(name="5A", grade="5")
    school_class.save()
    return school_class
