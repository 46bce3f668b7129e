from mongoengine import StringField

from app.models.base import BaseDocument
from app.models.validators import normalize_name, validate_name


class SchoolClass(BaseDocument):
    """Class (form/homeroom) that students belong to and teachers teach.

    Fields:
    - name (str, unique): e.g. "5B"
    - grade (str|None)
    """
    name = StringField(required=True, null=False, unique=True, validation=validate_name)
    grade = StringField(required=False, null=True)

    meta = {
        "collection": "classes",
        "indexes": [
            {"fields": ["name"], "unique": True},
        ],
    }

    def clean(self):
        self.name = normalize_name(self.name)
