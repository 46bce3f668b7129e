import logging
from contextlib import contextmanager
from typing import Any, Iterator

import certifi
from mongoengine import connect, disconnect

from app.utils.config import settings


logger = logging.getLogger(__name__)


def init_mongo(**overrides: Any) -> None:
    """Open the default mongoengine connection.

    Keyword overrides are passed straight to ``mongoengine.connect`` and win
    over the values derived from settings.
    """
    options: dict[str, Any] = {"host": settings.mongo_uri, "alias": "default", "tz_aware": True}
    if settings.mongo_srv:
        options["tlsCAFile"] = certifi.where()
    options.update(overrides)
    connect(**options)
    logger.info("Connected to MongoDB database %s", settings.mongo_db)


def close_mongo() -> None:
    disconnect(alias="default")
    logger.info("Disconnected from MongoDB")


@contextmanager
def mongo_connection(**overrides: Any) -> Iterator[None]:
    init_mongo(**overrides)
    try:
        yield
    finally:
        close_mongo()
