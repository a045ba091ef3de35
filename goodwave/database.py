"""Connection to the MongoDB server holding the surf spots."""

from __future__ import annotations

import logging
from typing import Any

import pymongo
from pymongo.database import Database
from pymongo.errors import PyMongoError

DATABASE_NAME = "goodWave"

logger = logging.getLogger(__name__)


class DatabaseConnectionError(RuntimeError):
    """Raised when MongoDB cannot be reached."""


def _open(uri: str, timeout: float, server_api: Any) -> Database:
    options: dict[str, Any] = {"serverSelectionTimeoutMS": int(timeout * 1000)}
    if server_api is not None:
        options["server_api"] = server_api
    try:
        client = pymongo.MongoClient(uri, **options)
    except (PyMongoError, ValueError) as exc:
        logger.error("Connexion Mongo échouée : %s", exc)
        raise DatabaseConnectionError(f"Connexion Mongo échouée : {exc}") from exc
    try:
        client.admin.command("ping")
    except PyMongoError as exc:
        logger.error("MongoDB ping échoué : %s", exc)
        client.close()
        raise DatabaseConnectionError(f"MongoDB ping échoué : {exc}") from exc
    logger.info("Connexion à MongoDB réussie")
    return client.get_database(DATABASE_NAME)


def connect(uri: str, db_name: str) -> Database:
    """Connect with a 10 second timeout and return the goodWave database.

    ``db_name`` is accepted but the database opened is always goodWave.
    """
    return _open(uri, 10.0, None)


def connect_with_options(uri: str, db_name: str, server_api: Any = None) -> Database:
    """Connect with a 20 second timeout and the given server API options.

    ``db_name`` is accepted but the database opened is always goodWave.
    """
    return _open(uri, 20.0, server_api)