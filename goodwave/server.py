"""Command that starts the surf spot HTTP server."""

from __future__ import annotations

import argparse
import logging
import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv
from pymongo.server_api import ServerApi

from goodwave.api import create_app
from goodwave.database import DatabaseConnectionError, connect_with_options

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    """Connection settings read from the environment."""

    mongodb_uri: str
    db_name: str


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Read the MongoDB settings; raise ValueError when one is missing."""
    env = os.environ if environ is None else environ
    values = []
    for name in ("MONGODB_URI", "MONGODB_DB_NAME"):
        value = env.get(name, "")
        if not value:
            raise ValueError(f"La variable d'environnement {name} n'est pas définie")
        values.append(value)
    return Settings(*values)


def main(argv: Sequence[str] | None = None) -> int:
    """Load the settings, connect to MongoDB and serve the API."""
    parser = argparse.ArgumentParser(prog="goodwave", description="Serve the surf spot API.")
    parser.add_argument("--env-file", default=".env")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8080)
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)

    if not Path(args.env_file).is_file():
        logger.error("Erreur lors du chargement du fichier .env")
        return 1
    load_dotenv(args.env_file)
    try:
        settings = load_settings(os.environ)
        database = connect_with_options(settings.mongodb_uri, settings.db_name, ServerApi("1"))
    except ValueError as exc:
        logger.error("%s", exc)
        return 1
    except DatabaseConnectionError as exc:
        logger.error("Erreur de connexion à MongoDB: %s", exc)
        return 1

    create_app(database).run(host=args.host, port=args.port)
    return 0