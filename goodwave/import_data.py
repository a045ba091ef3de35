"""Command that loads converted surf spot records into MongoDB."""

from __future__ import annotations

import argparse
import json
import os
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId
from dotenv import load_dotenv
from pymongo.errors import PyMongoError
from pymongo.server_api import ServerApi

from goodwave.database import DatabaseConnectionError, connect_with_options
from goodwave.models import SurfSpot
from goodwave.server import load_settings


def to_string_list(values: Any) -> list[str]:
    """Return ``values`` as a list of strings; raise ValueError otherwise."""
    if not isinstance(values, (list, tuple)) or not all(isinstance(v, str) for v in values):
        raise ValueError("expected a list of strings")
    return list(values)


def photo_url(photos: Any) -> str:
    """Return the URL of the first photo, or an empty string."""
    if not isinstance(photos, (list, tuple)):
        raise ValueError("expected a list of photos")
    if not photos:
        return ""
    first = photos[0]
    if not isinstance(first, Mapping) or not isinstance(first.get("url"), str):
        raise ValueError("a photo must carry a 'url' string")
    return first["url"]


def _object_id(raw: Any) -> ObjectId:
    if not isinstance(raw, str) or len(raw) != 24:
        raise ValueError(f"invalid ObjectId {raw!r}")
    try:
        return ObjectId(raw)
    except InvalidId as exc:
        raise ValueError(f"invalid ObjectId {raw!r}") from exc


def _field(record: Mapping[str, Any], key: str, kind: type | tuple[type, ...]) -> Any:
    fields = record.get("fields")
    if not isinstance(fields, Mapping):
        raise ValueError("a record must carry a 'fields' object")
    value = fields.get(key)
    if isinstance(value, bool) or not isinstance(value, kind):
        raise ValueError(f"field {key!r} has the wrong type")
    return value


def record_to_spot(record: Mapping[str, Any], saved: bool = False) -> SurfSpot:
    """Build a surf spot from one exported record; raise ValueError if malformed."""
    if not isinstance(record, Mapping):
        raise ValueError("a record must be a JSON object")
    identifier = _object_id(record.get("id"))
    return SurfSpot(
        id=identifier,
        destination=_field(record, "Destination", str),
        address=_field(record, "Address", str),
        country=_field(record, "Destination State/Country", str),
        difficulty=int(_field(record, "Difficulty Level", (int, float))),
        surf_break=to_string_list(_field(record, "Surf Break", (list, tuple))),
        season_start=_field(record, "Peak Surf Season Begins", str),
        season_end=_field(record, "Peak Surf Season Ends", str),
        photo=photo_url(_field(record, "Photos", (list, tuple))),
        link=_field(record, "Magic Seaweed Link", str),
        geocode=_field(record, "Geocode", str),
        saved=saved,
    )


def _records(data: Any) -> list[Any]:
    if not isinstance(data, Mapping):
        raise ValueError("the export must be a JSON object")
    records = data.get("records")
    if records is not None and not isinstance(records, list):
        raise ValueError("field 'records' must be a list")
    return records or []


def _existing_saved(collection: Any, destination: str) -> bool:
    try:
        document = collection.find_one({"destination": destination})
        return document is not None and SurfSpot.from_document(document).saved
    except (PyMongoError, ValueError):
        return False


def import_records(collection: Any, data: Any) -> int:
    """Replace the collection's content with the records; return how many were inserted."""
    records = _records(data)
    collection.drop()
    inserted = 0
    for record in records:
        raw_id = record.get("id") if isinstance(record, Mapping) else None
        try:
            _object_id(raw_id)
        except ValueError as exc:
            print(f"Erreur lors de la conversion de l'ID {raw_id}: {exc}")
            continue
        saved = _existing_saved(collection, _field(record, "Destination", str))
        spot = record_to_spot(record, saved)
        try:
            collection.insert_one(spot.to_document())
        except PyMongoError as exc:
            print(f"Erreur lors de l'insertion du spot {spot.destination}: {exc}")
            continue
        inserted += 1
    return inserted


def main(argv: Sequence[str] | None = None) -> int:
    """Connect to MongoDB and import the converted records."""
    parser = argparse.ArgumentParser(prog="goodwave-import")
    parser.add_argument("--env-file", default=".env")
    parser.add_argument("--input", type=Path, default=Path("data") / "surfSpots_converted.json")
    args = parser.parse_args(argv)

    if not Path(args.env_file).is_file():
        print(f"Erreur lors du chargement du fichier .env: {args.env_file} introuvable")
        return 1
    load_dotenv(args.env_file)
    try:
        settings = load_settings(os.environ)
    except ValueError as exc:
        print(exc)
        return 1
    try:
        database = connect_with_options(settings.mongodb_uri, settings.db_name, ServerApi("1"))
    except DatabaseConnectionError as exc:
        print(f"Erreur de connexion à MongoDB: {exc}")
        return 1
    try:
        text = args.input.read_text(encoding="utf-8")
    except OSError as exc:
        print(f"Erreur lors de la lecture du fichier JSON: {exc}")
        return 1
    try:
        data = json.loads(text)
        _records(data)
    except ValueError as exc:
        print(f"Erreur lors du décodage du JSON: {exc}")
        return 1
    try:
        import_records(database["surfSpots"], data)
    except PyMongoError as exc:
        print(f"Erreur lors de la suppression de la collection: {exc}")
        return 1
    except ValueError as exc:
        print(f"Erreur lors de l'import des données: {exc}")
        return 1
    print("Import des données terminé avec succès")
    return 0