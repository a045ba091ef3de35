"""Command that gives every exported record a fresh ObjectId."""

from __future__ import annotations

import argparse
import json
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from bson import ObjectId
from dotenv import load_dotenv


def _sorted(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: _sorted(value[key]) for key in sorted(value)}
    if isinstance(value, list):
        return [_sorted(item) for item in value]
    return value


def _text(source: Mapping[str, Any], key: str) -> str:
    value = source.get(key)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string")
    return value or ""


def _convert_record(record: Any) -> dict[str, Any]:
    if not isinstance(record, Mapping):
        raise ValueError("each record must be a JSON object")
    _text(record, "id")
    record_fields = record.get("fields")
    if record_fields is not None and not isinstance(record_fields, Mapping):
        raise ValueError("field 'fields' must be a JSON object")
    return {
        "id": str(ObjectId()),
        "fields": _sorted(record_fields),
        "createdTime": _text(record, "createdTime"),
    }


def convert_ids(data: Any) -> dict[str, Any]:
    """Return a copy of the export with a new ObjectId hex string for each record."""
    if not isinstance(data, Mapping):
        raise ValueError("the export must be a JSON object")
    records = data.get("records")
    if records is not None and not isinstance(records, list):
        raise ValueError("field 'records' must be a list")
    return {
        "records": None if records is None else [_convert_record(r) for r in records],
        "offset": _text(data, "offset"),
    }


def main(argv: Sequence[str] | None = None) -> int:
    """Read the export, convert its ids and write the converted file."""
    parser = argparse.ArgumentParser(prog="goodwave-convert-ids")
    parser.add_argument("--env-file", default=".env")
    parser.add_argument("--input", type=Path, default=Path("data") / "surfSpots.json")
    parser.add_argument("--output", type=Path, default=Path("data") / "surfSpots_converted.json")
    args = parser.parse_args(argv)

    if not Path(args.env_file).is_file():
        print(f"Erreur lors du chargement du fichier .env: {args.env_file} introuvable")
        return 1
    load_dotenv(args.env_file)
    try:
        text = args.input.read_text(encoding="utf-8")
    except OSError as exc:
        print(f"Erreur lors de la lecture du fichier JSON: {exc}")
        return 1
    try:
        converted = convert_ids(json.loads(text))
    except ValueError as exc:
        print(f"Erreur lors du décodage du JSON: {exc}")
        return 1
    try:
        args.output.write_text(json.dumps(converted, indent=2, ensure_ascii=False),
                               encoding="utf-8")
    except OSError as exc:
        print(f"Erreur lors de l'écriture du fichier: {exc}")
        return 1
    print("Conversion terminée avec succès. Le fichier converti a été sauvegardé dans "
          f"{args.output}")
    return 0