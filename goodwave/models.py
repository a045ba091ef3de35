"""Surf spot model and its conversions to MongoDB documents and JSON."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId

NIL_OBJECT_ID = ObjectId(b"\x00" * 12)
_KINDS = {"difficulty": int, "surf_break": list, "saved": bool}


def _value(source: Mapping[str, Any], key: str, allow_float: bool) -> Any:
    kind = _KINDS.get(key, str)
    value = source.get(key)
    if value is None:
        return kind()
    if kind is list:
        if isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
            return list(value)
    elif kind is int and allow_float and isinstance(value, float) and value.is_integer():
        return int(value)
    elif isinstance(value, kind) and not (kind is int and isinstance(value, bool)):
        return value
    raise ValueError(f"field {key!r} has the wrong type")


@dataclass
class SurfSpot:
    """A surf spot as stored in the ``surfSpots`` collection."""

    id: ObjectId | None = None
    destination: str = ""
    address: str = ""
    country: str = ""
    difficulty: int = 0
    surf_break: list[str] = field(default_factory=list)
    season_start: str = ""
    season_end: str = ""
    photo: str = ""
    link: str = ""
    geocode: str = ""
    saved: bool = False

    def _body(self) -> dict[str, Any]:
        body = asdict(self)
        del body["id"]
        return body

    def to_document(self) -> dict[str, Any]:
        """Return the MongoDB document; ``_id`` is left out when unset."""
        if self.id is None or self.id == NIL_OBJECT_ID:
            return self._body()
        return {"_id": self.id, **self._body()}

    def to_json(self) -> dict[str, Any]:
        """Return the JSON representation, with ``_id`` as a hex string."""
        return {"_id": str(self.id or NIL_OBJECT_ID), **self._body()}

    @classmethod
    def _build(cls, source: Mapping[str, Any], identifier: ObjectId | None,
               allow_float: bool) -> SurfSpot:
        values = {key: _value(source, key, allow_float) for key in cls()._body()}
        return cls(id=identifier, **values)

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> SurfSpot:
        """Build a spot from a MongoDB document; raise ValueError if malformed."""
        if not isinstance(document, Mapping):
            raise ValueError("a surf spot document must be a mapping")
        identifier = document.get("_id")
        if identifier is not None and not isinstance(identifier, ObjectId):
            raise ValueError("field '_id' must be an ObjectId")
        return cls._build(document, identifier, allow_float=True)

    @classmethod
    def from_json(cls, payload: Any) -> SurfSpot:
        """Build a spot from a decoded JSON object; raise ValueError if malformed."""
        if not isinstance(payload, Mapping):
            raise ValueError("a surf spot must be a JSON object")
        raw_id = payload.get("_id")
        if raw_id is not None and not isinstance(raw_id, str):
            raise ValueError("field '_id' must be a hex string")
        try:
            identifier = ObjectId(raw_id) if raw_id else None
        except InvalidId as exc:
            raise ValueError(f"invalid ObjectId {raw_id!r}") from exc
        return cls._build(payload, identifier, allow_float=False)