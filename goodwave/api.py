"""HTTP routes for listing, adding and updating surf spots."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from bson import ObjectId
from flask import Flask, jsonify, request
from pymongo.errors import PyMongoError

from goodwave.cache import ResponseCache
from goodwave.models import SurfSpot

COLLECTION_NAME = "surfSpots"
DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

_CORS_ALLOW_METHODS = "GET,POST,PUT,PATCH,DELETE,OPTIONS"
_CORS_ALLOW_HEADERS = "Origin,Content-Type,Accept,Authorization"
_CORS_EXPOSE_HEADERS = "Content-Length"
_CORS_MAX_AGE = str(12 * 60 * 60)

logger = logging.getLogger(__name__)


@dataclass
class PaginatedResponse:
    """One page of surf spots with its paging information."""

    data: list[SurfSpot] = field(default_factory=list)
    page: int = DEFAULT_PAGE
    page_size: int = DEFAULT_PAGE_SIZE
    total_pages: int = 0
    total_items: int = 0

    def to_json(self) -> dict[str, Any]:
        return {
            "data": [spot.to_json() for spot in self.data],
            "page": self.page,
            "pageSize": self.page_size,
            "totalPages": self.total_pages,
            "totalItems": self.total_items,
        }


def parse_page_param(value: str | None, default: int) -> int:
    """Read the leading integer of ``value``, or return ``default``."""
    if value is None:
        return default
    match = _LEADING_INT.match(value)
    if match is None:
        return default
    number = int(match.group(1))
    if not _INT64_MIN <= number <= _INT64_MAX:
        return default
    return number


def _truncating_div(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator >= 0) == (denominator > 0) else -quotient


def _error(message: str, status: int):
    return jsonify({"error": message}), status


def _cors_applies() -> bool:
    origin = request.headers.get("Origin")
    if not origin:
        return False
    host = request.host
    return origin not in (f"http://{host}", f"https://{host}")


def _install_cors(app: Flask) -> None:
    @app.before_request
    def answer_preflight():
        if request.method == "OPTIONS" and _cors_applies():
            response = app.response_class(status=204)
            response.headers["Access-Control-Allow-Origin"] = "*"
            response.headers["Access-Control-Allow-Credentials"] = "true"
            response.headers["Access-Control-Allow-Methods"] = _CORS_ALLOW_METHODS
            response.headers["Access-Control-Allow-Headers"] = _CORS_ALLOW_HEADERS
            response.headers["Access-Control-Max-Age"] = _CORS_MAX_AGE
            return response
        return None

    @app.after_request
    def add_cors_headers(response):
        if request.method != "OPTIONS" and _cors_applies():
            response.headers["Access-Control-Allow-Origin"] = "*"
            response.headers["Access-Control-Allow-Credentials"] = "true"
            response.headers["Access-Control-Expose-Headers"] = _CORS_EXPOSE_HEADERS
        return response


def create_app(database: Any, cache: ResponseCache | None = None) -> Flask:
    """Build the Flask application serving surf spots from ``database``."""
    app = Flask(__name__)
    app.json.sort_keys = False
    app.json.ensure_ascii = False
    spots_cache = cache if cache is not None else ResponseCache()
    collection = database[COLLECTION_NAME]
    _install_cors(app)

    @app.get("/api/surf-spots")
    def get_surf_spots():
        page = parse_page_param(request.args.get("page", "1"), DEFAULT_PAGE)
        page_size = parse_page_param(request.args.get("pageSize", "10"), DEFAULT_PAGE_SIZE)
        force_refresh = request.args.get("forceRefresh", "false")

        cache_key = f"spots_{page}_{page_size}"
        if force_refresh != "true":
            cached = spots_cache.get(cache_key)
            if cached is not None:
                return jsonify(cached)

        skip = (page - 1) * page_size
        try:
            total_items = collection.count_documents({})
        except PyMongoError:
            return _error("Erreur lors du comptage des spots", 500)
        try:
            documents = list(
                collection.find({}, skip=skip, limit=page_size, sort=[("_id", 1)])
            )
        except (PyMongoError, ValueError):
            return _error("Erreur lors de la récupération des spots", 500)
        try:
            spots = [SurfSpot.from_document(document) for document in documents]
        except ValueError:
            return _error("Erreur lors du décodage des spots", 500)

        body = PaginatedResponse(
            data=spots,
            page=page,
            page_size=page_size,
            total_pages=_truncating_div(total_items + page_size - 1, page_size),
            total_items=total_items,
        ).to_json()
        spots_cache.set(cache_key, body)
        return jsonify(body)

    @app.get("/surf-spots")
    def list_surf_spots():
        try:
            documents = list(collection.find({}))
        except PyMongoError:
            return _error("Erreur lors de la récupération des spots", 500)
        try:
            spots = [SurfSpot.from_document(document) for document in documents]
        except ValueError:
            return _error("Erreur lors du décodage des spots", 500)
        return jsonify([spot.to_json() for spot in spots])

    @app.post("/api/surf-spots")
    def add_surf_spot():
        payload = request.get_json(force=True, silent=True)
        try:
            spot = SurfSpot.from_json(payload)
        except ValueError:
            return _error("JSON invalide", 400)
        spot.id = None

        try:
            result = collection.insert_one(spot.to_document())
        except PyMongoError:
            return _error("Erreur lors de l'insertion du spot", 500)
        inserted_id = result.inserted_id
        if not isinstance(inserted_id, ObjectId):
            return _error("Erreur lors de la génération de l'ID", 500)
        return jsonify({"message": "Spot ajouté avec succès", "id": str(inserted_id)})

    @app.put("/api/surf-spots/<spot_id>")
    def update_saved_status(spot_id: str):
        payload = request.get_json(force=True, silent=True)
        saved = payload.get("saved") if isinstance(payload, Mapping) else None
        if not isinstance(payload, Mapping) or not isinstance(saved, (bool, type(None))):
            logger.info("Erreur de binding JSON")
            return _error("JSON invalide", 400)
        saved = bool(saved)

        logger.info("Mise à jour du spot %s avec saved=%s", spot_id, saved)
        if not ObjectId.is_valid(spot_id) or len(spot_id) != 24:
            logger.info("Erreur de conversion de l'ID %s", spot_id)
            return _error("ID invalide", 400)

        try:
            result = collection.update_one(
                {"_id": ObjectId(spot_id)}, {"$set": {"saved": saved}}
            )
        except PyMongoError as exc:
            logger.info("Erreur de mise à jour MongoDB: %s", exc)
            return _error("Erreur lors de la mise à jour du spot", 500)

        if result.matched_count == 0:
            logger.info("Aucun spot trouvé avec l'ID %s", spot_id)
            return _error("Spot non trouvé", 404)
        logger.info("Spot mis à jour avec succès: %s", spot_id)
        return jsonify({"message": "Spot mis à jour avec succès"})

    @app.post("/api/refresh-cache")
    def refresh_cache():
        spots_cache.clear()
        return jsonify({"message": "Cache rafraîchi avec succès"})

    return app