import json
import math
import re
import time
from datetime import datetime, timezone

from flask import Blueprint, g, request

from auth import token_required
from config import (
    FEATURED_TTL_MINUTES,
    INTERNSHIP_DETAIL_TTL_MINUTES,
    INTERNSHIP_PAGE_TTL_MINUTES,
    PAGE_SIZE,
    SEARCH_TTL_MINUTES,
)
from errors import NotFoundError, ValidationFailed
from extensions import get_cache, get_recommender, internships_col
from log import get_logger
from models import serialize_doc, to_object_id
from wire import get_body, respond

log = get_logger(__name__)

internships_bp = Blueprint("internships", __name__, url_prefix="/recommendations")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _page_arg() -> int:
    page = request.args.get("page", 1, type=int)
    return page if page and page > 0 else 1


def _pagination(page: int, total: int, total_field: str) -> dict:
    total_pages = math.ceil(total / PAGE_SIZE)
    return {
        "current_page": page,
        "total_pages": total_pages,
        total_field: total,
        "has_next": page < total_pages,
        "has_prev": page > 1,
    }


@internships_bp.route("/recommend", methods=["POST"])
@token_required
def recommend():
    body = get_body()
    max_distance = body.get("max_distance_km")
    if max_distance is not None and (isinstance(max_distance, bool) or not isinstance(max_distance, (int, float))):
        raise ValidationFailed("max_distance_km must be a number")

    identity = g.current_user["userId"]
    log.info("Recommend API called by user %s", identity)
    result = get_recommender().get_recommendations(identity, max_distance)
    return respond(result)


@internships_bp.route("/internships", methods=["GET"])
def list_internships():
    page = _page_arg()
    cache = get_cache()
    cache_key = f"internships:page:{page}"

    cached = cache.get(cache_key)
    if cached is not None:
        return respond(cached)

    collection = internships_col()
    docs = collection.find({}).skip((page - 1) * PAGE_SIZE).limit(PAGE_SIZE)
    total = collection.count_documents({})

    result = {
        "internships": [serialize_doc(d) for d in docs],
        "pagination": _pagination(page, total, "total_internships"),
    }
    cache.set(cache_key, result, INTERNSHIP_PAGE_TTL_MINUTES)
    return respond(result)


@internships_bp.route("/internships/recommended", methods=["GET"])
def featured_internships():
    cache = get_cache()
    cache_key = "recommended:internships"

    cached = cache.get(cache_key)
    if cached is not None:
        return respond(cached)

    # natural order, no sort
    recommended = [serialize_doc(d) for d in internships_col().find({}).limit(PAGE_SIZE)]
    cache.set(cache_key, recommended, FEATURED_TTL_MINUTES)
    return respond(recommended)


@internships_bp.route("/internships/<internship_id>", methods=["GET"])
def get_internship(internship_id):
    cache = get_cache()
    cache_key = f"internship:{internship_id}"

    cached = cache.get(cache_key)
    if cached is not None:
        return respond(cached)

    collection = internships_col()
    object_id = to_object_id(internship_id)
    if object_id is not None:
        internship = collection.find_one({"_id": object_id})
    elif internship_id.isdigit():
        internship = collection.find_one({"internship_id": int(internship_id)})
    else:
        internship = None

    if not internship:
        raise NotFoundError("Internship not found")

    result = serialize_doc(internship)
    cache.set(cache_key, result, INTERNSHIP_DETAIL_TTL_MINUTES)
    return respond(result)


def build_search_query(q=None, sector=None, location=None, mode=None,
                       min_stipend=None, max_stipend=None) -> dict:
    query = {}
    if q:
        text = {"$regex": re.escape(q), "$options": "i"}
        query["$or"] = [
            {"title": text},
            {"company_name": text},
            {"description": text},
            {"skills": text},
        ]
    if sector:
        query["sector"] = {"$regex": re.escape(sector), "$options": "i"}
    if location:
        query["location_city"] = {"$regex": re.escape(location), "$options": "i"}
    if mode:
        query["mode"] = {"$regex": re.escape(mode), "$options": "i"}

    stipend = {}
    if min_stipend is not None:
        stipend["$gte"] = min_stipend
    if max_stipend is not None:
        stipend["$lte"] = max_stipend
    if stipend:
        query["stipend"] = stipend
    return query


@internships_bp.route("/search", methods=["GET"])
def search_internships():
    params = {
        "q": request.args.get("q"),
        "sector": request.args.get("sector"),
        "location": request.args.get("location"),
        "mode": request.args.get("mode"),
        "min_stipend": request.args.get("min_stipend", type=int),
        "max_stipend": request.args.get("max_stipend", type=int),
    }
    page = _page_arg()

    cache = get_cache()
    cache_key = "search:" + json.dumps({**params, "page": page}, sort_keys=True)
    cached = cache.get(cache_key)
    if cached is not None:
        return respond(cached)

    query = build_search_query(**params)
    collection = internships_col()
    docs = collection.find(query).skip((page - 1) * PAGE_SIZE).limit(PAGE_SIZE)
    total = collection.count_documents(query)

    result = {
        "internships": [serialize_doc(d) for d in docs],
        "pagination": _pagination(page, total, "total_results"),
        "search_params": params,
    }
    cache.set(cache_key, result, SEARCH_TTL_MINUTES)
    return respond(result)


@internships_bp.route("/cache/status", methods=["GET"])
def cache_status():
    cache = get_cache()
    test_key = f"test:cache:{int(time.time() * 1000)}"
    cache.set(test_key, {"test": "data", "timestamp": _now_iso()}, 1)
    test_result = cache.get(test_key)

    return respond({
        "cache_type": "In-Memory Cache",
        "status": "Working" if test_result else "Failed",
        "test_data": test_result,
        "cache_size": cache.size(),
        "stats": cache.stats(),
    })


@internships_bp.route("/cache/clear", methods=["DELETE"])
@token_required
def clear_cache():
    cache = get_cache()
    pattern = request.args.get("pattern")
    clear_type = request.args.get("type")

    if clear_type == "expired":
        cleared = cache.clear_expired()
        message = f"Cleared {cleared} expired entries"
    elif pattern:
        try:
            cleared = cache.clear_by_pattern(pattern)
        except re.error as e:
            raise ValidationFailed(f"Invalid pattern: {e}") from e
        message = f"Cleared {cleared} entries matching pattern: {pattern}"
    else:
        cleared = cache.size()
        cache.clear()
        message = "All cache cleared successfully"

    log.info(message)
    return respond({
        "message": message,
        "cleared_count": cleared,
        "timestamp": _now_iso(),
    })
