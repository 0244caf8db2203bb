"""Recommendation orchestration: cache, scoring service, fallback."""
import hashlib
import json
import re
from concurrent.futures import ThreadPoolExecutor

from cache import TTLCache
from config import (
    DEFAULT_MAX_DISTANCE_KM,
    FALLBACK_TTL_MINUTES,
    HYDRATION_WORKERS,
    RECOMMENDATION_TTL_MINUTES,
)
from errors import NotFoundError, UpstreamUnavailableError
from log import get_logger
from models import (
    INTERNSHIP_PROJECTION,
    RecommendationResult,
    UserProfile,
    to_object_id,
)
from recommendations import get_fallback_recommendations

log = get_logger(__name__)

CACHE_PREFIX = "recommendations"


def build_payload(profile: UserProfile, max_distance_km=None) -> dict:
    """Request body for the scoring service.

    Only the first sector is sent.
    """
    return {
        "skills": " ".join(profile.skills),
        "sectors": profile.sectors[0] if profile.sectors else "",
        "education_level": profile.education_level,
        "city_name": profile.location,
        "max_distance_km": max_distance_km or DEFAULT_MAX_DISTANCE_KM,
    }


def user_key_prefix(identity: str) -> str:
    return f"{CACHE_PREFIX}:{identity}:"


def cache_key(identity: str, payload: dict) -> str:
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    digest = hashlib.sha256(canonical.encode("utf-8")).hexdigest()
    return f"{user_key_prefix(identity)}{digest}"


class RecommendationService:
    def __init__(self, users, internships, cache: TTLCache, scoring_client,
                 hydration_workers: int = HYDRATION_WORKERS):
        self.users = users
        self.internships = internships
        self.cache = cache
        self.scoring_client = scoring_client
        self._executor = ThreadPoolExecutor(max_workers=hydration_workers, thread_name_prefix="hydrate")

    def load_profile(self, identity: str) -> UserProfile:
        object_id = to_object_id(identity)
        user = self.users.find_one({"_id": object_id}) if object_id else None
        if not user:
            log.error("User not found in database: %s", identity)
            raise NotFoundError("User not found")
        return UserProfile.from_document(user)

    def get_recommendations(self, identity: str, max_distance_km=None) -> dict:
        profile = self.load_profile(identity)
        payload = build_payload(profile, max_distance_km)
        key = cache_key(identity, payload)

        cached = self.cache.get(key)
        if cached is not None:
            log.info("Recommendation cache hit for user %s", identity)
            return cached

        log.info("Recommendation cache miss for user %s", identity)
        try:
            ranked = self.scoring_client.recommend(payload)
        except UpstreamUnavailableError:
            log.warning("Using fallback recommendation logic for user %s", identity)
            result = get_fallback_recommendations(self.internships, profile).to_dict()
            self.cache.set(key, result, FALLBACK_TTL_MINUTES)
            return result

        # remote bucket on the pool, nearby on this thread
        remote_future = self._executor.submit(self.hydrate, ranked["remote_ids"])
        nearby = self.hydrate(ranked["nearby_ids"])
        result = RecommendationResult.build(profile, nearby, remote_future.result()).to_dict()

        self.cache.set(key, result, RECOMMENDATION_TTL_MINUTES)
        return result

    def hydrate(self, ids: list) -> list:
        """Fetch internships for ``ids`` in one query, keeping the given order.

        Ids that are malformed or not in the collection are dropped.
        """
        object_ids = [oid for oid in (to_object_id(i) for i in ids) if oid is not None]
        if not object_ids:
            return []
        found = {
            doc["_id"]: doc
            for doc in self.internships.find({"_id": {"$in": object_ids}}, INTERNSHIP_PROJECTION)
        }
        ordered, seen = [], set()
        for oid in object_ids:
            if oid in found and oid not in seen:
                ordered.append(found[oid])
                seen.add(oid)
        if len(ordered) < len(ids):
            log.warning("Dropped %d unknown internship ids", len(ids) - len(ordered))
        return ordered

    def invalidate_user(self, identity: str) -> int:
        cleared = self.cache.clear_by_pattern("^" + re.escape(user_key_prefix(identity)))
        log.info("Cleared %d cached recommendation(s) for user %s", cleared, identity)
        return cleared

    def close(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
