"""Rule-based recommendations used while the scoring service is down.

The ranker tries a fixed cascade of queries, each broader than the last, and
keeps the first one that matches anything. The chosen records are then split
into "nearby" (city matches the user's location) and "remote" buckets, and
records that fit neither are used to top up the nearby list.
"""
import re
from typing import Callable, Iterator, List, Tuple

from config import FALLBACK_LIMIT, NEARBY_MINIMUM
from log import get_logger
from models import RecommendationResult, UserProfile

log = get_logger(__name__)

FALLBACK_MESSAGE = "Using fallback recommendations due to external service unavailability"


def _exact(value: str) -> dict:
    return {"$regex": f"^{re.escape(value.strip())}$", "$options": "i"}


def _contains(value: str) -> dict:
    return {"$regex": re.escape(value.strip()), "$options": "i"}


def _any_of(field: str, values: List[str], match: Callable[[str], dict] = _exact) -> dict:
    clauses = [{field: match(v)} for v in values if v.strip()]
    return clauses[0] if len(clauses) == 1 else {"$or": clauses}


def fallback_queries(profile: UserProfile) -> Iterator[Tuple[str, Callable[[], dict]]]:
    """Yield (name, query builder) pairs from most to least specific.

    Steps missing their inputs are skipped; the unfiltered query always comes
    last.
    """
    sectors = [s for s in profile.sectors if s.strip()]
    skills = [s for s in profile.skills if s.strip()]
    location = profile.location.strip()

    if sectors and location:
        yield "sector+location", lambda: {
            "$and": [_any_of("sector", sectors), {"location_city": _contains(location)}]
        }
    if sectors:
        yield "sector", lambda: _any_of("sector", sectors)
    if location:
        yield "location", lambda: {"location_city": _contains(location)}
    if skills:
        yield "skills", lambda: _any_of("skills", skills, _contains)
    yield "any", lambda: {}


def find_fallback_internships(collection, profile: UserProfile, limit: int = FALLBACK_LIMIT) -> list:
    for name, build in fallback_queries(profile):
        results = list(collection.find(build()).limit(limit))
        if results:
            log.info("Fallback query '%s' matched %d internships", name, len(results))
            return results
    log.info("No internships available for fallback")
    return []


def is_nearby(internship: dict, location: str) -> bool:
    location = (location or "").strip().lower()
    if not location:
        return False
    return location in (internship.get("location_city") or "").lower()


def is_remote(internship: dict) -> bool:
    mode = (internship.get("mode") or "").lower()
    return "remote" in mode or bool(internship.get("remote_work_allowed"))


def classify(internships: list, location: str, minimum_nearby: int = NEARBY_MINIMUM):
    """Split internships into (nearby, remote) lists.

    Records in neither bucket are appended to nearby, in order, until it holds
    ``minimum_nearby`` entries.
    """
    nearby = [i for i in internships if is_nearby(i, location)]
    remote = [i for i in internships if is_remote(i)]

    placed = {id(i) for i in nearby + remote}
    leftovers = [i for i in internships if id(i) not in placed]
    while len(nearby) < minimum_nearby and leftovers:
        nearby.append(leftovers.pop(0))

    return nearby, remote


def get_fallback_recommendations(collection, profile: UserProfile) -> RecommendationResult:
    internships = find_fallback_internships(collection, profile)
    nearby, remote = classify(internships, profile.location)
    log.info("Fallback result: %d nearby, %d remote internships", len(nearby), len(remote))
    return RecommendationResult.build(
        profile,
        nearby,
        remote,
        fallback_mode=True,
        message=FALLBACK_MESSAGE,
    )
