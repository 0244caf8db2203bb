import re
from typing import Any, Dict, Optional

import requests

from config import MODEL_TIMEOUT_SECONDS, MODEL_URL
from errors import BadUpstreamError, UpstreamUnavailableError
from log import get_logger

log = get_logger(__name__)


class ScoringClient:
    """Client for the external ML recommendation model.

    Two failure modes are kept apart: an unreachable service (connection
    error, timeout, non-2xx status) raises ``UpstreamUnavailableError``, and a
    reachable service with an unusable body raises ``BadUpstreamError``.
    """

    def __init__(self, url: str = MODEL_URL, timeout: float = MODEL_TIMEOUT_SECONDS,
                 session: Optional[requests.Session] = None):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "Accept": "application/json",
            "Content-Type": "application/json",
        })

    def recommend(self, payload: Dict[str, Any]) -> Dict[str, list]:
        """POST the payload and return ``{"nearby_ids": [...], "remote_ids": [...]}``."""
        try:
            response = self.session.post(self.url, json=payload, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            # strip memory addresses like <HTTPConnection(...) at 0x...>
            detail = re.sub(r"0x[0-9a-fA-F]+", "<ptr>", str(e))
            log.error("Scoring service request failed (%s): %s", type(e).__name__, detail)
            raise UpstreamUnavailableError(detail) from e

        log.info("Scoring service responded %s", response.status_code)
        if not response.ok:
            log.error("Scoring service error %s: %s", response.status_code, response.text[:500])
            raise UpstreamUnavailableError(f"status {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            log.error("Invalid JSON from scoring service: %s", response.text[:200])
            raise BadUpstreamError("response is not JSON") from e

        return parse_recommendations(data)


def _id_list(recommendations: dict, field: str) -> list:
    ids = recommendations.get(field)
    if ids is None:
        return []
    if not isinstance(ids, list):
        raise BadUpstreamError(f"'{field}' is not a list")
    return [str(i) for i in ids]


def parse_recommendations(data: Any) -> Dict[str, list]:
    if not isinstance(data, dict) or not isinstance(data.get("recommendations"), dict):
        log.error("Invalid scoring response structure: %r", data)
        raise BadUpstreamError("missing 'recommendations'")

    recommendations = data["recommendations"]
    return {
        "nearby_ids": _id_list(recommendations, "nearby_ids"),
        "remote_ids": _id_list(recommendations, "remote_ids"),
    }
