# ==============================================================================
# Recommendation Service Client
# ==============================================================================
"""
HTTP client for the remote website-intelligence service.

The remote service runs a richer (AI-assisted) analysis of a site's paths.
It is optional: callers treat any RecommendationServiceError as a signal to
fall back to local heuristics, so this client does not retry. A slow
service costs at most one timeout per request.
"""

import logging
from typing import Any

import requests

from trafficlens.errors import RecommendationServiceError
from trafficlens.utils.config import ClassifierSettings, get_settings

logger = logging.getLogger(__name__)

WEBSITE_INTELLIGENCE_PATH = "/api/ai/website-intelligence"


class RecommendationClient:
    """Thin wrapper around POST /api/ai/website-intelligence."""

    def __init__(
        self,
        settings: ClassifierSettings | None = None,
        session: requests.Session | None = None,
    ):
        """
        Initialize the client.

        Args:
            settings: Classifier settings. If None, uses get_settings().classifier.
            session: requests Session to reuse connections (created if None)
        """
        self._settings = settings or get_settings().classifier
        self._session = session or requests.Session()

    @property
    def url(self) -> str:
        return self._settings.base_url.rstrip("/") + WEBSITE_INTELLIGENCE_PATH

    def analyze(self, payload: dict[str, Any], user_id: str | None = None) -> dict[str, Any]:
        """
        Request website intelligence for a payload.

        Args:
            payload: Request body ({domain, paths, pageViews, urlStructureStats,
                patternScores, totalVisitors})
            user_id: Sent as the x-user-id header when given

        Returns:
            Decoded JSON response body

        Raises:
            RecommendationServiceError: On timeout, connection failure, non-2xx
                status or a body that is not a JSON object
        """
        headers = {"Content-Type": "application/json"}
        if user_id:
            headers["x-user-id"] = user_id

        try:
            response = self._session.post(
                self.url,
                json=payload,
                headers=headers,
                timeout=self._settings.timeout_seconds,
            )
            response.raise_for_status()
            body = response.json()
        except requests.exceptions.Timeout as e:
            raise RecommendationServiceError(
                f"Recommendation service timed out after {self._settings.timeout_seconds}s"
            ) from e
        except requests.exceptions.RequestException as e:
            # Includes HTTPError from raise_for_status and JSON decode errors
            raise RecommendationServiceError(f"Recommendation service request failed: {e}") from e
        except ValueError as e:
            raise RecommendationServiceError("Recommendation service returned invalid JSON") from e

        if not isinstance(body, dict):
            raise RecommendationServiceError("Recommendation service returned a non-object body")
        logger.debug("Recommendation service answered for %s", payload.get("domain"))
        return body

    def close(self) -> None:
        self._session.close()
