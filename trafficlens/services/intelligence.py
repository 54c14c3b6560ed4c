# ==============================================================================
# Intelligence Service
# ==============================================================================
"""
Website intelligence with a remote-first, local-fallback strategy.

The remote recommendation service is consulted only when enabled in
settings. Whatever it returns is layered over the local analysis, so every
field is always populated. Any remote failure degrades to the local result
and is never raised to the caller.
"""

import logging
from collections.abc import Sequence
from typing import Any

from pydantic import ValidationError

from trafficlens.base import Cache
from trafficlens.core.classifier import MAX_CONFIDENCE, MIN_CONFIDENCE
from trafficlens.core.intelligence import build_intelligence
from trafficlens.core.models import PageViewEvent, WebsiteIntelligence
from trafficlens.errors import RecommendationServiceError
from trafficlens.infrastructure.recommendations import RecommendationClient
from trafficlens.utils.config import ClassifierSettings, get_settings

logger = logging.getLogger(__name__)

ANONYMOUS_USER = "anonymous"


def intelligence_cache_key(domain: str, event_count: int) -> str:
    return f"intelligence:{domain}:{event_count}"


def merge_remote(remote: dict[str, Any], local: WebsiteIntelligence) -> WebsiteIntelligence:
    """
    Layer a remote response over the local analysis.

    Remote confidence below the minimum (or missing) is replaced by the local
    confidence; anything above the maximum is capped.

    Raises:
        ValidationError: If the remote fields do not fit the model
    """
    merged = {**local.to_dict(), **remote, "source": "remote"}
    confidence = remote.get("confidence")
    if not isinstance(confidence, (int, float)) or confidence < MIN_CONFIDENCE:
        confidence = local.confidence
    merged["confidence"] = int(round(min(MAX_CONFIDENCE, confidence)))
    return WebsiteIntelligence.model_validate(merged)


class IntelligenceService:
    """Produces WebsiteIntelligence for a domain, cached per (domain, event count)."""

    def __init__(
        self,
        cache: Cache,
        client: RecommendationClient | None = None,
        settings: ClassifierSettings | None = None,
    ):
        """
        Initialize the service.

        Args:
            cache: Result cache
            client: Remote client. Created from settings when remote analysis
                is enabled and none is given.
            settings: Classifier settings. If None, uses get_settings().classifier.
        """
        self._settings = settings or get_settings().classifier
        self._cache = cache
        if client is None and self._settings.remote_enabled:
            client = RecommendationClient(self._settings)
        self._client = client

    def _payload(
        self, domain: str, events: Sequence[PageViewEvent], local: WebsiteIntelligence
    ) -> dict[str, Any]:
        sample = events[: self._settings.max_page_views]
        return {
            "domain": domain,
            "paths": list(dict.fromkeys(e.path.lower() for e in events)) or ["/"],
            "pageViews": [e.to_dict() for e in sample],
            "urlStructureStats": local.url_structure_stats.to_dict(),
            "patternScores": local.pattern_scores,
            "totalVisitors": len({e.visitor_id for e in events}) or 1,
        }

    def analyze(
        self,
        domain: str,
        events: Sequence[PageViewEvent],
        user_id: str | None = None,
        force_refresh: bool = False,
    ) -> WebsiteIntelligence:
        """
        Analyze a site from its page views.

        Args:
            domain: Site domain, sent to the remote service
            events: Page views to analyze
            user_id: Forwarded to the remote service as x-user-id
            force_refresh: Skip the cache lookup

        Returns:
            WebsiteIntelligence with source "remote" or "local"
        """
        key = intelligence_cache_key(domain, len(events))
        if not force_refresh:
            cached = self._cache.get(key)
            if cached is not None:
                logger.debug("Using cached intelligence for %s", domain)
                return WebsiteIntelligence.model_validate(cached)

        local = build_intelligence(events=events)
        result = local
        if self._client is not None:
            try:
                remote = self._client.analyze(
                    self._payload(domain, events, local), user_id=user_id or ANONYMOUS_USER
                )
                result = merge_remote(remote, local)
                logger.info(
                    "Remote intelligence for %s: %s (%d%%)",
                    domain,
                    result.type.value,
                    result.confidence,
                )
            except RecommendationServiceError as e:
                logger.warning(
                    "Remote analysis failed for %s, using local analysis: %s", domain, e
                )
            except ValidationError as e:
                logger.warning(
                    "Remote analysis for %s was unusable, using local analysis: %s", domain, e
                )

        self._cache.set(key, result.to_dict(), ttl_seconds=self._settings.cache_ttl_seconds)
        return result
