# ==============================================================================
# Traffic Analytics Domain Models
# ==============================================================================
"""
Pydantic models for page view events, sessions and derived analytics.

These models are used for:
- Validating rows returned by the event store
- Serializing aggregate and classification results for the dashboard
- Type safety throughout the application

Results serialize with camelCase keys (``to_dict()``) because that is the
shape the dashboard components consume.

This module is part of the core domain layer and has no external dependencies
beyond Pydantic.
"""

from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from trafficlens.core.website_types import WebsiteType


class CamelModel(BaseModel):
    """Base model accepting snake_case or camelCase input and dumping camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dict with camelCase keys."""
        return self.model_dump(by_alias=True, mode="json")


# ==============================================================================
# Input
# ==============================================================================


class PageViewEvent(CamelModel):
    """
    A single page view as returned by the event store.

    Attributes:
        visitor_id: Pseudo-anonymous visitor identifier
        path: Page path visited
        referrer: Referring URL, if any
        utm_source: UTM source tag, if any
        timestamp: Event creation time (timezone-aware, UTC if none given)
        time_on_page: Seconds spent on the page, if reported
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True, extra="ignore"
    )

    visitor_id: str = Field(..., description="Visitor identifier")
    path: str = Field(..., description="Page path")
    referrer: str | None = Field(None, description="Referring URL")
    utm_source: str | None = Field(None, description="UTM source")
    timestamp: datetime = Field(..., description="Event creation time")
    time_on_page: float | None = Field(None, description="Seconds on page")

    # Metadata carried through but not used by aggregation
    site_id: str | None = None
    utm_medium: str | None = None
    utm_campaign: str | None = None
    screen_width: int | None = None
    screen_height: int | None = None
    language: str | None = None
    timezone: str | None = None
    device: str | None = None
    country: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _accept_store_columns(cls, data: Any) -> Any:
        # Event store rows carry created_at rather than timestamp
        if isinstance(data, dict) and "timestamp" not in data:
            for key in ("created_at", "createdAt"):
                if key in data:
                    data = {**data, "timestamp": data[key]}
                    break
        return data

    @field_validator("visitor_id", "site_id", mode="before")
    @classmethod
    def _coerce_identifier(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        return str(value)

    @field_validator("path", mode="before")
    @classmethod
    def _default_path(cls, value: Any) -> Any:
        return value or "/"

    @field_validator("referrer", "utm_source", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("timestamp")
    @classmethod
    def _ensure_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def source_key(self) -> str:
        """Acquisition source: UTM source, then referrer, then 'direct'."""
        return self.utm_source or self.referrer or "direct"

    @property
    def seconds_on_page(self) -> float:
        """Time on page with missing values treated as zero."""
        return self.time_on_page or 0.0


class Session(BaseModel):
    """
    A maximal run of one visitor's events with no internal gap exceeding
    the inactivity timeout.

    Identity is the pair (visitor_id, session_start).
    """

    visitor_id: str = Field(..., description="Visitor identifier")
    session_start: datetime = Field(..., description="Timestamp of first event")
    session_end: datetime = Field(..., description="Timestamp of last event")
    events: list[PageViewEvent] = Field(default_factory=list, description="Ordered events")

    @property
    def session_id(self) -> str:
        """Stable identifier derived from visitor and start time."""
        return f"{self.visitor_id}_{int(self.session_start.timestamp() * 1000)}"

    @property
    def duration_seconds(self) -> float:
        """Seconds between first and last event."""
        return (self.session_end - self.session_start).total_seconds()

    @property
    def event_count(self) -> int:
        return len(self.events)

    @property
    def is_bounce(self) -> bool:
        """A bounce is a session with exactly one event."""
        return len(self.events) == 1

    @property
    def paths(self) -> list[str]:
        return [e.path for e in self.events]


# ==============================================================================
# Aggregate Output
# ==============================================================================


class CoreMetrics(CamelModel):
    """Visitor and engagement metrics for a window."""

    total_visitors: int = 0
    new_visitors: int = 0
    returning_visitors: int = 0
    bounce_rate: float = 0.0
    avg_session_duration: float = 0.0
    pages_per_visit: float = 0.0
    total_page_views: int = 0
    total_sessions: int = 0


class ExitPage(CamelModel):
    """Exit statistics for one path."""

    url: str
    exit_rate: float
    exits: int
    visits: int
    avg_time_on_page: float


class TrafficSource(CamelModel):
    """Visitors and estimated economics for one acquisition source."""

    source: str
    source_key: str
    visitors: int
    bounce_rate: float
    conversion_rate: float
    cost: float
    revenue: float
    roi: float | None = None
    performance_rating: Literal["excellent", "good", "fair", "poor"] = "poor"


class FunnelStage(CamelModel):
    """One step of the canonical visitor journey."""

    stage: str
    path: str
    visitors: int
    drop_off_count: int = 0
    drop_off_rate: float = 0.0


class RecentVisitor(CamelModel):
    """Most recent page view of a visitor."""

    visitor_id: str
    last_seen: datetime
    current_page: str
    referrer: str | None = None
    source: str = "direct"
    screen_resolution: str | None = None
    language: str | None = None
    timezone: str | None = None


class Trends(CamelModel):
    """Percent change of headline metrics against the previous window."""

    bounce_rate: float = 0.0
    avg_session_duration: float = 0.0
    pages_per_visit: float = 0.0
    total_visitors: float = 0.0


class AggregateResult(CoreMetrics):
    """Everything the dashboard needs for one site and window."""

    exit_pages: list[ExitPage] = Field(default_factory=list)
    traffic_sources: list[TrafficSource] = Field(default_factory=list)
    conversion_funnel: list[FunnelStage] = Field(default_factory=list)
    recent_visitors: list[RecentVisitor] = Field(default_factory=list)
    trends: Trends = Field(default_factory=Trends)
    real_data: bool = False
    last_updated: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def empty(cls, now: datetime | None = None) -> "AggregateResult":
        """All-zero result used when no events exist or the store failed."""
        return cls(last_updated=now or datetime.now(timezone.utc))


# ==============================================================================
# Classification Output
# ==============================================================================


class UrlStructureStats(CamelModel):
    """Structural statistics over a set of unique paths."""

    product_patterns: int = 0
    category_patterns: int = 0
    date_patterns: int = 0
    search_patterns: int = 0
    deep_paths: int = 0
    single_page_count: int = 0
    example_paths: list[str] = Field(default_factory=list)
    depth_distribution: dict[int, int] = Field(default_factory=dict)


class TechnicalSignals(CamelModel):
    """Feature signals inferred from paths and page views."""

    has_search: bool = False
    has_filters: bool = False
    has_recommendations: bool = False
    has_blog: bool = False
    has_ecommerce: bool = False
    has_forms: bool = False
    mobile_optimized: bool = True
    average_load_time: float | None = None
    seo_hints: list[str] = Field(default_factory=list)


class Classification(CamelModel):
    """Detected website category with confidence and supporting scores."""

    type: WebsiteType
    confidence: int
    pattern_scores: dict[str, float]
    url_stats: UrlStructureStats
    technical: TechnicalSignals


class ContentAnalysis(CamelModel):
    primary_purpose: str
    target_audience: list[str]
    content_quality: Literal["high", "medium", "low"]
    update_frequency: Literal["frequent", "regular", "rare"]
    seo_score: int = 0


class WebsiteIntelligence(CamelModel):
    """Classification enriched with heuristic analysis for recommendations."""

    type: WebsiteType
    confidence: int
    pattern_scores: dict[str, float] = Field(default_factory=dict)
    characteristics: list[str] = Field(default_factory=list)
    product_count: int = 0
    detected_pages: dict[str, list[str]] = Field(default_factory=dict)
    technical_insights: TechnicalSignals = Field(default_factory=TechnicalSignals)
    content_analysis: ContentAnalysis | None = None
    url_structure_stats: UrlStructureStats = Field(default_factory=UrlStructureStats)
    source: Literal["remote", "local"] = "local"
