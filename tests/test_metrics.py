# ==============================================================================
# Tests for the Metrics Aggregator
# ==============================================================================
"""
Tests for aggregate(), compute_trends() and recent_visitors().
"""

from trafficlens.core.metrics import aggregate, compute_trends, recent_visitors
from trafficlens.core.models import AggregateResult, CoreMetrics

# ==============================================================================
# aggregate
# ==============================================================================


class TestAggregate:
    """Tests for core metric computation."""

    def test_empty_window_is_all_zero(self):
        metrics = aggregate([])

        assert metrics == CoreMetrics()
        result = AggregateResult.empty()
        assert result.real_data is False
        assert result.exit_pages == []
        assert result.traffic_sources == []
        assert result.conversion_funnel == []

    def test_single_page_view(self, make_event):
        metrics = aggregate([make_event()])

        assert metrics.total_visitors == 1
        assert metrics.total_sessions == 1
        assert metrics.bounce_rate == 100.0
        assert metrics.avg_session_duration == 0.0
        assert metrics.total_page_views == 1
        assert metrics.pages_per_visit == 1.0

    def test_single_multi_page_session(self, make_event):
        events = [
            make_event(path="/", minutes=0),
            make_event(path="/cart", minutes=5),
            make_event(path="/checkout", minutes=10),
        ]

        metrics = aggregate(events)

        assert metrics.total_sessions == 1
        assert metrics.bounce_rate == 0.0
        assert metrics.pages_per_visit == 3.0
        assert metrics.avg_session_duration == 600.0

    def test_duration_average_excludes_bounces(self, make_event):
        events = [
            make_event("v1", "/", 0),
            make_event("v2", "/", 0),
            make_event("v2", "/about", 2),
        ]

        metrics = aggregate(events)

        assert metrics.bounce_rate == 50.0
        assert metrics.avg_session_duration == 120.0
        assert metrics.pages_per_visit == 1.5

    def test_returning_visitors_from_history(self, make_event):
        events = [make_event("v1"), make_event("v2"), make_event("v3")]

        metrics = aggregate(events, historical_visitor_ids={"v1", "v9"})

        assert metrics.total_visitors == 3
        assert metrics.returning_visitors == 1
        assert metrics.new_visitors == 2

    def test_rates_stay_in_bounds(self, make_event):
        events = [make_event(f"v{i}", "/", i * 45) for i in range(5)]

        metrics = aggregate(events)

        assert 0 <= metrics.bounce_rate <= 100
        assert metrics.new_visitors + metrics.returning_visitors == metrics.total_visitors

    def test_repeated_calls_are_identical(self, make_event):
        events = [
            make_event("v1", "/", 0, time_on_page=12.5),
            make_event("v1", "/pricing", 3, referrer="https://google.com"),
            make_event("v1", "/", 50),
            make_event("v2", "/blog", 1, utm_source="newsletter"),
            make_event("v3", "/", 2),
            make_event("v3", "/signup", 31, time_on_page=40),
        ]
        history = {"v2", "v9"}

        first = aggregate(events, history)
        second = aggregate(events, history)

        assert first.to_dict() == second.to_dict()


# ==============================================================================
# compute_trends
# ==============================================================================


class TestComputeTrends:
    """Tests for trends against the previous window."""

    def test_no_previous_window(self):
        trends = compute_trends(CoreMetrics(total_visitors=5), None)
        assert trends.total_visitors == 0.0
        assert trends.bounce_rate == 0.0

    def test_empty_previous_window(self):
        trends = compute_trends(CoreMetrics(total_visitors=5), CoreMetrics())
        assert trends.total_visitors == 0.0

    def test_percent_change(self):
        current = CoreMetrics(total_visitors=3, bounce_rate=25.0, total_page_views=6)
        previous = CoreMetrics(total_visitors=2, bounce_rate=50.0, total_page_views=4)

        trends = compute_trends(current, previous)

        assert trends.total_visitors == 50.0
        assert trends.bounce_rate == -50.0
        # No baseline: zero, not infinity
        assert trends.pages_per_visit == 0.0


# ==============================================================================
# recent_visitors
# ==============================================================================


class TestRecentVisitors:
    """Tests for the recent visitor listing."""

    def test_latest_view_per_visitor_most_recent_first(self, make_event):
        events = [
            make_event("v1", "/", 0),
            make_event("v2", "/pricing", 5, utm_source="google"),
            make_event("v1", "/about", 10, screen_width=1920, screen_height=1080),
        ]

        visitors = recent_visitors(events)

        assert [v.visitor_id for v in visitors] == ["v1", "v2"]
        assert visitors[0].current_page == "/about"
        assert visitors[0].screen_resolution == "1920x1080"
        assert visitors[1].source == "google"
        assert visitors[1].screen_resolution is None

    def test_limit(self, make_event):
        events = [make_event(f"v{i}", "/", i) for i in range(15)]

        visitors = recent_visitors(events)

        assert len(visitors) == 10
        assert visitors[0].visitor_id == "v14"
