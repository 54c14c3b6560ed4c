# ==============================================================================
# Tests for the Traffic-Source Attributor
# ==============================================================================
"""
Tests for sources(), ROI and performance rating, and display name formatting.
"""

import pytest

from trafficlens.core.formatting import format_page_name, format_source
from trafficlens.core.traffic_sources import calculate_roi, performance_rating, sources

# ==============================================================================
# sources
# ==============================================================================


class TestSources:
    """Tests for visitor attribution by source."""

    def _events(self, make_event):
        return [
            make_event("v1", "/", 0, utm_source="google"),
            make_event("v2", "/", 0, referrer="https://www.example.com/post"),
            make_event("v3", "/", 0),
            make_event("v3", "/about", 1),
        ]

    def test_empty_window(self):
        assert sources([]) == []

    def test_groups_by_source(self, make_event):
        by_name = {s.source: s for s in sources(self._events(make_event))}

        assert set(by_name) == {"Google", "example.com", "Direct"}
        assert all(s.visitors == 1 for s in by_name.values())

    def test_bounce_rate_per_source(self, make_event):
        by_name = {s.source: s for s in sources(self._events(make_event))}

        assert by_name["Google"].bounce_rate == 100.0
        assert by_name["Direct"].bounce_rate == 0.0

    def test_estimated_economics(self, make_event):
        by_name = {s.source: s for s in sources(self._events(make_event))}

        google = by_name["Google"]
        assert google.conversion_rate == 4.0
        assert google.cost == 500.0
        assert google.revenue == 4.0
        assert google.roi == -99.2
        assert google.performance_rating == "poor"

        other = by_name["example.com"]
        assert other.cost == 100.0
        assert other.conversion_rate == 2.0

    def test_direct_traffic_has_no_roi(self, make_event):
        direct = next(s for s in sources(self._events(make_event)) if s.source == "Direct")

        assert direct.cost == 0.0
        assert direct.roi is None
        # 6% conversion and no bounces rate on engagement alone
        assert direct.performance_rating == "excellent"

    def test_sorted_by_visitors(self, make_event):
        events = [
            make_event("v1", "/", 0, utm_source="facebook"),
            make_event("v2", "/", 0, utm_source="google"),
            make_event("v3", "/", 0, utm_source="google"),
        ]
        assert [s.source for s in sources(events)] == ["Google", "Facebook"]

    def test_visitor_counted_for_each_source(self, make_event):
        events = [
            make_event("v1", "/", 0, utm_source="google"),
            make_event("v1", "/pricing", 60, utm_source="facebook"),
        ]
        by_name = {s.source: s for s in sources(events)}

        assert by_name["Google"].visitors == 1
        assert by_name["Facebook"].visitors == 1
        # Two views in the window, so not a bounce under either source
        assert by_name["Google"].bounce_rate == 0.0


class TestRoi:
    """Tests for calculate_roi() and performance_rating()."""

    def test_zero_cost(self):
        assert calculate_roi(0, 100) is None

    def test_roi_percent(self):
        assert calculate_roi(100, 400) == 300.0

    @pytest.mark.parametrize(
        "roi, expected",
        [(250.0, "excellent"), (100.0, "good"), (10.0, "fair"), (-5.0, "poor")],
    )
    def test_rating_by_roi(self, roi, expected):
        assert performance_rating(roi, conversion_rate=0.0, bounce_rate=100.0) == expected

    def test_rating_by_engagement_without_roi(self):
        # 2 * 3 + (100 - 100) * 0.1 = 6
        assert performance_rating(None, conversion_rate=2.0, bounce_rate=100.0) == "fair"
        assert performance_rating(None, conversion_rate=0.0, bounce_rate=100.0) == "poor"


# ==============================================================================
# Display names
# ==============================================================================


class TestFormatting:
    """Tests for format_source() and format_page_name()."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("direct", "Direct"),
            ("google", "Google"),
            ("https://www.google.com/search?q=x", "Google"),
            ("l.facebook.com", "Facebook"),
            ("https://www.example.com/post", "example.com"),
            ("newsletter", "newsletter"),
        ],
    )
    def test_format_source(self, raw, expected):
        assert format_source(raw) == expected

    @pytest.mark.parametrize(
        "path, expected",
        [
            ("/", "Homepage"),
            ("/index.html", "Homepage"),
            ("/cart", "Cart"),
            ("/about-us", "About"),
            ("/signup", "Register"),
            ("/case-studies/acme", "Case Studies → Acme"),
        ],
    )
    def test_format_page_name(self, path, expected):
        assert format_page_name(path) == expected
