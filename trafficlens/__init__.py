# ==============================================================================
# TrafficLens
# ==============================================================================
"""
Traffic analytics aggregation engine and website-type classifier.

Turns raw page view records into sessions, engagement metrics, exit pages,
traffic-source attribution and a conversion funnel, and guesses a site's
business category from the paths its visitors view.
"""

__version__ = "0.1.0"
