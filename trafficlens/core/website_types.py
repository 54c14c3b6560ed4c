# ==============================================================================
# Website Type Catalog
# ==============================================================================
"""
Static catalog of website categories and the URL patterns that indicate them.

Each category carries weighted keywords (matched as substrings of a lowercased
path) and path regexes. Declaration order matters: it breaks ties when two
categories score identically.
"""

import re
from dataclasses import dataclass, field
from enum import Enum


class WebsiteType(str, Enum):
    """Business categories the classifier can detect."""

    ECOMMERCE = "ecommerce"
    MARKETPLACE = "marketplace"
    SAAS = "saas"
    BLOG = "blog"
    LEADGEN = "leadgen"
    PORTFOLIO = "portfolio"
    EDUCATION = "education"
    NEWS = "news"
    MEDIA = "media"
    COMMUNITY = "community"
    FORUM = "forum"
    DIRECTORY = "directory"
    CLASSIFIEDS = "classifieds"
    MEMBERSHIP = "membership"
    BOOKING = "booking"
    AFFILIATE = "affiliate"
    DOCUMENTATION = "documentation"
    WIKI = "wiki"
    GOVERNMENT = "government"
    CORPORATE = "corporate"
    NONPROFIT = "nonprofit"
    ENTERTAINMENT = "entertainment"


@dataclass(frozen=True)
class CategoryPatterns:
    """Weighted keywords and path regexes for one category."""

    keywords: tuple[tuple[str, int], ...]
    url_regexes: tuple[re.Pattern, ...] = field(default_factory=tuple)


def _rx(*patterns: str) -> tuple[re.Pattern, ...]:
    return tuple(re.compile(p) for p in patterns)


T = WebsiteType

PATTERNS: dict[WebsiteType, CategoryPatterns] = {
    T.ECOMMERCE: CategoryPatterns(
        keywords=(
            ("product", 5), ("cart", 6), ("checkout", 7), ("shop", 3), ("buy", 3),
            ("price", 2), ("add to cart", 4), ("purchase", 4), ("order", 3),
            ("shipping", 2), ("payment", 3),
        ),
        url_regexes=_rx(
            r"/product/[^/]+", r"/p/\w+", r"/products/", r"/cart", r"/checkout",
            r"/shop/", r"/store/",
        ),
    ),
    T.MARKETPLACE: CategoryPatterns(
        keywords=(
            ("seller", 4), ("market", 4), ("listings", 4), ("vendor", 3), ("buy", 2),
            ("sell", 3), ("trade", 2),
        ),
        url_regexes=_rx(r"/listings?", r"/seller/", r"/market/", r"/vendor/"),
    ),
    T.SAAS: CategoryPatterns(
        keywords=(
            ("pricing", 4), ("trial", 3), ("dashboard", 5), ("api", 3),
            ("subscription", 4), ("plan", 3), ("feature", 3), ("login", 2),
        ),
        url_regexes=_rx(r"/dashboard", r"/signup", r"/login", r"/pricing", r"/plans"),
    ),
    T.BLOG: CategoryPatterns(
        keywords=(
            ("blog", 5), ("article", 3), ("post", 3), ("author", 2), ("category", 2),
            ("tag", 2), ("news", 2),
        ),
        url_regexes=_rx(
            r"/\d{4}/\d{2}/\d{2}/.+", r"/(blog|post|article)/", r"/category/", r"/tag/"
        ),
    ),
    T.LEADGEN: CategoryPatterns(
        keywords=(
            ("contact", 4), ("form", 3), ("download", 3), ("lead", 4), ("subscribe", 3),
            ("newsletter", 2), ("quote", 2),
        ),
        url_regexes=_rx(r"/contact", r"/download", r"/subscribe", r"/lead"),
    ),
    T.PORTFOLIO: CategoryPatterns(
        keywords=(
            ("portfolio", 5), ("work", 3), ("case-study", 4), ("project", 3),
            ("gallery", 2), ("showcase", 3),
        ),
        url_regexes=_rx(r"/portfolio", r"/works/", r"/case-study", r"/project"),
    ),
    T.EDUCATION: CategoryPatterns(
        keywords=(
            ("course", 5), ("lesson", 3), ("enroll", 4), ("learn", 3), ("training", 3),
            ("class", 2),
        ),
        url_regexes=_rx(r"/course", r"/lesson", r"/enroll"),
    ),
    T.NEWS: CategoryPatterns(
        keywords=(
            ("news", 5), ("press", 2), ("breaking", 3), ("article", 2), ("story", 2),
            ("headline", 2),
        ),
        url_regexes=_rx(r"/news", r"/\d{4}/\d{2}/\d{2}/", r"/press/"),
    ),
    T.MEDIA: CategoryPatterns(
        keywords=(("video", 3), ("gallery", 2), ("media", 3), ("photo", 2), ("stream", 2)),
        url_regexes=_rx(r"/media", r"/video", r"/gallery"),
    ),
    T.COMMUNITY: CategoryPatterns(
        keywords=(
            ("forum", 4), ("threads", 3), ("member", 3), ("community", 4),
            ("discussion", 2), ("group", 2),
        ),
        url_regexes=_rx(r"/forum", r"/thread/", r"/community"),
    ),
    T.FORUM: CategoryPatterns(
        keywords=(("thread", 4), ("reply", 3), ("post", 2), ("topic", 3), ("discussion", 2)),
        url_regexes=_rx(r"/thread/", r"/topic/", r"/forum/"),
    ),
    T.DIRECTORY: CategoryPatterns(
        keywords=(("directory", 4), ("list", 2), ("find", 2), ("search", 3), ("browse", 2)),
        url_regexes=_rx(r"/directory", r"/list/", r"/search"),
    ),
    T.CLASSIFIEDS: CategoryPatterns(
        keywords=(("ad", 3), ("classified", 5), ("listing", 3), ("post ad", 4)),
        url_regexes=_rx(r"/classifieds?", r"/ad/", r"/listing"),
    ),
    T.MEMBERSHIP: CategoryPatterns(
        keywords=(
            ("member", 4), ("subscription", 4), ("join", 3), ("premium", 3), ("access", 2),
        ),
        url_regexes=_rx(r"/account", r"/members", r"/subscription"),
    ),
    T.BOOKING: CategoryPatterns(
        keywords=(
            ("book", 4), ("reservation", 4), ("availability", 3), ("schedule", 2),
            ("appointment", 3),
        ),
        url_regexes=_rx(r"/book", r"/reservation", r"/schedule"),
    ),
    T.AFFILIATE: CategoryPatterns(
        keywords=(("affiliate", 5), ("referral", 3), ("commission", 3), ("partner", 2)),
        url_regexes=_rx(r"/affiliate", r"/ref", r"/partner"),
    ),
    T.DOCUMENTATION: CategoryPatterns(
        keywords=(
            ("docs", 4), ("api", 3), ("reference", 2), ("guide", 2), ("documentation", 4),
        ),
        url_regexes=_rx(r"/docs?", r"/api/", r"/guide"),
    ),
    T.WIKI: CategoryPatterns(
        keywords=(("wiki", 5), ("edit", 2), ("knowledge", 2), ("article", 2)),
        url_regexes=_rx(r"/wiki/"),
    ),
    T.GOVERNMENT: CategoryPatterns(
        keywords=(
            ("gov", 4), ("policy", 2), ("department", 2), ("public", 2), ("service", 2),
        ),
        url_regexes=_rx(r"/gov", r"/policy", r"/department"),
    ),
    T.CORPORATE: CategoryPatterns(
        keywords=(
            ("about", 2), ("investor", 3), ("team", 2), ("company", 3), ("corporate", 3),
            ("business", 2),
        ),
        url_regexes=_rx(r"/about", r"/team", r"/company"),
    ),
    T.NONPROFIT: CategoryPatterns(
        keywords=(
            ("donate", 5), ("mission", 3), ("volunteer", 3), ("charity", 3), ("cause", 2),
        ),
        url_regexes=_rx(r"/donate", r"/volunteer", r"/mission"),
    ),
    T.ENTERTAINMENT: CategoryPatterns(
        keywords=(
            ("show", 3), ("tickets", 4), ("events", 3), ("entertainment", 3),
            ("performance", 2),
        ),
        url_regexes=_rx(r"/events?", r"/tickets", r"/show"),
    ),
}

# Fallback when no category scores at all
DEFAULT_TYPE = T.CORPORATE

PRIMARY_PURPOSES: dict[WebsiteType, str] = {
    T.ECOMMERCE: "Sell products online",
    T.MARKETPLACE: "Connect buyers and sellers",
    T.SAAS: "Provide software as a service",
    T.BLOG: "Share content and information",
    T.LEADGEN: "Generate leads and contacts",
    T.PORTFOLIO: "Showcase work and projects",
    T.EDUCATION: "Provide learning resources",
    T.NEWS: "Deliver news and updates",
    T.MEDIA: "Share media content",
    T.COMMUNITY: "Build community engagement",
    T.FORUM: "Facilitate discussions",
    T.DIRECTORY: "List and find resources",
    T.CLASSIFIEDS: "Post and find classified ads",
    T.MEMBERSHIP: "Offer exclusive access",
    T.BOOKING: "Manage reservations",
    T.AFFILIATE: "Promote products for commission",
    T.DOCUMENTATION: "Provide technical documentation",
    T.WIKI: "Create collaborative knowledge",
    T.GOVERNMENT: "Deliver public services",
    T.CORPORATE: "Represent business interests",
    T.NONPROFIT: "Support charitable causes",
    T.ENTERTAINMENT: "Provide entertainment",
}

TARGET_AUDIENCES: dict[WebsiteType, list[str]] = {
    T.ECOMMERCE: ["Online shoppers", "Price-sensitive consumers"],
    T.MARKETPLACE: ["Buyers", "Sellers", "Entrepreneurs"],
    T.SAAS: ["Business professionals", "Tech-savvy users"],
    T.BLOG: ["Content consumers", "Knowledge seekers"],
    T.LEADGEN: ["Potential customers", "Business leads"],
    T.PORTFOLIO: ["Clients", "Employers", "Collaborators"],
    T.EDUCATION: ["Students", "Learners", "Educators"],
    T.NEWS: ["News readers", "Information seekers"],
    T.MEDIA: ["Content viewers", "Media consumers"],
    T.COMMUNITY: ["Community members", "Engaged users"],
    T.FORUM: ["Discussion participants", "Experts"],
    T.DIRECTORY: ["Resource finders", "Researchers"],
    T.CLASSIFIEDS: ["Local buyers/sellers", "Advertisers"],
    T.MEMBERSHIP: ["Premium members", "Subscribers"],
    T.BOOKING: ["Travelers", "Event attendees"],
    T.AFFILIATE: ["Affiliate marketers", "Promoters"],
    T.DOCUMENTATION: ["Developers", "Technical users"],
    T.WIKI: ["Contributors", "Knowledge builders"],
    T.GOVERNMENT: ["Citizens", "Public service users"],
    T.CORPORATE: ["Business partners", "Investors"],
    T.NONPROFIT: ["Donors", "Volunteers"],
    T.ENTERTAINMENT: ["Fans", "Entertainment seekers"],
}
