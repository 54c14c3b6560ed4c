# ==============================================================================
# Display Names
# ==============================================================================
"""
Human-readable names for page paths and traffic sources.
"""

import re
from urllib.parse import urlparse

_EXTENSION_PATTERN = re.compile(r"\.(html|php|asp|jsp)$", re.IGNORECASE)

# Checked in order; first substring hit wins
_PAGE_NAMES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("about",), "About"),
    (("contact",), "Contact"),
    (("services",), "Services"),
    (("products", "shop", "store"), "Products"),
    (("blog",), "Blog"),
    (("pricing",), "Pricing"),
    (("faq",), "FAQ"),
    (("cart", "basket"), "Cart"),
    (("checkout",), "Checkout"),
    (("login", "signin"), "Login"),
    (("register", "signup"), "Register"),
    (("dashboard", "account"), "Dashboard"),
)

_KNOWN_SOURCES: tuple[tuple[str, str], ...] = (
    ("google", "Google"),
    ("facebook", "Facebook"),
    ("instagram", "Instagram"),
    ("twitter", "Twitter"),
    ("linkedin", "LinkedIn"),
)


def format_page_name(path: str) -> str:
    """
    Convert a page path into a funnel stage label.

    Examples:
        "/" -> "Homepage"
        "/cart" -> "Cart"
        "/case-studies/acme" -> "Case Studies → Acme"
    """
    clean = _EXTENSION_PATTERN.sub("", path.lstrip("/"))
    if clean in ("", "/", "index"):
        return "Homepage"

    lowered = clean.lower()
    for needles, name in _PAGE_NAMES:
        if any(n in lowered for n in needles):
            return name

    segments = [s for s in clean.strip("/").split("/") if s]
    words = [
        " ".join(w[:1].upper() + w[1:] for w in re.split(r"[-_]", seg) if w) for seg in segments
    ]
    return " → ".join(words)


def format_source(source: str) -> str:
    """
    Convert a raw source key (UTM tag or referrer URL) into a display name.

    Well-known networks collapse to their brand name, referrer URLs to their
    hostname, and anything else is returned unchanged.
    """
    lowered = source.lower()
    if lowered == "direct":
        return "Direct"
    for needle, name in _KNOWN_SOURCES:
        if needle in lowered:
            return name
    if lowered.startswith("http"):
        host = urlparse(source).hostname
        if host:
            return host.removeprefix("www.")
    return source
