"""Citation URL sanitization into display-ready SourceItem entries."""

import logging
import re
from urllib.parse import urlparse

from analysis_parser.parsing.schema import SourceItem

logger = logging.getLogger(__name__)

SAFE_SCHEMES = ("http", "https")

# Second-level labels that sit under a country-code TLD (bbc.co.uk, ox.ac.uk)
CC_SECOND_LEVEL = ("co", "com", "org", "net", "ac", "gov")

ACRONYMS = {"bbc": "BBC", "mit": "MIT", "ibm": "IBM", "aws": "AWS", "nyt": "NYT"}

FALLBACK_SOURCE = "Research Model"

WWW_PREFIX_RE = re.compile(r"^www\d*\.")


def is_safe_url(url: str) -> bool:
    """Only absolute http/https URLs with a host are accepted."""
    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return False
    return parsed.scheme.lower() in SAFE_SCHEMES and bool(parsed.hostname)


def extract_domain_name(url: str) -> str:
    """Registrable name of a URL's host: 'https://www.bbc.co.uk/x' -> 'bbc'."""
    try:
        hostname = urlparse(url.strip()).hostname or ""
    except ValueError:
        return "Web"
    if not hostname:
        return "Web"

    parts = WWW_PREFIX_RE.sub("", hostname).split(".")
    if len(parts) >= 3 and parts[-2] in CC_SECOND_LEVEL:
        return parts[-3]
    if len(parts) >= 2:
        return parts[-2]
    return parts[0]


def capitalize_domain(domain: str) -> str:
    """Known acronyms upper-cased, everything else first-letter capitalized."""
    known = ACRONYMS.get(domain.lower())
    if known:
        return known
    return domain[:1].upper() + domain[1:]


def build_sources(citations: list[str] | None, fallback_label: str) -> list[SourceItem]:
    """Deduplicate and sanitize citation URLs; never returns an empty list.

    Unsafe URLs (javascript:, data:, relative paths, ...) are dropped silently.
    When nothing survives, a single synthetic source labelled *fallback_label*
    is returned.
    """
    unique = list(dict.fromkeys(citations or []))
    safe = [url for url in unique if is_safe_url(url)]
    if len(safe) < len(unique):
        logger.debug("Dropped %d unsafe citation URL(s)", len(unique) - len(safe))

    sources = [
        SourceItem(source=capitalize_domain(extract_domain_name(url)), title=f"Source {i}", url=url, icon="link")
        for i, url in enumerate(safe, start=1)
    ]
    if not sources:
        sources.append(SourceItem(source=FALLBACK_SOURCE, title=fallback_label, icon="description"))
    return sources
