"""URL canonicalization and crawl scope rules."""

from __future__ import annotations

from typing import Optional
from urllib.parse import urljoin, urlsplit, urlunsplit

FETCHABLE_SCHEMES = frozenset({"http", "https"})


def fold_host(hostname: str) -> str:
    """Lower-cases a hostname and drops one leading ``www.``.

    ``www.example.com`` and ``example.com`` are treated as the same site.
    This is a heuristic, not a public-suffix comparison.
    """

    host = hostname.lower().rstrip(".")
    return host[4:] if host.startswith("www.") else host


def normalize_url(base_url: str, href: Optional[str]) -> Optional[str]:
    """Resolves ``href`` against ``base_url``; ``None`` when malformed."""

    if href is None:
        return None
    candidate = href.strip()
    if not candidate:
        return None

    try:
        if candidate.startswith(("http://", "https://")):
            joined = candidate
        else:
            joined = urljoin(base_url, candidate)

        parsed = urlsplit(joined)
        # Accessing .port validates it; a bad port raises ValueError.
        parsed.port
    except ValueError:
        return None

    scheme = parsed.scheme.lower()
    if scheme in FETCHABLE_SCHEMES:
        if not parsed.hostname:
            return None
        path = parsed.path or "/"
        return urlunsplit((scheme, parsed.netloc.lower(), path, parsed.query, ""))

    if not scheme:
        return None
    return urlunsplit(parsed._replace(scheme=scheme, fragment=""))


def is_fetchable(url: str) -> bool:
    try:
        return urlsplit(url).scheme.lower() in FETCHABLE_SCHEMES
    except ValueError:
        return False


def is_internal(candidate: str, origin: str) -> bool:
    """True when ``candidate`` is an http(s) URL on the same site as ``origin``."""

    try:
        parsed_candidate = urlsplit(candidate)
        parsed_origin = urlsplit(origin)
        candidate_host = parsed_candidate.hostname
        origin_host = parsed_origin.hostname
    except ValueError:
        return False

    if parsed_candidate.scheme.lower() not in FETCHABLE_SCHEMES:
        return False
    if not candidate_host or not origin_host:
        return False
    return fold_host(candidate_host) == fold_host(origin_host)


def hostname_of(url: str) -> Optional[str]:
    try:
        hostname = urlsplit(url).hostname
    except ValueError:
        return None
    return hostname or None
