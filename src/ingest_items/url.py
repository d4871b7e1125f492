"""URL normalization and fetch safety checks."""

import ipaddress
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

TRACKING_PARAMS = {
    "utm_source", "utm_medium", "utm_campaign", "utm_term", "utm_content",
    "utm_id", "utm_source_platform", "utm_creative_format", "utm_marketing_tactic",
    "fbclid", "gclid", "msclkid", "twclid", "igshid",
    "ref", "_ga", "mc_cid", "mc_eid",
}

BLOCKED_HOSTS = {"localhost", "0.0.0.0", "::1"}


class UnsafeUrlError(ValueError):
    """Raised for URLs that must not be fetched (bad scheme, loopback, private range)."""


def _is_private_ip(host: str) -> bool:
    try:
        address = ipaddress.ip_address(host)
    except ValueError:
        return False
    return address.is_private or address.is_loopback or address.is_unspecified


def validate_url_for_fetch(url: str) -> None:
    """Raise UnsafeUrlError unless the URL is a public http(s) target."""
    try:
        parsed = urlsplit(url.strip())
    except ValueError as exc:
        raise UnsafeUrlError(f"Invalid URL: {url}") from exc

    if parsed.scheme.lower() not in ("http", "https"):
        raise UnsafeUrlError(f"Disallowed URL scheme: {parsed.scheme or '(none)'}")

    host = (parsed.hostname or "").lower()
    if not host:
        raise UnsafeUrlError(f"Invalid URL: {url}")
    if host in BLOCKED_HOSTS:
        raise UnsafeUrlError(f"Disallowed URL host: {host}")
    if _is_private_ip(host):
        raise UnsafeUrlError(f"Disallowed private IP: {host}")


def normalize_url(raw_url: str) -> str:
    """Normalize a URL for stable deduplication.

    Lowercases scheme and host, drops the fragment and tracking parameters,
    sorts the remaining query parameters and strips a trailing slash from
    non-root paths. Unparseable input falls back to its trimmed lowercase form.
    """
    candidate = raw_url.strip()
    try:
        parsed = urlsplit(candidate)
    except ValueError:
        return candidate.lower()
    if not parsed.scheme or not parsed.netloc:
        return candidate.lower()

    query = [
        (key, value)
        for key, value in parse_qsl(parsed.query, keep_blank_values=True)
        if key.lower() not in TRACKING_PARAMS
    ]
    query.sort()

    path = parsed.path or "/"
    if path != "/" and path.endswith("/"):
        path = path[:-1]

    return urlunsplit(
        (parsed.scheme.lower(), parsed.netloc.lower(), path, urlencode(query), "")
    )
