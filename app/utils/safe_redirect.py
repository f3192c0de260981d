"""Validation of the ?next= target used after login and sign-up."""

from urllib.parse import urlparse


def safe_redirect_url(url: str, fallback: str = "/") -> str:
    """Return ``url`` if it is a local page path, otherwise ``fallback``.

    Absolute and protocol-relative URLs (``//host``, ``/\\host``) are
    rejected.
    """
    if not url or not isinstance(url, str):
        return fallback

    url = url.strip()
    if not url.startswith("/") or url.startswith("//") or "\\" in url:
        return fallback

    parsed = urlparse(url)
    if parsed.scheme or parsed.netloc:
        return fallback

    return url
