"""URL helpers used by prompts and follow mode."""

from __future__ import annotations

from pathlib import Path
from urllib.parse import urljoin, urlsplit


def has_scheme(text: str) -> bool:
    """Check whether text already carries a URL scheme (http:, file:, about:...)."""
    parts = urlsplit(text)
    if not parts.scheme:
        return False
    # "localhost:8000" parses with scheme "localhost"; real schemes are
    # followed by "//" or are one of the opaque ones.
    return text.startswith(f"{parts.scheme}://") or parts.scheme in ("about", "data", "mailto", "javascript")


def from_user_input(text: str) -> str:
    """Turn what a user typed in the open prompt into a URL.

    - URLs with a scheme are kept as-is
    - Absolute or home-relative paths become file:// URLs
    - Anything else is treated as a host name and gets http://
    """
    text = text.strip()
    if not text:
        return ""
    if has_scheme(text):
        return text
    if text.startswith(("/", "~")):
        return Path(text).expanduser().absolute().as_uri()
    return f"http://{text}"


def resolve_href(href: str, current_url: str) -> str:
    """Resolve a link href against the scheme and host of the current page.

    The result is not validated; an unusable URL is left for the surface to
    reject.
    """
    if urlsplit(href).scheme:
        return href
    current = urlsplit(current_url)
    base = f"{current.scheme}://{current.netloc}/"
    return urljoin(base, href)
