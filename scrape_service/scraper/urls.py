"""Resolution of document URLs against the page's base URL."""

from __future__ import annotations

from urllib.parse import urljoin, urlparse

from .errors import ResolutionError

# Schemes that only make sense with a host component
_HIERARCHICAL_SCHEMES = {"http", "https", "ftp", "ws", "wss"}


def is_absolute(url: str) -> bool:
    """Whether *url* carries a scheme, plus a host for hierarchical schemes.

    ``httpdocs/page.html`` is relative even though it starts with ``http``.
    """
    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return False
    if not parsed.scheme:
        return False
    if parsed.scheme in _HIERARCHICAL_SCHEMES:
        return bool(parsed.netloc)
    return True


def resolve_url(value: str, base_url: str) -> str:
    """Return *value* as an absolute URL, resolving it against *base_url*.

    Absolute values are returned unchanged. Raises ``ResolutionError`` when
    the joined result is not a syntactically valid absolute URL.
    """
    if is_absolute(value):
        return value

    try:
        resolved = urljoin(base_url, value.strip())
        parsed = urlparse(resolved)
    except ValueError as exc:
        raise ResolutionError(f"cannot resolve {value!r} against {base_url!r}: {exc}") from exc

    if not parsed.scheme:
        raise ResolutionError(f"cannot resolve {value!r} against {base_url!r}: no scheme")
    if parsed.scheme in _HIERARCHICAL_SCHEMES and not parsed.netloc:
        raise ResolutionError(f"cannot resolve {value!r} against {base_url!r}: no host")
    return resolved
