"""URL validation shared by create and update."""

from urllib.parse import urlsplit

ALLOWED_SCHEMES = ("http", "https")


def is_valid_url(url: str) -> bool:
    """
    Check that ``url`` is an absolute http(s) URL with a host.

    The scheme match is case-sensitive: "HTTP://example.com" is rejected.
    Relative paths, opaque URIs ("mailto:x@y") and empty hosts
    ("http:///path") are rejected too.

    Stricter than a bare RFC 3986 parse on purpose: a port with no host
    ("http://:80") and a port outside 0-65535 ("http://a.com:99999") are
    rejected, since neither can be redirected to.
    """
    if not isinstance(url, str) or not url:
        return False

    # Control characters are never valid in a URL
    if any(ord(c) < 0x20 or ord(c) == 0x7F for c in url):
        return False

    # urlsplit lowercases the scheme, so check the raw prefix
    scheme, sep, _ = url.partition(":")
    if not sep or scheme not in ALLOWED_SCHEMES:
        return False

    try:
        parts = urlsplit(url)
        # Accessing .port validates it (raises ValueError when out of range)
        parts.port
    except ValueError:
        return False

    if not url[len(scheme) + 1:].startswith("//"):
        return False

    host = parts.hostname
    return bool(host) and not any(c.isspace() for c in host)
