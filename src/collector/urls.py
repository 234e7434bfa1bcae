"""URL resolution helpers."""

from urllib.parse import urldefrag, urljoin


def absolute_url(base: str, url: str) -> str:
    """
    Resolve url against base.

    - In-page anchors ("#...") resolve to an empty string
    - Unparseable input resolves to an empty string
    - The fragment of the result is dropped
    - Protocol-relative URLs ("//host/path") take the scheme of base
    """
    if url.startswith("#"):
        return ""

    try:
        resolved = urljoin(base, url)
    except ValueError:
        return ""

    return urldefrag(resolved).url
