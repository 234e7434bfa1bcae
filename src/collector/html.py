"""HTML parsing and CSS selection using selectolax."""

import logging

from selectolax.parser import HTMLParser, Node

from .http import HTMLElement, Request, Response

logger = logging.getLogger(__name__)


def is_html(content_type: str) -> bool:
    """Check whether a Content-Type header value denotes HTML."""
    return "html" in content_type.lower()


def parse_document(body: bytes) -> HTMLParser | None:
    """Parse an HTML body. Returns None if the document cannot be parsed."""
    try:
        return HTMLParser(body)
    except (TypeError, ValueError, RuntimeError) as e:
        logger.debug("Unparseable HTML document: %s", e)
        return None


def select(tree: HTMLParser, selector: str) -> list[Node]:
    """Return nodes matching selector in document order. Invalid selectors match nothing."""
    try:
        return tree.css(selector)
    except ValueError as e:
        logger.debug("Skipping selector %r: %s", selector, e)
        return []


def make_element(node: Node, request: Request, response: Response) -> HTMLElement:
    """Build an HTMLElement view over a selectolax node."""
    # Valueless attributes (<input disabled>) come back as None.
    attributes = tuple(
        (key, value if value is not None else "")
        for key, value in node.attributes.items()
    )
    return HTMLElement(
        name=node.tag,
        attributes=attributes,
        request=request,
        response=response,
        text=node.text(strip=True),
    )
