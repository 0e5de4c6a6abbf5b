"""Named validators for submitted setting values.

A validator takes the raw submitted value and returns the value to store, or
raises ``ValueError`` to reject it. Fields reference validators by name.
"""

import hashlib
import logging
import re
from typing import Any, Callable
from urllib.parse import quote, urlparse

from lxml import etree, html

logger = logging.getLogger(__name__)

Validator = Callable[[Any], Any]

# Tags (and their attributes) allowed in the feed "no access" message
ALLOWED_MESSAGE_TAGS = {
    "a": {"href", "title", "target"},
    "br": set(),
    "em": set(),
    "strong": set(),
    "p": set(),
}
ALLOWED_URL_SCHEMES = ("http", "https")

_DROP_WITH_CONTENT = ("script", "style")
_COLOUR_PATTERN = re.compile(r"^#(?:[0-9a-fA-F]{3}){1,2}$")


def _fragment(value: str):
    try:
        return html.fragment_fromstring(value, create_parent="div")
    except (AssertionError, etree.ParserError) as e:
        raise ValueError(f"Unparseable markup: {e}") from e


def _inner_html(root) -> str:
    content = html.tostring(root, encoding="unicode")
    return content[len("<div>") : -len("</div>")]


def strip_all_tags(value: Any) -> str:
    """Remove all markup, including the content of script and style tags."""
    if value is None:
        return ""
    text = str(value)
    if not text.strip():
        return ""

    try:
        root = _fragment(text)
    except ValueError as e:
        # Document-level markup with no body text
        logger.debug(f"Stripping unparseable markup to empty text: {e}")
        return ""
    for el in root.xpath(".//script|.//style"):
        el.drop_tree()
    return root.text_content().strip()


def esc_url_raw(value: Any) -> str:
    """Accept an empty value or an absolute http(s) URL."""
    url = str(value or "").strip()
    if not url:
        return ""

    parsed = urlparse(url)
    if parsed.scheme not in ALLOWED_URL_SCHEMES or not parsed.netloc:
        raise ValueError(f"Invalid URL: {url}")
    return url.replace(" ", "%20")


def encode_password(value: Any) -> str:
    """One-way encode a feed password. Empty input stays empty."""
    password = str(value or "")
    if not password:
        return ""
    return hashlib.md5(password.encode("utf-8")).hexdigest()


def _clean_message_tree(parent) -> None:
    for el in list(parent):
        if not isinstance(el.tag, str) or el.tag in _DROP_WITH_CONTENT:
            el.drop_tree()
            continue

        _clean_message_tree(el)

        allowed = ALLOWED_MESSAGE_TAGS.get(el.tag)
        if allowed is None:
            el.drop_tag()
            continue

        for attr in list(el.attrib):
            if attr not in allowed:
                del el.attrib[attr]

        href = el.get("href")
        if href is not None and urlparse(href.strip()).scheme not in ALLOWED_URL_SCHEMES + ("",):
            del el.attrib["href"]


def validate_message(value: Any) -> str:
    """Keep only a small set of inline tags in the no-access message."""
    if not value:
        return ""

    root = _fragment(str(value))
    _clean_message_tree(root)
    return _inner_html(root)


def validate_slug(value: Any) -> str:
    slug = str(value or "")
    if not slug:
        return slug
    return quote(slug.replace(" ", "-").lower(), safe="")


def validate_colour(value: Any) -> str:
    colour = str(value or "").strip()
    if not colour:
        return ""
    if not _COLOUR_PATTERN.match(colour):
        raise ValueError(f"Invalid colour: {colour}")
    return colour.lower()


VALIDATORS: dict[str, Validator] = {
    "strip_all_tags": strip_all_tags,
    "wp_strip_all_tags": strip_all_tags,
    "esc_url_raw": esc_url_raw,
    "encode_password": encode_password,
    "validate_message": validate_message,
    "validate_slug": validate_slug,
    "validate_colour": validate_colour,
}
