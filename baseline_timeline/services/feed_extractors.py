"""
Field extractors for loosely-shaped feed nodes.

A parsed feed field can arrive as a plain string, as an attributed element
(a mapping such as ``{"rel": "alternate", "href": "..."}`` or
``{"type": "html", "#text": "..."}``), or as a list of either when the element
is repeated. None of the helpers here raise; unresolvable input yields "".
"""

from __future__ import annotations

import re
from typing import Any, Mapping, Sequence, Union

LinkNode = Union[str, Mapping[str, Any], Sequence[Any], None]
ContentNode = Union[str, Mapping[str, Any], None]

# Text payload keys, in preference order: text node, CDATA block, generic value
CONTENT_TEXT_KEYS = ("#text", "cdata", "value")

_HTML_TAG_RE = re.compile(r"</?[^>]+(>|$)")
_WHITESPACE_RE = re.compile(r"\s+")
_HEX_REF_RE = re.compile(r"&#x([0-9A-Fa-f]+);")
_DEC_REF_RE = re.compile(r"&#(\d+);")
_NAMED_ENTITIES = (
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&amp;", "&"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&nbsp;", " "),
)


def _is_sequence(node: Any) -> bool:
    return isinstance(node, Sequence) and not isinstance(node, (str, bytes, bytearray))


def _rel_of(node: Any) -> Any:
    if isinstance(node, Mapping):
        return node.get("rel")
    return None


def extract_link(node: LinkNode) -> str:
    """
    Resolve an entry's link field to a URL string.

    Lists are Atom-style link sets: the first link whose rel is not "self"
    wins, otherwise the first link.
    """
    if not node:
        return ""

    if isinstance(node, str):
        return node

    if _is_sequence(node):
        primary = next((link for link in node if _rel_of(link) != "self"), node[0])
        return extract_link(primary)

    if isinstance(node, Mapping):
        href = node.get("href")
        if href:
            return str(href)

    return ""


def extract_content(node: ContentNode) -> str:
    """Return the textual payload of a content/summary node, or ""."""
    if not node:
        return ""

    if isinstance(node, str):
        return node

    if isinstance(node, Mapping):
        for key in CONTENT_TEXT_KEYS:
            value = node.get(key)
            if value:
                return str(value)

    return ""


def _decode_code_point(match: re.Match, base: int) -> str:
    try:
        code_point = int(match.group(1), base)
    except ValueError:
        return match.group(0)
    # surrogates and values past U+10FFFF are not encodable as UTF-8
    if code_point > 0x10FFFF or 0xD800 <= code_point <= 0xDFFF:
        return match.group(0)
    return chr(code_point)


def strip_html(html: str) -> str:
    """
    Reduce an HTML fragment to plain text.

    Tags are removed before entities are decoded, so escaped markup such as
    ``&lt;b&gt;`` survives as literal text.
    """
    text = _HTML_TAG_RE.sub("", html or "")
    text = _WHITESPACE_RE.sub(" ", text)
    text = _HEX_REF_RE.sub(lambda m: _decode_code_point(m, 16), text)
    text = _DEC_REF_RE.sub(lambda m: _decode_code_point(m, 10), text)
    for entity, replacement in _NAMED_ENTITIES:
        text = text.replace(entity, replacement)
    # Second collapse: decoded &nbsp; / &#10; may have produced new runs.
    # Deliberately stricter than a single pre-decode collapse ("a&nbsp;&nbsp;b"
    # gives "a b", not "a  b") so the output is stable under re-reduction.
    text = _WHITESPACE_RE.sub(" ", text)
    return text.strip()
