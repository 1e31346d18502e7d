"""Text cleanup transforms applied to scraped fragments."""

import json
import re
from typing import Any, Optional

from lightweight_tag_extractor.shared.exceptions import UnsupportedEntityError

ENTITY_PATTERN = re.compile(r"&#?\w+;")
LINE_BREAK_PATTERN = re.compile(r"\t|\r\n|\r|\n")

ENTITY_MAP = {
    "&#160;": " ",
    "&nbsp;": " ",
    "&lt;": "<",
    "&#60;": "<",
    "&gt;": ">",
    "&#62;": ">",
    "&amp;": "&",
    "&#38;": "&",
    "&quot;": '"',
    "&#34;": '"',
    "&#39;": "'",
    "&apos;": "'",
}


def html_entity_decode(html: str) -> str:
    """Replace the common HTML entities with the characters they stand for.

    Raises:
        UnsupportedEntityError: An entity outside ``ENTITY_MAP`` was found
    """
    def _decode(match: "re.Match[str]") -> str:
        entity = match.group(0)
        if entity not in ENTITY_MAP:
            raise UnsupportedEntityError(entity)
        return ENTITY_MAP[entity]

    return ENTITY_PATTERN.sub(_decode, html)


def filter_cr(content: Optional[str], replacement: str = "") -> Optional[str]:
    """Replace tabs and line breaks (``\\r\\n``, ``\\r``, ``\\n``)."""
    if content is None:
        return None
    return LINE_BREAK_PATTERN.sub(replacement, content)


def parse_jsonp(text: Optional[str]) -> Optional[Any]:
    """Decode the JSON payload of a JSONP response.

    The payload is taken between the first ``(`` and the last ``)``. Returns
    None when there is no payload or it is not valid JSON.
    """
    if not isinstance(text, str):
        return None
    start = text.find("(")
    end = text.rfind(")")
    if start < 0 or end <= start:
        return None
    try:
        return json.loads(text[start + 1:end])
    except ValueError:
        return None
