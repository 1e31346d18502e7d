"""Attribute map parsing for opening tags.

Input may be a bare opening tag or a whole element: everything after the
first ``>`` is ignored. By default only ``name="value"`` pairs are
recognised; single-quoted and unquoted values are skipped unless enabled
through ``AttributeConfig``.
"""

import re
from typing import Dict, Optional

from lightweight_tag_extractor.shared.config import AttributeConfig

DOUBLE_QUOTED_PATTERN = re.compile(r'([^\s=<>"\'/]+)="([^"]*)"')
EXTENDED_PATTERN = re.compile(
    r'([^\s=<>"\'/]+)\s*=\s*(?:"([^"]*)"|\'([^\']*)\'|([^\s"\'=<>`]+))'
)

_DEFAULT_CONFIG = AttributeConfig()


def opening_tag(tag_text: str) -> str:
    """Truncate ``tag_text`` so that it ends at the first ``>``."""
    tag_end = tag_text.find(">")
    if tag_end >= 0:
        return tag_text[:tag_end + 1]
    return tag_text


def parse_attributes(
    tag_text: str,
    config: Optional[AttributeConfig] = None
) -> Dict[str, str]:
    """Extract the attributes of an opening tag.

    Args:
        tag_text: Opening tag or full element markup
        config: Optional quoting policy

    Returns:
        Mapping of attribute name to raw (undecoded) value. When a name
        repeats, the last occurrence wins.

    Examples:
        >>> parse_attributes('<a href="x" title="y">text</a>')
        {'href': 'x', 'title': 'y'}
        >>> parse_attributes("<a href='x'>")
        {}
    """
    config = config or _DEFAULT_CONFIG
    tag_text = opening_tag(tag_text)

    attributes: Dict[str, str] = {}
    if config.double_quotes_only:
        for match in DOUBLE_QUOTED_PATTERN.finditer(tag_text):
            attributes[match.group(1)] = match.group(2)
        return attributes

    for match in EXTENDED_PATTERN.finditer(tag_text):
        name, double_quoted, single_quoted, unquoted = match.groups()
        if double_quoted is not None:
            attributes[name] = double_quoted
        elif single_quoted is not None and config.allow_single_quotes:
            attributes[name] = single_quoted
        elif unquoted is not None and config.allow_unquoted:
            attributes[name] = unquoted
    return attributes


def get_attribute(
    tag_text: str,
    name: str,
    config: Optional[AttributeConfig] = None
) -> Optional[str]:
    """Return the value of attribute ``name`` or None when absent."""
    return parse_attributes(tag_text, config).get(name)
