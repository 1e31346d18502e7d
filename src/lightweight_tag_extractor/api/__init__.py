"""Public extraction API."""

from .extractor import (
    TagExtractor,
    get_attribute,
    locate_pivot,
    parse_attributes,
    scan_first_tag,
    scan_tags,
)

__all__ = [
    "TagExtractor",
    "get_attribute",
    "locate_pivot",
    "parse_attributes",
    "scan_first_tag",
    "scan_tags",
]
