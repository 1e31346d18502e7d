"""Simple text transforms used alongside the tag scanner."""

from .cleanup import filter_cr, html_entity_decode, parse_jsonp
from .matching import (
    get_chinese_words,
    get_last_match,
    get_matches,
    get_tag_by_text,
    get_tag_html,
    get_tag_text,
    get_url_link,
    get_url_links,
)
from .ranges import (
    get_between,
    get_text_range,
    get_text_range_after,
    get_text_range_before,
)

__all__ = [
    "filter_cr",
    "html_entity_decode",
    "parse_jsonp",
    "get_chinese_words",
    "get_last_match",
    "get_matches",
    "get_tag_by_text",
    "get_tag_html",
    "get_tag_text",
    "get_url_link",
    "get_url_links",
    "get_between",
    "get_text_range",
    "get_text_range_after",
    "get_text_range_before",
]
