"""Regex-based extraction helpers.

These helpers operate on flat markup and do not account for nesting; use
``BalancedTagScanner`` when elements of the same type may contain each other.
"""

import re
from typing import List, Optional, Pattern, Union

PatternArgument = Union[str, Pattern[str]]

URL_PATTERN = re.compile(r'href="([^"\'?; ]+)')
URL_WITH_QUERY_PATTERN = re.compile(r'href="([^"\'; ]+)')
CHINESE_WORD_PATTERN = re.compile(r">([\u4e00-\u9fa5\w]+)<")
TAG_TEXT_PATTERN = re.compile(r">([^<]*)</")
ANY_TAG_NAME = r"[a-z\d]+"


def get_matches(content: Optional[str], pattern: PatternArgument) -> Optional[List[str]]:
    """Return every full match of ``pattern`` in ``content``, or None."""
    if not isinstance(content, str):
        return None
    matches = [match.group(0) for match in re.finditer(pattern, content)]
    return matches or None


def get_last_match(content: Optional[str], pattern: PatternArgument) -> Optional[str]:
    """Return the last full match of ``pattern`` in ``content``."""
    matches = get_matches(content, pattern)
    if matches is None:
        return None
    return matches[-1]


def _group_matches(content: Optional[str], pattern: Pattern[str]) -> Optional[List[str]]:
    if not isinstance(content, str):
        return None
    values = [match.group(1) for match in pattern.finditer(content)]
    return values or None


def get_url_links(content: Optional[str], with_query: bool = False) -> Optional[List[str]]:
    """Collect the values of double-quoted ``href`` attributes.

    Without ``with_query`` each link is cut at the first ``?``.
    """
    pattern = URL_WITH_QUERY_PATTERN if with_query else URL_PATTERN
    return _group_matches(content, pattern)


def get_url_link(
    content: Optional[str],
    default: Optional[str] = None,
    with_query: bool = False
) -> Optional[str]:
    """Return the first ``href`` value, or ``default`` if there is none."""
    links = get_url_links(content, with_query)
    if not links:
        return default
    return links[0]


def get_chinese_words(
    content: Optional[str],
    pattern: Optional[PatternArgument] = None
) -> Optional[List[str]]:
    """Collect CJK or word-character runs that sit directly between tags."""
    compiled = re.compile(pattern) if pattern is not None else CHINESE_WORD_PATTERN
    return _group_matches(content, compiled)


def get_tag_text(
    content: Optional[str],
    pattern: Optional[PatternArgument] = None
) -> Optional[List[str]]:
    """Collect the text runs that end right before a closing tag.

    Only text without child markup is captured:

        >>> get_tag_text("<p>this is <span>a</span> test</p>")
        ['a', ' test']
    """
    compiled = re.compile(pattern) if pattern is not None else TAG_TEXT_PATTERN
    return _group_matches(content, compiled)


def get_tag_html(content: Optional[str]) -> Optional[str]:
    """Return the inner markup of an element.

        >>> get_tag_html("<p>this is a <span>test</span> string</p>")
        'this is a <span>test</span> string'
    """
    if not isinstance(content, str):
        return None
    inner_start = content.find(">")
    inner_end = content.rfind("</")
    if inner_start < 0 or inner_end <= inner_start:
        return None
    return content[inner_start + 1:inner_end]


def get_tag_by_text(
    content: Optional[str],
    text: str,
    tag: Optional[str] = None
) -> Optional[str]:
    """Return the first flat element whose body contains ``text``.

    Args:
        content: Source text
        text: Literal text the element body must contain
        tag: Restrict the search to one tag type; any tag name otherwise
    """
    if not isinstance(content, str):
        return None
    tag_name = re.escape(tag) if tag else ANY_TAG_NAME
    body = r"(?:(?!</\1>).)*?"
    pattern = re.compile(
        rf"<({tag_name})(?=[\s/>])[^>]*>{body}{re.escape(text)}{body}</\1>",
        re.IGNORECASE | re.DOTALL
    )
    match = pattern.search(content)
    return match.group(0) if match else None
