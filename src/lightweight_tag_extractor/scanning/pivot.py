"""Pivot location for keyword-anchored extraction.

A locator is a compiled pattern, an ordered sequence of literal alternatives,
or a single literal string. Alternatives are tried in the order given and the
first one that occurs anywhere in the content wins, even if a later
alternative occurs earlier in the text.
"""

from typing import Optional, Pattern, Sequence, Union

from lightweight_tag_extractor.shared.result import PivotLocation

Locator = Union[str, Sequence[str], Pattern[str]]

NOT_FOUND = -1


def locate_pivot(content: Optional[str], locator: Locator) -> Optional[PivotLocation]:
    """Find where ``locator`` occurs in ``content``.

    Args:
        content: Text to search
        locator: Pattern, ordered alternatives, or literal string

    Returns:
        PivotLocation with ``index == -1`` if nothing matched, or None when
        ``content`` is not text

    Examples:
        >>> locate_pivot("<a>key2 key1</a>", ["key1", "key2"])
        PivotLocation(index=8, pivot='key1')
        >>> locate_pivot("abc", "z").index
        -1
    """
    if not isinstance(content, str):
        return None

    if isinstance(locator, str):
        return _locate_literal(content, locator)

    if hasattr(locator, "search"):
        match = locator.search(content)
        if match is None:
            return PivotLocation(NOT_FOUND)
        return PivotLocation(match.start(), match.group(0))

    for alternative in locator:
        location = _locate_literal(content, alternative)
        if location.found:
            return location
    return PivotLocation(NOT_FOUND)


def _locate_literal(content: str, needle: str) -> PivotLocation:
    index = content.find(needle)
    if index < 0:
        return PivotLocation(NOT_FOUND)
    return PivotLocation(index, needle)
