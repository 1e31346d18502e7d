"""Windows of text anchored on a keyword or between two markers.

Window starts are clamped at the beginning of the content, so asking for 50
characters before a keyword at offset 10 yields the first 10 characters.
"""

from typing import Optional

from lightweight_tag_extractor.scanning.pivot import Locator, locate_pivot


def get_text_range(
    content: Optional[str],
    locator: Locator,
    left_length: int,
    right_length: int
) -> Optional[str]:
    """Extract text around the first occurrence of ``locator``.

    The window spans ``left_length`` characters before the pivot's start and
    ``right_length`` characters from its start onwards.

    Example:
        >>> get_text_range('data-pb="r=headline&amp;x"', "headline", 4, 10)
        '="r=headline&a'
    """
    location = locate_pivot(content, locator)
    if location is None or not location.found:
        return None
    start = max(0, location.index - left_length)
    return content[start:location.index + right_length]


def get_text_range_before(
    content: Optional[str],
    locator: Locator,
    length: int,
    include_pivot: bool = False
) -> Optional[str]:
    """Extract ``length`` characters preceding the pivot."""
    location = locate_pivot(content, locator)
    if location is None or not location.found:
        return None
    end = location.end if include_pivot else location.index
    return content[max(0, location.index - length):end]


def get_text_range_after(
    content: Optional[str],
    locator: Locator,
    length: int,
    include_pivot: bool = False
) -> Optional[str]:
    """Extract ``length`` characters following the pivot."""
    location = locate_pivot(content, locator)
    if location is None or not location.found:
        return None
    start = location.index if include_pivot else location.end
    return content[start:start + length]


def get_between(
    content: Optional[str],
    left: str,
    right: str,
    include_markers: bool = False,
    from_index: int = 0
) -> Optional[str]:
    """Return the text between ``left`` and the next ``right`` after it.

    Args:
        content: Source text
        left: Opening marker
        right: Closing marker, searched for after the opening marker
        include_markers: Keep both markers in the returned text
        from_index: Offset to start looking for ``left``

    Returns:
        The enclosed text, or None if either marker is missing
    """
    if not isinstance(content, str):
        return None
    start = content.find(left, from_index)
    if start < 0:
        return None
    inner_start = start + len(left)
    end = content.find(right, inner_start)
    if end < 0:
        return None
    if include_markers:
        return content[start:end + len(right)]
    return content[inner_start:end]
