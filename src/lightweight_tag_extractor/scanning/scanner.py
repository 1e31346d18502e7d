"""Balanced same-tag scanner.

Locates complete elements of one tag type by linear text search, without
building a tree. The scanner keeps the source string intact and works with
offsets into it; an element is copied out only once its closing boundary is
known.

Two paths exist:

- Unfiltered (no include or exclude rules): each opening tag runs to the
  first closing tag after it, the shortest body. When that body contains
  another opening tag of the same type, the element is re-measured against a
  table of balanced closing tags built once per scan, so the outermost
  element is returned and the scan stays linear. An opening tag that is
  never closed ends the scan quietly.
- Filtered: every candidate opening tag is checked against the rules, and each
  accepted one is balanced against nested same-type tags. An accepted element
  that never closes raises ``MalformedMarkupError``.
"""

import heapq
import logging
import re
import time
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, List, Optional, Pattern, Tuple

from lightweight_tag_extractor.scanning.filters import RuleSet, RulesArgument
from lightweight_tag_extractor.shared.config import ScanConfig
from lightweight_tag_extractor.shared.exceptions import MalformedMarkupError
from lightweight_tag_extractor.shared.logging import get_logger
from lightweight_tag_extractor.shared.result import ScanMetrics, ScanResult

MS_PER_SECOND = 1000
PATTERN_CACHE_SIZE = 256

# Characters that may follow a tag name inside an opening tag
TAG_NAME_BOUNDARY = r"(?=[\s/>])"


@dataclass(frozen=True)
class TagPatterns:
    """Compiled patterns for one tag type and case policy."""

    opening: Pattern[str]
    closing: Pattern[str]


@lru_cache(maxsize=PATTERN_CACHE_SIZE)
def compile_tag_patterns(tag_type: str, case_sensitive: bool) -> TagPatterns:
    """Build (and cache) the patterns used to scan for ``tag_type``."""
    flags = 0 if case_sensitive else re.IGNORECASE
    name = re.escape(tag_type)
    return TagPatterns(
        opening=re.compile(f"<{name}{TAG_NAME_BOUNDARY}", flags),
        closing=re.compile(f"</{name}>", flags),
    )


def find_balanced_end(
    content: str,
    body_start: int,
    patterns: TagPatterns,
    metrics: Optional[ScanMetrics] = None
) -> Tuple[Optional[int], int]:
    """Find where the element whose opening tag ends at ``body_start`` closes.

    Args:
        content: Source text
        body_start: Offset just past the accepted opening tag's ``>``
        patterns: Compiled patterns for the tag type
        metrics: Optional metrics to record the nesting depth in

    Returns:
        ``(end, depth)``: the offset just past the matching closing tag and 0,
        or ``(None, depth)`` with the number of levels left open when the
        markup runs out of closing tags
    """
    depth = 1
    if metrics is not None:
        metrics.record_depth(depth)
    next_opening = patterns.opening.search(content, body_start)
    next_closing = patterns.closing.search(content, body_start)

    while next_closing is not None:
        if next_opening is not None and next_opening.start() < next_closing.start():
            depth += 1
            if metrics is not None:
                metrics.record_depth(depth)
            next_opening = patterns.opening.search(content, next_opening.end())
            continue

        depth -= 1
        if depth == 0:
            return next_closing.end(), 0
        next_closing = patterns.closing.search(content, next_closing.end())

    return None, depth


def match_closing_tags(content: str, patterns: TagPatterns) -> Dict[int, int]:
    """Pair every balanced opening tag with its closing tag in one pass.

    Returns:
        Mapping of opening-tag offset to the offset just past the closing tag
        that brings it back to depth 0. Opening tags that never close are
        absent.
    """
    openings = ((m.start(), m.end(), True) for m in patterns.opening.finditer(content))
    closings = ((m.start(), m.end(), False) for m in patterns.closing.finditer(content))

    balanced_ends: Dict[int, int] = {}
    open_starts: List[int] = []
    for start, end, is_opening in heapq.merge(openings, closings):
        if is_opening:
            open_starts.append(start)
        elif open_starts:
            balanced_ends[open_starts.pop()] = end
    return balanced_ends


class BalancedTagScanner:
    """Scanner for complete elements of a single tag type.

    Instances hold only configuration and a logger, so one scanner may be
    shared between threads.

    Examples:
        >>> scanner = BalancedTagScanner()
        >>> scanner.scan('<div id="a"><div id="b">x</div>y</div>', "div", limit=1)
        ['<div id="a"><div id="b">x</div>y</div>']
        >>> scanner.scan('<p class="a">1</p><p class="b">2</p>', "p",
        ...              includes=['class="b"'])
        ['<p class="b">2</p>']
    """

    def __init__(
        self,
        config: Optional[ScanConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or ScanConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "balanced_tag_scanner")

    def scan(
        self,
        content: Optional[str],
        tag_type: str,
        includes: RulesArgument = None,
        excludes: RulesArgument = None,
        limit: Optional[int] = None
    ) -> Optional[List[str]]:
        """Return the elements of ``tag_type`` in source order.

        Args:
            content: Source text; anything that is not a ``str`` yields None
            tag_type: Tag name such as ``"div"``
            includes: Rules that must all match the opening tag
            excludes: Rules of which none may match the opening tag
            limit: Maximum number of elements; 0 or None means unbounded
                (None falls back to ``ScanConfig.default_limit``)

        Returns:
            List of element strings, or None for non-text content

        Raises:
            MalformedMarkupError: An accepted element on the filtered path is
                never closed
        """
        result = self.scan_detailed(content, tag_type, includes, excludes, limit)
        if result is None:
            return None
        return result.elements

    def scan_first(
        self,
        content: Optional[str],
        tag_type: str,
        includes: RulesArgument = None,
        excludes: RulesArgument = None
    ) -> Optional[str]:
        """Return the first element of ``tag_type`` or None."""
        result = self.scan_detailed(content, tag_type, includes, excludes, 1)
        if result is None:
            return None
        return result.first

    def scan_detailed(
        self,
        content: Optional[str],
        tag_type: str,
        includes: RulesArgument = None,
        excludes: RulesArgument = None,
        limit: Optional[int] = None
    ) -> Optional[ScanResult]:
        """Scan like :meth:`scan` and also report metrics."""
        if not isinstance(content, str):
            return None
        if not isinstance(tag_type, str) or not tag_type:
            raise ValueError("tag_type must be a non-empty string")

        if limit is None:
            limit = self.config.default_limit
        if limit < 0:
            raise ValueError("limit must be >= 0")

        rules = RuleSet.build(includes, excludes)
        patterns = compile_tag_patterns(tag_type, self.config.case_sensitive)
        metrics = ScanMetrics(characters_scanned=len(content))
        start_time = time.time()

        if rules.is_empty and self.config.enable_fast_path:
            metrics.fast_path_used = True
            elements = self._scan_unfiltered(content, patterns, limit, metrics)
        else:
            elements = self._scan_filtered(
                content, tag_type, patterns, rules, limit, metrics
            )

        metrics.elements_matched = len(elements)
        metrics.processing_time_ms = (time.time() - start_time) * MS_PER_SECOND

        if self.logger.is_enabled_for(logging.DEBUG):
            self.logger.debug(
                "Tag scan completed",
                extra={
                    "tag_type": tag_type,
                    "elements_matched": metrics.elements_matched,
                    "candidates_seen": metrics.candidates_seen,
                    "candidates_rejected": metrics.candidates_rejected,
                    "fast_path_used": metrics.fast_path_used,
                    "processing_time_ms": metrics.processing_time_ms,
                }
            )

        return ScanResult(
            tag_type=tag_type,
            elements=elements,
            metrics=metrics,
            correlation_id=self.correlation_id,
        )

    def _scan_unfiltered(
        self,
        content: str,
        patterns: TagPatterns,
        limit: int,
        metrics: ScanMetrics
    ) -> List[str]:
        elements: List[str] = []
        position = 0
        closing = None
        balanced_ends: Optional[Dict[int, int]] = None

        while True:
            candidate = patterns.opening.search(content, position)
            if candidate is None:
                break
            tag_start = candidate.start()
            tag_end = content.find(">", tag_start)
            if tag_end < 0:
                break
            body_start = tag_end + 1

            # Shortest body: the element ends at the first closing tag after it
            if closing is None or closing.start() < body_start:
                closing = patterns.closing.search(content, body_start)
                if closing is None:
                    break
            metrics.candidates_seen += 1
            element_end = closing.end()

            if self.config.balance_fast_path:
                nested = patterns.opening.search(content, body_start, closing.start())
                if nested is not None:
                    if balanced_ends is None:
                        balanced_ends = match_closing_tags(content, patterns)
                    balanced_end = self._fast_balanced_end(
                        content, tag_start, body_start, patterns, balanced_ends
                    )
                    # Unbalanced nesting keeps the flat match
                    if balanced_end is not None:
                        element_end = balanced_end

            elements.append(content[tag_start:element_end])
            position = element_end

            if limit > 0 and len(elements) >= limit:
                metrics.limit_reached = True
                break

        return elements

    @staticmethod
    def _fast_balanced_end(
        content: str,
        tag_start: int,
        body_start: int,
        patterns: TagPatterns,
        balanced_ends: Dict[int, int]
    ) -> Optional[int]:
        # Tag-like text inside the opening tag itself is skipped by the
        # balancing loop but not by the table
        inside = (
            patterns.opening.search(content, tag_start + 1, body_start)
            or patterns.closing.search(content, tag_start + 1, body_start)
        )
        if inside is not None:
            return find_balanced_end(content, body_start, patterns)[0]
        return balanced_ends.get(tag_start)

    def _scan_filtered(
        self,
        content: str,
        tag_type: str,
        patterns: TagPatterns,
        rules: RuleSet,
        limit: int,
        metrics: ScanMetrics
    ) -> List[str]:
        elements: List[str] = []
        position = 0

        while True:
            candidate = patterns.opening.search(content, position)
            if candidate is None:
                break
            tag_start = candidate.start()
            tag_end = content.find(">", tag_start)
            if tag_end < 0:
                break
            body_start = tag_end + 1
            metrics.candidates_seen += 1

            if not rules.accepts(content[tag_start:body_start]):
                metrics.candidates_rejected += 1
                position = body_start
                continue

            element_end, open_depth = find_balanced_end(
                content, body_start, patterns, metrics
            )
            if element_end is None:
                self.logger.warning(
                    "Unbalanced element aborted tag scan",
                    extra={
                        "tag_type": tag_type,
                        "position": tag_start,
                        "open_depth": open_depth,
                        "elements_discarded": len(elements),
                    }
                )
                raise MalformedMarkupError(content, tag_type, tag_start, open_depth)

            elements.append(content[tag_start:element_end])
            position = element_end

            if limit > 0 and len(elements) >= limit:
                metrics.limit_reached = True
                break

        return elements
