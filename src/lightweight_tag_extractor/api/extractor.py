"""Core extraction API with progressive disclosure.

Level 1 is a set of module functions using the default configuration; Level 2
is the ``TagExtractor`` class, which carries an ``ExtractorConfig`` and a
correlation ID and keeps usage statistics across calls.
"""

import threading
import time
from typing import Any, Dict, List, Optional

from lightweight_tag_extractor.scanning import (
    BalancedTagScanner,
    Locator,
    locate_pivot as _locate_pivot,
)
from lightweight_tag_extractor.scanning import attributes as _attributes
from lightweight_tag_extractor.scanning.filters import RulesArgument
from lightweight_tag_extractor.shared import (
    ExtractorConfig,
    MalformedMarkupError,
    PivotLocation,
    ScanResult,
    get_logger,
)

MS_PER_SECOND = 1000

_default_scanner = BalancedTagScanner()


def scan_tags(
    content: Optional[str],
    tag_type: str,
    includes: RulesArgument = None,
    excludes: RulesArgument = None,
    limit: Optional[int] = None
) -> Optional[List[str]]:
    """Find elements of ``tag_type`` in source order.

    Args:
        content: Source text (None or any non-string yields None)
        tag_type: Tag name, e.g. ``"div"``
        includes: Literal substrings or predicates that must all match the
            raw opening tag
        excludes: Literal substrings or predicates of which none may match
        limit: Maximum number of elements (0 or None means unbounded)

    Returns:
        List of element strings, or None for non-text content

    Raises:
        MalformedMarkupError: With rules given, an accepted element is never
            closed

    Examples:
        >>> scan_tags('<li>a</li><li>b</li>', "li")
        ['<li>a</li>', '<li>b</li>']
        >>> scan_tags('<div class="a">1</div><div class="b">2</div>', "div",
        ...           includes='class="b"')
        ['<div class="b">2</div>']
    """
    return _default_scanner.scan(content, tag_type, includes, excludes, limit)


def scan_first_tag(
    content: Optional[str],
    tag_type: str,
    includes: RulesArgument = None,
    excludes: RulesArgument = None
) -> Optional[str]:
    """Find the first element of ``tag_type``, or None."""
    return _default_scanner.scan_first(content, tag_type, includes, excludes)


def parse_attributes(tag_text: str) -> Dict[str, str]:
    """Extract ``name="value"`` pairs from an opening tag (or element)."""
    return _attributes.parse_attributes(tag_text)


def get_attribute(tag_text: str, name: str) -> Optional[str]:
    """Return one attribute value of an opening tag, or None."""
    return _attributes.get_attribute(tag_text, name)


def locate_pivot(content: Optional[str], locator: Locator) -> Optional[PivotLocation]:
    """Find the position and text of ``locator`` in ``content``."""
    return _locate_pivot(content, locator)


class TagExtractor:
    """Configured extractor for repeated use.

    Attributes:
        config: Active extractor configuration
        correlation_id: Correlation ID attached to log records

    Examples:
        >>> extractor = TagExtractor(ExtractorConfig.strict())
        >>> extractor.scan_tags("<DIV>a</DIV><div>b</div>", "div")
        ['<div>b</div>']

        >>> result = TagExtractor().scan_detailed("<p>1</p><p>2</p>", "p")
        >>> result.count, result.metrics.fast_path_used
        (2, True)
    """

    def __init__(
        self,
        config: Optional[ExtractorConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or ExtractorConfig.balanced()
        self.correlation_id = (
            correlation_id if self.config.global_.enable_correlation_tracking else None
        )
        self.logger = get_logger(__name__, self.correlation_id, "tag_extractor")
        self._scanner = BalancedTagScanner(self.config.scan, self.correlation_id)

        self._lock = threading.Lock()
        self._scan_count = 0
        self._failed_scans = 0
        self._elements_returned = 0
        self._total_processing_time = 0.0

        self.logger.debug(
            "TagExtractor initialized",
            extra={"preset": self.config.name}
        )

    def scan_detailed(
        self,
        content: Optional[str],
        tag_type: str,
        includes: RulesArgument = None,
        excludes: RulesArgument = None,
        limit: Optional[int] = None
    ) -> Optional[ScanResult]:
        """Scan for ``tag_type`` and return elements with scan metrics."""
        start_time = time.time()
        try:
            result = self._scanner.scan_detailed(
                content, tag_type, includes, excludes, limit
            )
        except MalformedMarkupError as e:
            self._record((time.time() - start_time) * MS_PER_SECOND, 0, failed=True)
            self.logger.info(
                "Scan rejected malformed markup",
                extra={"tag_type": tag_type, "position": e.position}
            )
            raise

        if result is not None:
            self._record(result.metrics.processing_time_ms, result.count)
        return result

    def scan_tags(
        self,
        content: Optional[str],
        tag_type: str,
        includes: RulesArgument = None,
        excludes: RulesArgument = None,
        limit: Optional[int] = None
    ) -> Optional[List[str]]:
        """Same as :func:`scan_tags` using this extractor's configuration."""
        result = self.scan_detailed(content, tag_type, includes, excludes, limit)
        return None if result is None else result.elements

    def scan_first_tag(
        self,
        content: Optional[str],
        tag_type: str,
        includes: RulesArgument = None,
        excludes: RulesArgument = None
    ) -> Optional[str]:
        """Same as :func:`scan_first_tag` using this extractor's configuration."""
        result = self.scan_detailed(content, tag_type, includes, excludes, 1)
        return None if result is None else result.first

    def parse_attributes(self, tag_text: str) -> Dict[str, str]:
        """Parse attributes honouring the configured quoting policy."""
        return _attributes.parse_attributes(tag_text, self.config.attributes)

    def get_attribute(self, tag_text: str, name: str) -> Optional[str]:
        """Return one attribute honouring the configured quoting policy."""
        return _attributes.get_attribute(tag_text, name, self.config.attributes)

    def locate_pivot(
        self,
        content: Optional[str],
        locator: Locator
    ) -> Optional[PivotLocation]:
        """Find the position and text of ``locator`` in ``content``."""
        return _locate_pivot(content, locator)

    def reconfigure(self, config: ExtractorConfig) -> None:
        """Swap in a new configuration; statistics are kept."""
        self.config = config
        self._scanner = BalancedTagScanner(config.scan, self.correlation_id)
        self.logger.info("Extractor reconfigured", extra={"preset": config.name})

    def _record(self, processing_time_ms: float, elements: int,
                failed: bool = False) -> None:
        with self._lock:
            self._scan_count += 1
            self._elements_returned += elements
            self._total_processing_time += processing_time_ms
            if failed:
                self._failed_scans += 1

    @property
    def statistics(self) -> Dict[str, Any]:
        """Usage statistics accumulated since creation or last reset."""
        with self._lock:
            scans = self._scan_count
            return {
                "total_scans": scans,
                "failed_scans": self._failed_scans,
                "elements_returned": self._elements_returned,
                "total_processing_time_ms": self._total_processing_time,
                "average_processing_time_ms": (
                    self._total_processing_time / scans if scans > 0 else 0.0
                ),
                "correlation_id": self.correlation_id,
            }

    def reset_statistics(self) -> None:
        """Reset usage statistics."""
        with self._lock:
            self._scan_count = 0
            self._failed_scans = 0
            self._elements_returned = 0
            self._total_processing_time = 0.0
