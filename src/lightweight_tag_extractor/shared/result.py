"""Result objects for tag extraction operations.

This module defines the small value types returned by the locator and the
detailed scan API, including per-scan metrics.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class PivotLocation:
    """Position of a locator inside a text buffer.

    ``index`` is ``-1`` when nothing was found, in which case ``pivot`` is
    ``None``. Callers must check ``index`` (or ``found``) explicitly.
    """

    index: int
    pivot: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate pivot location."""
        if self.index < -1:
            raise ValueError("index must be >= -1")

    @property
    def found(self) -> bool:
        """Check if the locator matched anywhere."""
        return self.index >= 0

    @property
    def end(self) -> int:
        """Offset just past the pivot text, or -1 when not found."""
        if not self.found or self.pivot is None:
            return -1
        return self.index + len(self.pivot)


@dataclass
class ScanMetrics:
    """Counters collected while scanning one document."""

    characters_scanned: int = 0
    candidates_seen: int = 0
    candidates_rejected: int = 0
    elements_matched: int = 0
    max_nesting_depth: int = 0
    fast_path_used: bool = False
    limit_reached: bool = False
    processing_time_ms: float = 0.0

    @property
    def rejection_rate(self) -> float:
        """Share of candidate opening tags rejected by filters."""
        if self.candidates_seen == 0:
            return 0.0
        return self.candidates_rejected / self.candidates_seen

    @property
    def characters_per_second(self) -> float:
        """Calculate characters scanned per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.characters_scanned * 1000.0) / self.processing_time_ms

    def record_depth(self, depth: int) -> None:
        """Track the deepest same-type nesting seen so far."""
        if depth > self.max_nesting_depth:
            self.max_nesting_depth = depth


@dataclass
class ScanResult:
    """Matched elements together with the metrics of the scan."""

    tag_type: str
    elements: List[str] = field(default_factory=list)
    metrics: ScanMetrics = field(default_factory=ScanMetrics)
    correlation_id: Optional[str] = None

    @property
    def count(self) -> int:
        """Number of matched elements."""
        return len(self.elements)

    @property
    def first(self) -> Optional[str]:
        """First matched element, if any."""
        return self.elements[0] if self.elements else None

    def __iter__(self):
        return iter(self.elements)

    def __len__(self) -> int:
        return len(self.elements)
