"""Performance profiling for tag scans.

Measures wall time and resident memory growth around scan calls so that
extraction jobs over large pages can be checked for throughput and for
memory that grows with document size rather than with the matches kept.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import psutil

from lightweight_tag_extractor.shared.logging import get_logger

BYTES_PER_MB = 1024 * 1024


@dataclass
class ScanProfile:
    """Timing and memory figures for one profiled scan."""

    label: str
    input_size: int  # characters
    start_time: float
    end_time: float = 0.0
    memory_start: int = 0  # bytes
    memory_end: int = 0  # bytes
    element_count: int = 0
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def duration_ms(self) -> float:
        """Processing duration in milliseconds."""
        return (self.end_time - self.start_time) * 1000

    @property
    def memory_delta(self) -> int:
        """Resident memory change in bytes."""
        return self.memory_end - self.memory_start

    @property
    def throughput_mb_per_s(self) -> float:
        """Input processed per second in MB, counting one byte per character."""
        duration_s = self.end_time - self.start_time
        if duration_s <= 0:
            return 0.0
        return (self.input_size / BYTES_PER_MB) / duration_s

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "input_size": self.input_size,
            "duration_ms": self.duration_ms,
            "memory_delta_bytes": self.memory_delta,
            "element_count": self.element_count,
            "throughput_mb_per_s": self.throughput_mb_per_s,
        }


@dataclass
class ProfileReport:
    """Aggregate over all recorded profiles."""

    profiles: List[ScanProfile]
    generation_time: float

    @property
    def profile_count(self) -> int:
        return len(self.profiles)

    @property
    def average_duration_ms(self) -> float:
        if not self.profiles:
            return 0.0
        return sum(p.duration_ms for p in self.profiles) / len(self.profiles)

    @property
    def peak_memory_delta(self) -> int:
        if not self.profiles:
            return 0
        return max(p.memory_delta for p in self.profiles)

    @property
    def total_elements(self) -> int:
        return sum(p.element_count for p in self.profiles)


class ScanProfiler:
    """Collects ScanProfile entries through a context manager.

    Examples:
        >>> profiler = ScanProfiler()
        >>> with profiler.profile("page-1", input_size=len(html)) as profile:
        ...     profile.element_count = len(scan_tags(html, "div"))
        >>> profiler.generate_report().profile_count
        1
    """

    def __init__(self, enable_memory_tracking: bool = True) -> None:
        """Initialize scan profiler.

        Args:
            enable_memory_tracking: Sample process RSS before and after each scan
        """
        self.enable_memory_tracking = enable_memory_tracking
        self.profiles: List[ScanProfile] = []
        self.logger = get_logger(__name__, None, "scan_profiler")
        self._process = psutil.Process() if enable_memory_tracking else None

    def _memory(self) -> int:
        if self._process is None:
            return 0
        return self._process.memory_info().rss

    def profile(self, label: str, input_size: int = 0) -> "ProfileContext":
        """Profile the enclosed block under ``label``."""
        return ProfileContext(self, label, input_size)

    def record(self, profile: ScanProfile) -> None:
        self.profiles.append(profile)
        self.logger.debug(
            "Scan profiled",
            extra={
                "label": profile.label,
                "duration_ms": profile.duration_ms,
                "memory_delta_bytes": profile.memory_delta,
            }
        )

    def generate_report(self) -> ProfileReport:
        """Aggregate all profiles recorded so far."""
        return ProfileReport(profiles=list(self.profiles), generation_time=time.time())

    def clear(self) -> None:
        """Forget recorded profiles."""
        self.profiles.clear()


class ProfileContext:
    """Context manager filling in one ScanProfile."""

    def __init__(self, profiler: ScanProfiler, label: str, input_size: int) -> None:
        self.profiler = profiler
        self.label = label
        self.input_size = input_size
        self.scan_profile: Optional[ScanProfile] = None

    def __enter__(self) -> ScanProfile:
        self.scan_profile = ScanProfile(
            label=self.label,
            input_size=self.input_size,
            start_time=time.time(),
            memory_start=self.profiler._memory(),
        )
        return self.scan_profile

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self.scan_profile is None:
            return
        self.scan_profile.end_time = time.time()
        self.scan_profile.memory_end = self.profiler._memory()
        if exc_type is not None:
            self.scan_profile.metadata["error"] = exc_type.__name__
        self.profiler.record(self.scan_profile)
