"""Developer tools for measuring extraction jobs."""

from .profiling import ProfileReport, ScanProfile, ScanProfiler

__all__ = ["ProfileReport", "ScanProfile", "ScanProfiler"]
