"""Command-line interface for Lightweight Tag Extractor.

Provides the ``tags``, ``attrs`` and ``pivot`` commands for batch extraction
from saved pages.
"""

from .main import main

__all__ = ["main"]
