"""Lightweight Tag Extractor.

Pulls HTML-like elements out of raw page text with string search and regular
expressions instead of a DOM, handling elements that nest other elements of
the same type.

Progressive API Disclosure:
- Level 1: Simple functions - scan_tags(), scan_first_tag(), parse_attributes(),
  get_attribute(), locate_pivot()
- Level 2: Configured extractor - TagExtractor class with ExtractorConfig
- Text helpers: lightweight_tag_extractor.text
"""

__version__ = "0.1.0"
__author__ = "Lightweight Tag Extractor Team"

# Progressive API disclosure - Level 1: Simple functions
# Progressive API disclosure - Level 2: Configured extractor
from .api import (
    TagExtractor,
    get_attribute,
    locate_pivot,
    parse_attributes,
    scan_first_tag,
    scan_tags,
)

# Filter rules for callers that build rule sets explicitly
from .scanning import LiteralRule, PredicateRule

# Configuration, errors and result objects
from .shared import (
    ExtractionError,
    ExtractorConfig,
    MalformedMarkupError,
    PivotLocation,
    ScanResult,
)

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple extraction functions
    "scan_tags",
    "scan_first_tag",
    "parse_attributes",
    "get_attribute",
    "locate_pivot",

    # Level 2: Configured extractor
    "TagExtractor",
    "ExtractorConfig",

    # Filter rules
    "LiteralRule",
    "PredicateRule",

    # Errors and results
    "ExtractionError",
    "MalformedMarkupError",
    "PivotLocation",
    "ScanResult",
]
