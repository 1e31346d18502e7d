#!/usr/bin/env python3
"""
Quick Start Guide for the Lightweight Tag Extractor.

This example walks through keyword-anchored extraction from a saved
listing page: locating a pivot, cutting a window around it, scanning
balanced elements with filters and reading their attributes.
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from lightweight_tag_extractor import (
    ExtractorConfig,
    MalformedMarkupError,
    TagExtractor,
    get_attribute,
    locate_pivot,
    parse_attributes,
    scan_tags,
)
from lightweight_tag_extractor.text import (
    get_tag_text,
    get_text_range_after,
    html_entity_decode,
)

LISTING_PAGE = """
<html><body>
<div class="header"><a href="/">Home</a></div>
<h2>Latest offers</h2>
<div class="list">
  <div class="item" data-id="1"><a href="/p/1" title="Lamp">Lamp</a>
    <div class="price">&lt;12 EUR&gt;</div></div>
  <div class="item sold" data-id="2"><a href="/p/2" title="Chair">Chair</a>
    <div class="price">40 EUR</div></div>
  <div class="item" data-id="3"><a href="/p/3" title="Desk">Desk</a>
    <div class="price">95 EUR</div></div>
</div>
</body></html>
"""


def quick_start_example():
    """Quick start example showing basic usage."""

    print("🚀 QUICK START - Lightweight Tag Extractor")
    print("=" * 45)

    # Step 1: Find the keyword the interesting part hangs off
    print("\n📍 Step 1: Locating the pivot")
    print("-" * 30)

    pivots = ["Sale offers", "Latest offers"]
    location = locate_pivot(LISTING_PAGE, pivots)
    print(f"✅ Pivot {location.pivot!r} found at offset {location.index}")

    window = get_text_range_after(LISTING_PAGE, pivots, 2000)
    print(f"📏 Window after pivot: {len(window)} characters")

    # Step 2: Balanced scan of nested elements
    print("\n🔍 Step 2: Scanning items")
    print("-" * 30)

    items = scan_tags(window, "div", includes='class="item', excludes="sold")
    print(f"✅ Found {len(items)} unsold items")

    for item in items:
        link = scan_tags(item, "a", limit=1)[0]
        price = scan_tags(item, "div", includes='class="price"')[0]
        print(f"  - #{get_attribute(item, 'data-id')} "
              f"{get_attribute(link, 'title')}: "
              f"{html_entity_decode(get_tag_text(price)[0])}")

    # Step 3: Attribute maps
    print("\n🏷️  Step 3: Attribute maps")
    print("-" * 30)

    single_quoted = "<a id='x'>"
    print(f"  {parse_attributes(items[0])}")
    print(f"  Single quotes ignored by default: {parse_attributes(single_quoted)}")

    return items


def configured_extractor_example():
    """Configured extractor with statistics."""

    print("\n⚙️  CONFIGURED EXTRACTOR")
    print("=" * 45)

    extractor = TagExtractor(ExtractorConfig.lenient(), correlation_id="listing-page")
    image = "<img src='a.png' width=20>"
    print(f"✅ Attributes with lenient quoting: {extractor.parse_attributes(image)}")

    result = extractor.scan_detailed(LISTING_PAGE, "a")
    print(f"🔗 Links: {result.count}, fast path: {result.metrics.fast_path_used}")

    try:
        extractor.scan_tags('<div id="x"><div>unclosed</div>', "div", includes='id="x"')
    except MalformedMarkupError as e:
        print(f"❌ Rejected malformed markup at offset {e.position}")

    stats = extractor.statistics
    print(f"📊 Scans: {stats['total_scans']}, failed: {stats['failed_scans']}, "
          f"elements: {stats['elements_returned']}")


def main():
    """Main function."""
    try:
        quick_start_example()
        configured_extractor_example()

        print("\n✅ All examples completed successfully!")
        return 0

    except Exception as e:
        print(f"\n❌ Example failed: {e}")
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
