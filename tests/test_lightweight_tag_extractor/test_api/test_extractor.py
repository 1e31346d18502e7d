"""Tests for the progressive-disclosure extraction API."""

import threading

import pytest

from lightweight_tag_extractor import (
    ExtractorConfig,
    MalformedMarkupError,
    TagExtractor,
    get_attribute,
    locate_pivot,
    parse_attributes,
    scan_first_tag,
    scan_tags,
)
from lightweight_tag_extractor.shared.config import AttributeConfig, GlobalConfig


class TestLevelOneFunctions:
    """Module functions using the default configuration."""

    def test_scan_tags(self):
        html = '<ul><li class="x">1</li><li>2</li></ul>'

        assert scan_tags(html, "li") == ['<li class="x">1</li>', "<li>2</li>"]
        assert scan_tags(html, "li", includes='class="x"') == ['<li class="x">1</li>']
        assert scan_tags(html, "li", excludes='class="x"') == ["<li>2</li>"]

    def test_scan_tags_limit(self):
        assert scan_tags("<b>1</b><b>2</b><b>3</b>", "b", limit=2) == ["<b>1</b>", "<b>2</b>"]

    def test_scan_tags_non_text(self):
        assert scan_tags(None, "div") is None
        assert scan_tags(42, "div") is None

    def test_scan_first_tag(self):
        assert scan_first_tag("<i>a</i><i>b</i>", "i") == "<i>a</i>"
        assert scan_first_tag("<p>x</p>", "i") is None

    def test_parse_attributes(self):
        attributes = parse_attributes('<a href="/x" title="t">link</a>')

        assert attributes == {"href": "/x", "title": "t"}

    def test_get_attribute(self):
        assert get_attribute('<img src="a.png">', "src") == "a.png"
        assert get_attribute("<img src=a.png>", "src") is None

    def test_locate_pivot(self):
        location = locate_pivot("price: 12", "price")

        assert location.index == 0
        assert location.pivot == "price"

    def test_malformed_markup_propagates(self):
        with pytest.raises(MalformedMarkupError):
            scan_tags('<div id="a"><div>inner</div>', "div", includes='id="a"')


class TestTagExtractor:
    """Configured extractor behaviour."""

    def test_default_configuration(self):
        extractor = TagExtractor()

        assert extractor.config.name == "balanced"

    def test_strict_is_case_sensitive(self):
        extractor = TagExtractor(ExtractorConfig.strict())

        assert extractor.scan_tags("<DIV>a</DIV><div>b</div>", "div") == ["<div>b</div>"]

    def test_scan_detailed_metrics(self):
        result = TagExtractor().scan_detailed("<p>1</p><p>2</p>", "p")

        assert result.count == 2
        assert result.metrics.fast_path_used is True
        assert result.metrics.characters_scanned == len("<p>1</p><p>2</p>")

    def test_scan_first_tag(self):
        extractor = TagExtractor()
        html = '<p class="a">1</p><p>2</p>'

        assert extractor.scan_first_tag(html, "p", excludes='class="a"') == "<p>2</p>"

    def test_lenient_attributes(self):
        extractor = TagExtractor(ExtractorConfig.lenient())

        assert extractor.parse_attributes("<a href='/x' id=top>") == {"href": "/x", "id": "top"}
        assert extractor.get_attribute("<a id=top>", "id") == "top"

    def test_statistics(self):
        extractor = TagExtractor(correlation_id="job-1")
        extractor.scan_tags("<p>1</p><p>2</p>", "p")
        extractor.scan_tags("<p>3</p>", "p")

        stats = extractor.statistics
        assert stats["total_scans"] == 2
        assert stats["failed_scans"] == 0
        assert stats["elements_returned"] == 3
        assert stats["correlation_id"] == "job-1"
        assert stats["average_processing_time_ms"] >= 0.0

    def test_failed_scan_counted(self):
        extractor = TagExtractor()

        with pytest.raises(MalformedMarkupError):
            extractor.scan_tags("<p>never", "p", includes=[lambda tag: True])

        assert extractor.statistics["failed_scans"] == 1
        assert extractor.statistics["total_scans"] == 1

    def test_non_text_not_counted(self):
        extractor = TagExtractor()

        assert extractor.scan_tags(None, "p") is None
        assert extractor.statistics["total_scans"] == 0

    def test_reset_statistics(self):
        extractor = TagExtractor()
        extractor.scan_tags("<p>1</p>", "p")
        extractor.reset_statistics()

        assert extractor.statistics["total_scans"] == 0
        assert extractor.statistics["elements_returned"] == 0

    def test_reconfigure(self):
        extractor = TagExtractor()
        extractor.scan_tags("<P>1</P>", "p")

        extractor.reconfigure(ExtractorConfig.strict())

        assert extractor.scan_tags("<P>1</P>", "p") == []
        assert extractor.statistics["total_scans"] == 2

    def test_correlation_tracking_disabled(self):
        config = ExtractorConfig(global_=GlobalConfig(enable_correlation_tracking=False))
        extractor = TagExtractor(config, correlation_id="ignored")

        assert extractor.correlation_id is None
        assert extractor.scan_detailed("<p>1</p>", "p").correlation_id is None

    def test_attribute_config_override(self):
        config = ExtractorConfig(attributes=AttributeConfig(allow_single_quotes=True))
        extractor = TagExtractor(config)

        assert extractor.parse_attributes("<a href='/x' id=top>") == {"href": "/x"}

    def test_shared_between_threads(self):
        extractor = TagExtractor()
        html = "".join("<li>%d</li>" % i for i in range(20))

        def worker():
            for _ in range(10):
                assert len(extractor.scan_tags(html, "li")) == 20

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        stats = extractor.statistics
        assert stats["total_scans"] == 40
        assert stats["elements_returned"] == 800
