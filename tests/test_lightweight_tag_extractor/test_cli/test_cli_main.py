"""Tests for the CLI main module."""

import json
import logging
import tempfile
from pathlib import Path
from unittest.mock import PropertyMock, patch

import pytest

from lightweight_tag_extractor import ExtractorConfig
from lightweight_tag_extractor.cli.main import (
    CLIConfig,
    ExtractionRequest,
    FileExtractor,
    ProgressTracker,
    create_argument_parser,
    format_results,
    main,
)
from lightweight_tag_extractor.shared.config import GlobalConfig

LIST_PAGE = '<ul><li class="hot">a</li><li>b</li><li>c</li></ul>'


@pytest.fixture
def page_dir():
    with tempfile.TemporaryDirectory() as tmp_dir:
        root = Path(tmp_dir)
        (root / "list.html").write_text(LIST_PAGE, encoding="utf-8")
        (root / "links.htm").write_text(
            '<a href="/x">1</a><a href="/y">2</a>', encoding="utf-8"
        )
        (root / "notes.md").write_text("<li>ignored</li>", encoding="utf-8")
        nested = root / "nested"
        nested.mkdir()
        (nested / "broken.html").write_text(
            '<div id="main"><div>never closed</div>', encoding="utf-8"
        )
        yield root


class TestCLIConfig:
    """Test CLI configuration management."""

    def test_default_config(self):
        config = CLIConfig()
        assert config.preset == "balanced"
        assert config.max_workers is None
        assert config.output_format == "json"
        assert config.encoding == "utf-8"
        assert config.profile is False
        assert config.extractor_config.name == "balanced"

    def test_config_from_file(self):
        with tempfile.NamedTemporaryFile(mode="w", suffix=".json", delete=False) as f:
            json.dump({
                "preset": "strict",
                "max_workers": 2,
                "output_format": "csv",
                "profile": True,
            }, f)
            config_path = Path(f.name)

        try:
            config = CLIConfig.from_file(config_path)
            assert config.preset == "strict"
            assert config.max_workers == 2
            assert config.output_format == "csv"
            assert config.profile is True
            assert config.extractor_config.scan.case_sensitive is True
        finally:
            config_path.unlink()

    def test_config_unknown_preset_ignored(self):
        with tempfile.NamedTemporaryFile(mode="w", suffix=".json", delete=False) as f:
            json.dump({"preset": "turbo"}, f)
            config_path = Path(f.name)

        try:
            assert CLIConfig.from_file(config_path).preset == "balanced"
        finally:
            config_path.unlink()

    def test_config_from_nonexistent_file(self):
        config = CLIConfig.from_file(Path("nonexistent.json"))
        assert config.output_format == "json"

    def test_config_from_invalid_file(self, capsys):
        with tempfile.NamedTemporaryFile(mode="w", suffix=".json", delete=False) as f:
            f.write("{not json")
            config_path = Path(f.name)

        try:
            config = CLIConfig.from_file(config_path)
            assert config.preset == "balanced"
            assert "Could not load config file" in capsys.readouterr().err
        finally:
            config_path.unlink()


class TestProgressTracker:
    """Test progress tracking functionality."""

    def test_progress_update(self):
        tracker = ProgressTracker(10, "Test")
        tracker.update(5)
        assert tracker.completed == 5

        tracker.update()
        assert tracker.completed == 6

    @patch("builtins.print")
    def test_progress_display(self, mock_print):
        tracker = ProgressTracker(2, "Test")
        tracker.update(2)

        assert mock_print.called


class TestFileExtractor:
    """Test per-file extraction."""

    def test_find_files_filters_suffixes(self, page_dir):
        processor = FileExtractor(CLIConfig(), ExtractionRequest(command="tags", tag="li"))

        flat = [p.name for p in processor.find_files(page_dir, recursive=False)]
        deep = [p.name for p in processor.find_files(page_dir, recursive=True)]

        assert flat == ["links.htm", "list.html"]
        assert "broken.html" in deep
        assert "notes.md" not in deep

    def test_tags_record(self, page_dir):
        request = ExtractionRequest(command="tags", tag="li", includes=['class="hot"'])
        record = FileExtractor(CLIConfig(), request).process_single_file(page_dir / "list.html")

        assert record["success"] is True
        assert record["count"] == 1
        assert record["elements"] == ['<li class="hot">a</li>']
        assert record["fast_path_used"] is False
        assert record["file"] == str(page_dir / "list.html")

    def test_first_record(self, page_dir):
        request = ExtractionRequest(command="first", tag="li")
        record = FileExtractor(CLIConfig(), request).process_single_file(page_dir / "list.html")

        assert record["elements"] == ['<li class="hot">a</li>']

    def test_attrs_record(self, page_dir):
        request = ExtractionRequest(command="attrs", tag="a", attribute="href")
        record = FileExtractor(CLIConfig(), request).process_single_file(page_dir / "links.htm")

        assert record["values"] == ["/x", "/y"]

    def test_attrs_without_name(self, page_dir):
        request = ExtractionRequest(command="attrs", tag="a")
        record = FileExtractor(CLIConfig(), request).process_single_file(page_dir / "links.htm")

        assert record["attributes"] == [{"href": "/x"}, {"href": "/y"}]

    def test_pivot_alternatives(self, page_dir):
        request = ExtractionRequest(command="pivot", locators=["missing", "class="])
        record = FileExtractor(CLIConfig(), request).process_single_file(page_dir / "list.html")

        assert record["index"] == LIST_PAGE.index("class=")
        assert record["pivot"] == "class="
        assert record["count"] == 1

    def test_pivot_regex(self, page_dir):
        request = ExtractionRequest(command="pivot", locators=[r"/\w"], regex=True)
        record = FileExtractor(CLIConfig(), request).process_single_file(page_dir / "links.htm")

        assert record["pivot"] == "/x"

    def test_malformed_file_reported(self, page_dir):
        request = ExtractionRequest(command="tags", tag="div", includes=['id="main"'])
        record = FileExtractor(CLIConfig(), request).process_single_file(
            page_dir / "nested" / "broken.html"
        )

        assert record["success"] is False
        assert record["error_type"] == "MalformedMarkupError"

    def test_missing_file_reported(self, page_dir):
        request = ExtractionRequest(command="tags", tag="li")
        record = FileExtractor(CLIConfig(), request).process_single_file(page_dir / "gone.html")

        assert record["success"] is False
        assert record["error_type"] == "FileNotFoundError"

    def test_profile_attached(self, page_dir):
        config = CLIConfig()
        config.profile = True
        request = ExtractionRequest(command="tags", tag="li")
        record = FileExtractor(config, request).process_single_file(page_dir / "list.html")

        assert record["profile"]["element_count"] == 3
        assert record["profile"]["input_size"] == len(LIST_PAGE)

    def test_batch_sequential(self, page_dir):
        config = CLIConfig()
        config.max_workers = 1
        config.quiet = True
        processor = FileExtractor(config, ExtractionRequest(command="tags", tag="li"))

        results = processor.batch_process([page_dir], recursive=True)

        assert [Path(r["file"]).name for r in results] == [
            "links.htm", "list.html", "broken.html"
        ]
        assert [r["count"] for r in results] == [0, 3, 0]


class TestFormatResults:
    """Test result formatting."""

    RESULTS = [
        {"file": "a.html", "success": True, "count": 2, "processing_time_ms": 1.25,
         "elements": ["<p>1</p>", "<p>2</p>"]},
        {"file": "b.html", "success": False, "processing_time_ms": 0.5,
         "error": "illegal html, at offset 0", "error_type": "MalformedMarkupError"},
    ]

    def test_json(self):
        assert json.loads(format_results(self.RESULTS, "json")) == self.RESULTS

    def test_csv(self):
        lines = format_results(self.RESULTS, "csv").splitlines()

        assert lines[0] == "file,success,count,time_ms,error"
        assert lines[1] == "a.html,True,2,1.2,"
        assert lines[2] == "b.html,False,0,0.5,illegal html; at offset 0"

    def test_text(self):
        output = format_results(self.RESULTS, "text")

        assert "Processed 2 files, 1 successful" in output
        assert "<p>1</p>" in output
        assert "Error: illegal html" in output

    def test_empty(self):
        assert format_results([], "csv") == ""
        assert format_results([], "text") == "No results to display."


class TestArgumentParser:
    def test_tags_arguments(self):
        parser = create_argument_parser()
        args = parser.parse_args(["tags", "page.html", "--tag", "li", "-i", "a", "-i", "b"])

        assert args.command == "tags"
        assert args.includes == ["a", "b"]
        assert args.limit == 0

    def test_pivot_requires_locator(self):
        parser = create_argument_parser()

        with pytest.raises(SystemExit):
            parser.parse_args(["pivot", "page.html"])


class TestMain:
    """End-to-end runs through main()."""

    def test_no_command(self, capsys):
        assert main([]) == 1

    def test_tags(self, page_dir, capsys):
        exit_code = main(["-q", "tags", str(page_dir / "list.html"), "--tag", "li", "-n", "2"])

        assert exit_code == 0
        results = json.loads(capsys.readouterr().out)
        assert results[0]["elements"] == ['<li class="hot">a</li>', "<li>b</li>"]

    def test_attrs(self, page_dir, capsys):
        exit_code = main([
            "-q", "attrs", str(page_dir / "links.htm"), "--tag", "a", "--name", "href"
        ])

        assert exit_code == 0
        assert json.loads(capsys.readouterr().out)[0]["values"] == ["/x", "/y"]

    def test_malformed_exit_code(self, page_dir, capsys):
        exit_code = main([
            "-q", "tags", str(page_dir), "-r", "-w", "1",
            "--tag", "div", "--include", 'id="main"',
        ])

        assert exit_code == 1
        results = json.loads(capsys.readouterr().out)
        failed = [r for r in results if not r["success"]]
        assert [r["error_type"] for r in failed] == ["MalformedMarkupError"]

    def test_negative_limit(self, page_dir, capsys):
        assert main(["-q", "tags", str(page_dir), "--tag", "li", "-n", "-1"]) == 2

    def test_output_file_and_format(self, page_dir, capsys):
        output = page_dir / "out.csv"
        exit_code = main([
            "-q", "tags", str(page_dir / "list.html"), "--tag", "li",
            "--format", "csv", "-o", str(output),
        ])

        assert exit_code == 0
        assert output.read_text(encoding="utf-8").startswith("file,success,count")

    def test_no_files(self, page_dir, capsys):
        empty = page_dir / "empty"
        empty.mkdir()

        assert main(["-q", "tags", str(empty), "--tag", "li"]) == 1


class TestLoggingOptions:
    """Log level selection in main()."""

    @pytest.mark.parametrize("flags, level", [
        (["-v"], logging.DEBUG),
        (["-q"], logging.ERROR),
        ([], "INFO"),
    ])
    def test_flags_before_subcommand(self, page_dir, capsys, flags, level):
        with patch("logging.basicConfig") as basic_config:
            main(flags + ["tags", str(page_dir / "list.html"), "--tag", "li"])

        basic_config.assert_called_once_with(level=level)

    @pytest.mark.parametrize("flags, level", [
        (["--verbose"], logging.DEBUG),
        (["--quiet"], logging.ERROR),
    ])
    def test_flags_after_subcommand(self, page_dir, capsys, flags, level):
        with patch("logging.basicConfig") as basic_config:
            exit_code = main(["tags", str(page_dir / "list.html"), "--tag", "li"] + flags)

        assert exit_code == 0
        basic_config.assert_called_once_with(level=level)

    def test_configured_logging_level(self, page_dir, capsys):
        config = ExtractorConfig(global_=GlobalConfig(logging_level="WARNING"))

        with patch("logging.basicConfig") as basic_config, \
                patch.object(CLIConfig, "extractor_config",
                             new_callable=PropertyMock, return_value=config):
            main(["tags", str(page_dir / "list.html"), "--tag", "li"])

        basic_config.assert_called_once_with(level="WARNING")

    def test_parser_accepts_flags_in_both_places(self):
        parser = create_argument_parser()

        before = parser.parse_args(["-q", "tags", "page.html", "--tag", "li"])
        after = parser.parse_args(["tags", "page.html", "--tag", "li", "-q"])
        neither = parser.parse_args(["tags", "page.html", "--tag", "li"])

        assert before.quiet is True and before.verbose is False
        assert after.quiet is True and after.verbose is False
        assert neither.quiet is False and neither.verbose is False
