"""Main CLI entry point for the lightweight-tag-extractor command-line tool.

Runs tag, attribute and pivot extraction over saved pages, one result record
per file, with optional parallel processing and profiling.
"""

import argparse
import json
import logging
import re
import sys
import time
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from lightweight_tag_extractor import __version__
from lightweight_tag_extractor.api import TagExtractor
from lightweight_tag_extractor.shared.config import ConfigError, ExtractorConfig
from lightweight_tag_extractor.shared.exceptions import ExtractionError
from lightweight_tag_extractor.shared.logging import get_logger
from lightweight_tag_extractor.tools.profiling import ScanProfiler

PAGE_SUFFIXES = {".html", ".htm", ".xhtml", ".xml", ".txt"}
PRESETS = ["balanced", "strict", "lenient", "flat"]
MAX_ELEMENTS_SHOWN = 3


class CLIConfig:
    """Configuration management for CLI operations."""

    def __init__(self):
        self.preset = "balanced"
        self.max_workers = None  # Use system default
        self.output_format = "json"
        self.encoding = "utf-8"
        self.profile = False
        self.verbose = False
        self.quiet = False

    @property
    def extractor_config(self) -> ExtractorConfig:
        return ExtractorConfig.preset(self.preset)

    @classmethod
    def from_file(cls, config_path: Path) -> "CLIConfig":
        """Load CLI configuration from a JSON file.

        Missing files leave the defaults in place; unreadable files are
        reported on stderr and ignored.
        """
        config = cls()
        if not config_path.exists():
            return config
        try:
            with config_path.open() as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            print(f"Warning: Could not load config file: {e}", file=sys.stderr)
            return config

        if data.get("preset") in PRESETS:
            config.preset = data["preset"]
        config.max_workers = data.get("max_workers", config.max_workers)
        config.output_format = data.get("output_format", config.output_format)
        config.encoding = data.get("encoding", config.encoding)
        config.profile = bool(data.get("profile", config.profile))
        return config


@dataclass
class ExtractionRequest:
    """What to extract from every file."""

    command: str
    tag: Optional[str] = None
    includes: Optional[List[str]] = None
    excludes: Optional[List[str]] = None
    limit: int = 0
    attribute: Optional[str] = None
    locators: List[str] = field(default_factory=list)
    regex: bool = False


class ProgressTracker:
    """Progress display on stderr for multi-file runs."""

    def __init__(self, total: int, description: str = "Processing"):
        self.total = total
        self.completed = 0
        self.description = description
        self.last_update = 0.0

    def update(self, increment: int = 1):
        self.completed += increment
        current_time = time.time()
        if current_time - self.last_update >= 1.0 or self.completed >= self.total:
            self._display_progress()
            self.last_update = current_time

    def _display_progress(self):
        if self.total == 0:
            return
        percentage = (self.completed / self.total) * 100
        print(f"\r{self.description}: {percentage:.1f}% "
              f"({self.completed}/{self.total})", end="", file=sys.stderr)
        if self.completed >= self.total:
            print(file=sys.stderr)


class FileExtractor:
    """Runs one ExtractionRequest against files."""

    def __init__(self, config: CLIConfig, request: ExtractionRequest):
        self.config = config
        self.request = request
        self.logger = get_logger(__name__, None, "cli_extractor")

    def _extract(self, extractor: TagExtractor, content: str) -> Dict[str, Any]:
        request = self.request
        if request.command == "pivot":
            if request.regex:
                locator: Any = re.compile(request.locators[0])
            elif len(request.locators) == 1:
                locator = request.locators[0]
            else:
                locator = request.locators
            location = extractor.locate_pivot(content, locator)
            return {"index": location.index, "pivot": location.pivot, "count": int(location.found)}

        limit = 1 if request.command == "first" else request.limit
        result = extractor.scan_detailed(
            content, request.tag, request.includes, request.excludes, limit
        )
        record: Dict[str, Any] = {
            "tag": request.tag,
            "count": result.count,
            "fast_path_used": result.metrics.fast_path_used,
        }
        if request.command == "attrs":
            if request.attribute:
                record["values"] = [
                    extractor.get_attribute(element, request.attribute)
                    for element in result.elements
                ]
            else:
                record["attributes"] = [
                    extractor.parse_attributes(element) for element in result.elements
                ]
        else:
            record["elements"] = result.elements
        return record

    def process_single_file(self, file_path: Path) -> Dict[str, Any]:
        """Process a single file and return its result record."""
        start_time = time.time()
        try:
            content = file_path.read_text(encoding=self.config.encoding, errors="replace")
            extractor = TagExtractor(self.config.extractor_config, correlation_id=str(file_path))

            if self.config.profile:
                profiler = ScanProfiler()
                with profiler.profile(str(file_path), input_size=len(content)) as profile:
                    record = self._extract(extractor, content)
                    profile.element_count = record["count"]
                record["profile"] = profile.to_dict()
            else:
                record = self._extract(extractor, content)

            record.update({
                "file": str(file_path),
                "success": True,
                "processing_time_ms": (time.time() - start_time) * 1000,
            })
            return record

        except (OSError, ExtractionError, re.error) as e:
            self.logger.warning(
                "Failed to process file",
                extra={"file": str(file_path), "error_type": type(e).__name__}
            )
            return {
                "file": str(file_path),
                "success": False,
                "error": str(e),
                "error_type": type(e).__name__,
                "processing_time_ms": (time.time() - start_time) * 1000,
            }

    def find_files(self, path: Path, recursive: bool = True) -> Iterator[Path]:
        """Find page files in path."""
        if path.is_file():
            yield path
        elif path.is_dir():
            candidates = path.rglob("*") if recursive else path.glob("*")
            for candidate in sorted(candidates):
                if candidate.is_file() and candidate.suffix.lower() in PAGE_SUFFIXES:
                    yield candidate

    def batch_process(self, paths: List[Path], recursive: bool = True) -> List[Dict[str, Any]]:
        """Process all files under ``paths``, in parallel when configured."""
        all_files: List[Path] = []
        for path in paths:
            all_files.extend(self.find_files(path, recursive))

        if not all_files:
            return []

        results = []
        progress = None if self.config.quiet else ProgressTracker(
            len(all_files), "Extracting"
        )

        if len(all_files) == 1 or self.config.max_workers == 1:
            for file_path in all_files:
                results.append(self.process_single_file(file_path))
                if progress:
                    progress.update()
        else:
            with ProcessPoolExecutor(max_workers=self.config.max_workers) as executor:
                future_to_file = {
                    executor.submit(self.process_single_file, file_path): file_path
                    for file_path in all_files
                }
                for future in as_completed(future_to_file):
                    results.append(future.result())
                    if progress:
                        progress.update()
            # Keep output order stable regardless of completion order
            order = {str(path): index for index, path in enumerate(all_files)}
            results.sort(key=lambda record: order[record["file"]])

        return results


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="Page files or directories to process"
    )
    parser.add_argument(
        "--recursive", "-r",
        action="store_true",
        help="Recursively process directories"
    )
    parser.add_argument(
        "--format", "-f",
        choices=["json", "csv", "text"],
        default=None,
        help="Output format (default: json)"
    )
    parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path"
    )
    parser.add_argument(
        "--preset",
        choices=PRESETS,
        default=None,
        help="Extractor configuration preset"
    )
    parser.add_argument(
        "--workers", "-w",
        type=int,
        help="Number of parallel workers"
    )
    parser.add_argument(
        "--encoding",
        default=None,
        help="Text encoding of the input files (default: utf-8)"
    )
    parser.add_argument(
        "--profile",
        action="store_true",
        help="Attach timing and memory figures to each result"
    )
    # Also accepted after the subcommand; SUPPRESS keeps the top-level value
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        default=argparse.SUPPRESS,
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        default=argparse.SUPPRESS,
        help="Quiet output"
    )


def _add_scan_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--tag", "-t", required=True, help="Tag type, e.g. div")
    parser.add_argument(
        "--include", "-i",
        action="append",
        dest="includes",
        help="Text the opening tag must contain (repeatable)"
    )
    parser.add_argument(
        "--exclude", "-x",
        action="append",
        dest="excludes",
        help="Text the opening tag must not contain (repeatable)"
    )


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="lightweight-tag-extractor",
        description="Extract HTML-like elements from raw page text without a DOM"
    )

    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    tags_parser = subparsers.add_parser("tags", help="Extract elements of one tag type")
    _add_common_arguments(tags_parser)
    _add_scan_arguments(tags_parser)
    tags_parser.add_argument(
        "--limit", "-n",
        type=int,
        default=0,
        help="Maximum elements per file (default: 0, unbounded)"
    )
    tags_parser.add_argument(
        "--first",
        action="store_true",
        help="Only the first matching element per file"
    )

    attrs_parser = subparsers.add_parser("attrs", help="Extract attributes of matched elements")
    _add_common_arguments(attrs_parser)
    _add_scan_arguments(attrs_parser)
    attrs_parser.add_argument(
        "--limit", "-n",
        type=int,
        default=0,
        help="Maximum elements per file (default: 0, unbounded)"
    )
    attrs_parser.add_argument(
        "--name",
        help="Only report this attribute's value"
    )

    pivot_parser = subparsers.add_parser("pivot", help="Locate a keyword in each file")
    _add_common_arguments(pivot_parser)
    pivot_parser.add_argument(
        "--locator", "-l",
        action="append",
        dest="locators",
        required=True,
        help="Keyword; repeat to give ordered alternatives"
    )
    pivot_parser.add_argument(
        "--regex",
        action="store_true",
        help="Treat the (first) locator as a regular expression"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    return parser


def format_results(results: List[Dict[str, Any]], format_type: str) -> str:
    """Format extraction results for output."""
    if format_type == "csv":
        if not results:
            return ""
        lines = ["file,success,count,time_ms,error"]
        for result in results:
            error = result.get("error", "").replace(",", ";")
            lines.append(
                f"{result['file']},{result['success']},{result.get('count', 0)},"
                f"{result.get('processing_time_ms', 0):.1f},{error}"
            )
        return "\n".join(lines)

    if format_type == "text":
        if not results:
            return "No results to display."
        successful = sum(1 for r in results if r.get("success", False))
        lines = [f"Processed {len(results)} files, {successful} successful", "-" * 60]
        for result in results:
            status = "OK  " if result.get("success", False) else "FAIL"
            lines.append(f"{status} {result['file']}")
            if not result.get("success", False):
                lines.append(f"   Error: {result.get('error', '')}")
            elif "index" in result:
                lines.append(f"   Pivot: {result['pivot']!r} at {result['index']}")
            else:
                lines.append(f"   Matches: {result.get('count', 0)}")
                for element in result.get("elements", [])[:MAX_ELEMENTS_SHOWN]:
                    lines.append(f"   {element[:80]}")
            lines.append("")
        return "\n".join(lines)

    return json.dumps(results, indent=2, ensure_ascii=False)


def _build_request(args: argparse.Namespace) -> ExtractionRequest:
    if args.command == "pivot":
        return ExtractionRequest(command="pivot", locators=args.locators, regex=args.regex)
    command = "first" if getattr(args, "first", False) else args.command
    return ExtractionRequest(
        command=command,
        tag=args.tag,
        includes=args.includes,
        excludes=args.excludes,
        limit=args.limit,
        attribute=getattr(args, "name", None),
    )


def _load_config(args: argparse.Namespace) -> CLIConfig:
    config = CLIConfig()
    if args.config and args.config.exists():
        config = CLIConfig.from_file(args.config)

    # Command-line flags win over the config file
    if args.preset:
        config.preset = args.preset
    if args.workers:
        config.max_workers = args.workers
    if args.format:
        config.output_format = args.format
    if args.encoding:
        config.encoding = args.encoding
    if args.profile:
        config.profile = True
    config.verbose = args.verbose
    config.quiet = args.quiet
    return config


def cmd_extract(args: argparse.Namespace) -> int:
    """Handle the tags, attrs and pivot commands."""
    config = _load_config(args)
    if config.verbose:
        logging.basicConfig(level=logging.DEBUG)
    elif config.quiet:
        logging.basicConfig(level=logging.ERROR)
    else:
        logging.basicConfig(level=config.extractor_config.global_.logging_level)

    if getattr(args, "limit", 0) < 0:
        print("Error: --limit must be >= 0", file=sys.stderr)
        return 2

    processor = FileExtractor(config, _build_request(args))
    try:
        results = processor.batch_process(args.paths, args.recursive)
    except KeyboardInterrupt:
        print("\nProcessing interrupted by user", file=sys.stderr)
        return 1

    formatted_output = format_results(results, config.output_format)

    if args.output:
        try:
            args.output.write_text(formatted_output, encoding="utf-8")
            if not config.quiet:
                print(f"Results written to {args.output}", file=sys.stderr)
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1
    else:
        print(formatted_output)

    if not results:
        return 1
    successful = sum(1 for r in results if r.get("success", False))
    return 0 if successful == len(results) else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        return cmd_extract(args)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
