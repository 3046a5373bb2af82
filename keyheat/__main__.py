# ABOUTME: Command-line entry point for key-log frequency, bigram and heatmap analysis
import argparse
import sys
from pathlib import Path
from typing import List, Optional
import logging

from .report import ReportGenerator
from .session import (
    AnalysisSession,
    AnalyzeLog,
    BigramReport,
    GenerateHeatmap,
    LoadLayouts,
    dispatch,
)
from .heatmap import COLOR_STRATEGIES, MAX_SCOPES
from .utils import ConfigManager, setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="keyheat", description="Key event frequency and heatmap analysis"
    )
    parser.add_argument("log", nargs="?", help="Key log file to analyze")
    parser.add_argument(
        "--config", default="config.yaml", help="Configuration file path"
    )
    parser.add_argument(
        "--layout",
        action="append",
        dest="layouts",
        help="Layout name to draw (repeatable, defaults to layouts.names)",
    )
    parser.add_argument("--layout-dir", help="Directory holding <name>.json layouts")
    parser.add_argument(
        "--strategy", choices=sorted(COLOR_STRATEGIES), help="Heat color scaling"
    )
    parser.add_argument(
        "--max-scope",
        choices=MAX_SCOPES,
        help="Scale colors against the whole log or each layout's own keys",
    )
    parser.add_argument("--top", type=int, help="Number of bigrams to report")
    parser.add_argument(
        "--format",
        nargs="+",
        dest="formats",
        choices=["json", "html", "csv"],
        default=["json", "html"],
        help="Report formats to write",
    )
    parser.add_argument("--output", help="Output directory for reports")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the analyzer."""
    args = build_parser().parse_args(argv)
    config = ConfigManager(args.config)
    setup_logging(config.get("output.log_level", "INFO"))

    languages = config.get("output.languages", ["en", "ja"])
    top_n = args.top if args.top is not None else config.get("bigrams.top_n", 10)
    if top_n < 1:
        print(f"--top must be a positive integer, got {top_n}", file=sys.stderr)
        return 2

    text = None
    if args.log:
        try:
            text = Path(args.log).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logging.error(f"Could not read log file {args.log}: {e}")

    session = AnalysisSession()
    result = dispatch(session, AnalyzeLog(text), languages)
    if not result.ok:
        print(result.status)
        return 1
    session = result.session
    print(result.report)

    result = dispatch(session, BigramReport(top_n), languages)
    if result.ok:
        print(result.report)
    else:
        print(result.status)

    layout_names = tuple(args.layouts or config.get("layouts.names", []))
    layout_dir = args.layout_dir or config.get("layouts.directory")
    result = dispatch(session, LoadLayouts(layout_names, layout_dir), languages)
    if result.status:
        print(result.status)
    session = result.session

    try:
        heatmap = GenerateHeatmap(
            strategy=args.strategy or config.get("heatmap.color_strategy", "lightness"),
            max_scope=args.max_scope or config.get("heatmap.max_scope", "all"),
            offset=tuple(config.get("layouts.offset", [0, 300])),
            aliases=config.get("special_keys") or {},
        )
        result = dispatch(session, heatmap, languages)
    except ValueError as e:
        print(f"Invalid heatmap configuration: {e}", file=sys.stderr)
        return 2
    if not result.ok:
        print(result.status)

    generator = ReportGenerator(
        args.output or config.get("output.reports_directory", "./reports"),
        top_n=top_n,
        key_radius=config.get("heatmap.key_radius", 20),
    )
    generated_files = generator.generate(session, result.renders, args.formats)

    print("Reports generated:")
    for format_type, filepath in generated_files.items():
        print(f"  {format_type.upper()}: {filepath}")
    return 0


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
