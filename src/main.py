# src/main.py — v2
"""CLI entry point — analyze and fingerprint commands.

Usage:
    resumelens analyze <file.json|file.txt> [options]
    resumelens fingerprint <file.json|file.txt>

A .json file holds serialized ExtractedContent (text, blocks, layout);
any other file is read as plain text.

Exit codes: 0 complete, 2 partial or failed analysis, 1 error,
130 interrupted.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import ValidationError

from resumelens.version import __version__

if TYPE_CHECKING:
    from resumelens.core.models import AnalysisResult, ExtractedContent

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_DEGRADED = 2
EXIT_INTERRUPTED = 130


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return EXIT_ERROR

    try:
        _setup_logging(args.verbose)
        return asyncio.run(args.func(args))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return EXIT_INTERRUPTED
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return EXIT_ERROR


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="resumelens",
        description=f"resumelens v{__version__}: resume scoring and suggestions",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- analyze ---
    p_analyze = subparsers.add_parser(
        "analyze", help="Score a resume and list suggestions",
    )
    p_analyze.add_argument("file", type=Path, help="Extracted content (.json) or plain text")
    p_analyze.add_argument(
        "--deadline", type=float, default=None,
        help="Seconds allowed for the run (default: from settings)",
    )
    p_analyze.add_argument(
        "--format", dest="output_format", choices=("json", "text"), default="text",
        help="Output format (default: text)",
    )
    p_analyze.set_defaults(func=_cmd_analyze)

    # --- fingerprint ---
    p_fp = subparsers.add_parser(
        "fingerprint", help="Print the cache fingerprint of a document",
    )
    p_fp.add_argument("file", type=Path, help="Extracted content (.json) or plain text")
    p_fp.set_defaults(func=_cmd_fingerprint)

    return parser


async def _cmd_analyze(args: argparse.Namespace) -> int:
    """Execute single-document analysis."""
    from resumelens.pipeline.orchestrator import AnalysisOrchestrator

    content = _load_content(args.file)
    if content is None:
        return EXIT_ERROR
    if args.deadline is not None and args.deadline <= 0:
        logger.error("--deadline must be > 0")
        return EXIT_ERROR

    logger.info("Analyzing %s", args.file.name)
    async with AnalysisOrchestrator() as orchestrator:
        result = await orchestrator.analyze(content, args.deadline)

    if args.output_format == "json":
        print(result.model_dump_json(indent=2))
    else:
        _print_result_summary(result)
    return EXIT_OK if result.status == "complete" else EXIT_DEGRADED


async def _cmd_fingerprint(args: argparse.Namespace) -> int:
    """Print the content fingerprint."""
    from resumelens.cache.fingerprint import compute_fingerprint

    content = _load_content(args.file)
    if content is None:
        return EXIT_ERROR
    print(compute_fingerprint(content).hex)
    return EXIT_OK


def _load_content(path: Path) -> ExtractedContent | None:
    """Read ExtractedContent from JSON or plain text; None on bad input."""
    from resumelens.core.models import ExtractedContent

    if not path.is_file():
        logger.error("File not found: %s", path)
        return None

    raw = path.read_text(encoding="utf-8")
    if path.suffix.lower() != ".json":
        return ExtractedContent.from_text(raw)
    try:
        return ExtractedContent.model_validate(json.loads(raw))
    except (json.JSONDecodeError, ValidationError) as exc:
        logger.error("Invalid content file %s: %s", path, exc)
        return None


def _print_result_summary(result: AnalysisResult) -> None:
    """Print a human-readable summary of AnalysisResult."""
    score = result.final_score
    print(f"\nAnalysis {result.status}:")
    print(f"  Fingerprint:  {result.fingerprint[:16]}")
    print(f"  Run ID:       {result.run_id}")
    print(f"  Score:        {score.overall:.1f} / 100")
    print(f"  Confidence:   {score.confidence:.2f}")
    for kind in ("ats", "content", "structure"):
        value = getattr(score.breakdown, kind)
        shown = "n/a" if value is None else f"{value:.1f}"
        print(f"    {kind:<10s}  {shown}")
    if result.failed_analyzers:
        print(f"  Failed:       {', '.join(result.failed_analyzers)}")
    if result.from_cache:
        print("  (from cache)")

    for bucket in ("critical", "recommended", "optional"):
        issues = getattr(result.suggestions, bucket)
        if not issues:
            continue
        print(f"\n  {bucket.capitalize()}:")
        for issue in issues:
            print(f"    - {issue.message}")


def _setup_logging(verbose: bool) -> None:
    """Configure logging for CLI usage from settings."""
    from resumelens.config.settings import Settings
    from resumelens.logging.logger import setup_logging_from_settings

    settings = Settings()
    setup_logging_from_settings(settings, level="DEBUG" if verbose else None)


if __name__ == "__main__":
    sys.exit(main())
