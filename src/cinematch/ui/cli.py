# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from cinematch import __version__
from cinematch.app import (
    analyze_catalog_gap,
    describe_export,
    download_export,
    find_missing,
    find_missing_by_tier,
    get_export_stats,
    local_summary,
    resolve_movie,
    update_baseline,
)
from cinematch.config import configure_logging
from cinematch.domain.gap_analysis import (
    PROFILES,
    TIER_ORDER,
    GapAnalysisOptions,
    format_export_counts,
    format_number,
    format_report,
    format_stats,
)
from cinematch.domain.model import EntityKind
from cinematch.domain.resolution import ResolutionResult

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from cinematch.domain.model import ExportEntry

log = logging.getLogger(__name__)


def _add_kind(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--kind",
        type=EntityKind,
        choices=list(EntityKind),
        default=EntityKind.MOVIE,
        help="Entity kind to analyse (default: %(default)s)",
    )


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile a local catalog against TMDb")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    resolve = subparsers.add_parser("resolve", help="Resolve a movie reference to a TMDb record")
    resolve.add_argument("--imdb-id", type=str, help="IMDb identifier, e.g. tt0133093")
    resolve.add_argument("--title", type=str, help="Movie title")
    resolve.add_argument("--year", type=int, help="Release year")

    gap = subparsers.add_parser("gap", help="Compare the daily export against local IDs")
    _add_kind(gap)
    gap.add_argument("--export-path", type=Path, help="Use an existing decompressed export")
    gap.add_argument(
        "--skip-download",
        action="store_true",
        help="Use today's cached export instead of downloading",
    )
    gap.add_argument("--min-popularity", type=float, help="Ignore entries below this popularity")

    missing = subparsers.add_parser("missing", help="List export entries missing locally")
    _add_kind(missing)
    missing.add_argument("--export-path", type=Path, help="Use an existing decompressed export")
    missing.add_argument("--skip-download", action="store_true", help="Use the cached export")
    missing.add_argument("--limit", type=int, help="Maximum number of entries to list")
    missing.add_argument("--min-popularity", type=float, help="Ignore entries below this popularity")
    missing.add_argument(
        "--sort-by",
        choices=("popularity", "id"),
        default="popularity",
        help="Ordering of the listed entries (default: %(default)s)",
    )
    missing.add_argument("--by-tier", action="store_true", help="Group entries by popularity tier")

    stats = subparsers.add_parser("stats", help="Show export totals and coverage")
    _add_kind(stats)

    baseline = subparsers.add_parser("baseline", help="Refresh the stored export baseline")
    _add_kind(baseline)

    summary = subparsers.add_parser("summary", help="Count local rows without reading the export")
    _add_kind(summary)

    export = subparsers.add_parser("export", help="Daily export file commands")
    export_sub = export.add_subparsers(dest="export_command", required=True)
    export_download = export_sub.add_parser("download", help="Download a daily export")
    _add_kind(export_download)
    export_download.add_argument(
        "--date",
        type=str,
        help="Export date as YYYY-MM-DD (default: today, UTC)",
    )
    export_analyze = export_sub.add_parser("analyze", help="Count entries in an export file")
    _add_kind(export_analyze)
    export_analyze.add_argument("--export-path", type=Path, help="Existing decompressed export")
    export_analyze.add_argument(
        "--samples",
        type=int,
        default=0,
        help="Samples per high/medium/low popularity tier (default: %(default)s)",
    )

    return parser.parse_args(list(argv))


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value.strip())
    except ValueError as exc:
        raise ValueError(f"Invalid date: {value}") from exc


def _validate(args: argparse.Namespace) -> None:
    if args.command == "resolve" and not (args.imdb_id or args.title):
        raise ValueError("resolve needs --imdb-id or --title")
    if args.command == "missing" and args.limit is not None and args.limit < 0:
        raise ValueError("--limit must be non-negative")
    if args.command == "export" and args.export_command == "analyze" and args.samples < 0:
        raise ValueError("--samples must be non-negative")
    if args.command == "export" and args.export_command == "download":
        args.day = _parse_date(args.date) if args.date else None


def _print_entries(entries: Sequence[ExportEntry]) -> None:
    for entry in entries:
        print(f"{entry.id}\t{entry.popularity:.3f}\t{entry.name or ''}")


def _run(args: argparse.Namespace) -> None:
    match args.command:
        case "resolve":
            resolution = resolve_movie(
                external_id=args.imdb_id,
                title=args.title,
                year=args.year,
            )
            if isinstance(resolution, ResolutionResult):
                movie = resolution.movie
                print(
                    f"{movie.id}\t{movie.title or ''}\t{movie.release_date or ''}\t"
                    f"{resolution.strategy_name}\t{resolution.confidence}"
                )
            elif resolution.transient_failure:
                log.warning("No match found; at least one lookup failed and may be retried")
            else:
                log.info("No match found")
        case "gap":
            options = GapAnalysisOptions(
                export_path=args.export_path,
                skip_download=args.skip_download,
                min_popularity=args.min_popularity,
            )
            print(format_report(analyze_catalog_gap(args.kind, options)))
        case "missing":
            options = GapAnalysisOptions(
                export_path=args.export_path,
                skip_download=args.skip_download,
                min_popularity=args.min_popularity,
                limit=args.limit,
                sort_by=args.sort_by,
            )
            if args.by_tier:
                grouped = find_missing_by_tier(args.kind, options)
                tier_names = PROFILES[args.kind].tier_names
                for label in TIER_ORDER:
                    print(f"# {tier_names[label]} ({format_number(len(grouped[label]))})")
                    _print_entries(grouped[label])
            else:
                _print_entries(find_missing(args.kind, options))
        case "stats":
            print(format_stats(get_export_stats(args.kind)))
        case "baseline":
            print(format_stats(update_baseline(args.kind)))
        case "summary":
            summary = local_summary(args.kind)
            print(
                f"{args.kind.plural}: {format_number(summary.total)} local, "
                f"{format_number(summary.with_external_id)} with TMDb ID, "
                f"{format_number(summary.without_external_id)} without"
            )
        case "export" if args.export_command == "download":
            print(download_export(args.kind, day=args.day))
        case "export" if args.export_command == "analyze":
            analysis = describe_export(
                args.kind,
                export_path=args.export_path,
                samples_per_tier=args.samples,
            )
            print(
                format_export_counts(
                    analysis.counts,
                    profile=PROFILES[args.kind],
                    distribution=analysis.distribution,
                    samples=analysis.samples,
                )
            )
        case _:
            raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        _validate(parsed_args)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        _run(parsed_args)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
