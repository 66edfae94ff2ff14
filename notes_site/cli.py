#!/usr/bin/env python3
"""Command-line interface for the Notes Site pipeline.

    notes-site build --source notes --output site --format html
    notes-site check --source notes --strict
"""

import argparse
import asyncio
import sys

import pydantic

from .config import SUPPORTED_FORMATS
from .config import get_settings
from .exceptions import NotesSiteError
from .exceptions import ValidationError
from .logger_config import configure_logging
from .models import BuildReport
from .pipeline import build_site
from .pipeline import check_site


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with the build and check commands."""
    parser = argparse.ArgumentParser(
        prog="notes-site",
        description="Build a navigable site from a collection of Markdown notes.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build", help="Render every note and write the site")
    build.add_argument("--source", "-s", type=str, help="Directory holding the notes (default: NOTES_SOURCE_DIR)")
    build.add_argument("--output", "-o", type=str, help="Directory to write to (default: NOTES_OUTPUT_DIR)")
    build.add_argument("--format", "-f", choices=SUPPORTED_FORMATS, help="Output format (default: OUTPUT_FORMAT)")
    build.add_argument("--strict", action="store_true", help="Exit non-zero when any warning is reported")

    check = subparsers.add_parser("check", help="Load, parse and resolve without writing anything")
    check.add_argument("--source", "-s", type=str, help="Directory holding the notes (default: NOTES_SOURCE_DIR)")
    check.add_argument("--strict", action="store_true", help="Exit non-zero when any warning is reported")

    return parser


def print_report(report: BuildReport) -> None:
    """Print a human-readable summary of a build report."""
    print(f"Source: {report.source}")
    if report.output_dir:
        print(f"Output: {report.output_dir} ({report.output_format})")
    print(f"Documents: {len(report.documents)}")
    print(f"Cross-references: {len(report.edges)}")
    print(f"Artifacts: {len(report.artifacts)}")
    if report.issues:
        print()
        print(f"=== Issues ({report.error_count} errors, {report.warning_count} warnings) ===")
        for issue in report.issues:
            print(f"[{issue['severity'].upper()}] {issue['error_code']}: {issue['user_message']}")


def exit_code_for(report: BuildReport, strict: bool) -> int:
    if report.error_count:
        return 1
    if strict and report.issues:
        return 1
    return 0


def settings_error(error: pydantic.ValidationError) -> ValidationError:
    """Convert the first settings validation failure into a report-style error."""
    first = error.errors()[0]
    field = ".".join(str(part) for part in first["loc"])
    return ValidationError(
        f"Invalid configuration for '{field}': {first['msg']}",
        field=field,
        value=first.get("input"),
    )


def main(argv: list[str] | None = None) -> int:
    args = create_parser().parse_args(argv)

    try:
        settings = get_settings()
    except pydantic.ValidationError as e:
        print(f"Error: {settings_error(e).user_message}", file=sys.stderr)
        return 1
    configure_logging(settings.log_level, settings.structured_logging)

    try:
        if args.command == "build":
            report = asyncio.run(build_site(source=args.source, output=args.output, output_format=args.format))
        else:
            report = asyncio.run(check_site(source=args.source))
    except NotesSiteError as e:
        print(f"Error: {e.user_message}", file=sys.stderr)
        return 1

    print_report(report)
    return exit_code_for(report, args.strict)


if __name__ == "__main__":
    sys.exit(main())
