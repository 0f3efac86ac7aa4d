"""Top-level crawl report command line interface."""

from __future__ import annotations

import argparse
from datetime import datetime
from pathlib import Path
from typing import Sequence

from crawl_report.jobs.tasks import run_report
from crawl_report.reports import REPORTS


def _parse_at(value: str) -> datetime:
    normalized = value.replace("Z", "+00:00")
    try:
        return datetime.fromisoformat(normalized)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(
            "--at must be an ISO-8601 datetime (example: 2026-02-13T03:00:00-08:00)"
        ) from exc


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="crawl-report", description="Crawl status report CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Build a report and post it to Slack")
    run_parser.add_argument(
        "--report",
        choices=sorted(REPORTS),
        help="Report variant to build (default: REPORT_NAME or crawler_status)",
    )
    run_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Build and print the report without posting it",
    )
    run_parser.add_argument(
        "--at",
        type=_parse_at,
        help="Pretend the job runs at this ISO-8601 time when resolving the window",
    )
    run_parser.add_argument("--body-out", type=Path, help="Optional path to write the report text to")
    run_parser.set_defaults(handler=_handle_run)

    list_parser = subparsers.add_parser("list", help="List available report variants")
    list_parser.set_defaults(handler=_handle_list)

    return parser


def _handle_run(args: argparse.Namespace) -> int:
    result = run_report(args.report, now=args.at, dry_run=args.dry_run)

    if args.body_out:
        args.body_out.parent.mkdir(parents=True, exist_ok=True)
        args.body_out.write_text(result["body"] + "\n", encoding="utf-8")
    print(result["body"])
    return 0


def _handle_list(args: argparse.Namespace) -> int:
    for name, definition in sorted(REPORTS.items()):
        print(f"{name:<20}{definition.label}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    return args.handler(args)


if __name__ == "__main__":
    raise SystemExit(main())
