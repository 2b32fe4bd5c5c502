# ruff: noqa: T201

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from course_settings.app import (
    open_app_settings,
    open_exam_settings,
    show_settings,
    update_settings,
)
from course_settings.config import configure_logging
from course_settings.domain.model import LoadState, SaveState

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from course_settings.app import SettingsReport
    from course_settings.domain.session import SettingsSession

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="View and edit course settings in Studio")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    kinds = parser.add_subparsers(dest="kind", required=True)

    exam = kinds.add_parser("exam", help="Proctored exam settings")
    app = kinds.add_parser("app", help="Course app settings")
    app.add_argument("--app-id", required=True, help="Course app identifier, e.g. 'progress'")
    app.add_argument(
        "--field",
        dest="fields",
        action="append",
        default=[],
        help="Advanced setting that belongs to the app (repeatable)",
    )

    for kind_parser in (exam, app):
        kind_parser.add_argument("--course-id", required=True, help="Course run key")
        actions = kind_parser.add_subparsers(dest="action", required=True)
        actions.add_parser("show", help="Print the current settings")
        setter = actions.add_parser("set", help="Change settings and save them")
        setter.add_argument(
            "assignments",
            nargs="+",
            metavar="FIELD=VALUE",
            help="Field assignments; VALUE is parsed as JSON when possible",
        )

    return parser.parse_args(list(argv))


def _parse_value(raw: str) -> object:
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def _parse_assignments(assignments: Sequence[str]) -> dict[str, object]:
    changes: dict[str, object] = {}
    for assignment in assignments:
        name, sep, raw = assignment.partition("=")
        if not sep or not name.strip():
            raise ValueError(f"Invalid assignment (expected FIELD=VALUE): {assignment}")
        changes[name.strip()] = _parse_value(raw)
    return changes


def _build_session(args: argparse.Namespace) -> SettingsSession:
    if args.kind == "exam":
        return open_exam_settings(args.course_id)
    return open_app_settings(args.course_id, args.app_id, fields=tuple(args.fields))


def _print_report(report: SettingsReport) -> None:
    if report.load_state is LoadState.PERMISSION_DENIED:
        print("You are not authorized to view these settings.", file=sys.stderr)
        return
    if report.load_state is LoadState.CONNECTION_FAILED:
        print(
            "We encountered a technical error when loading these settings. "
            "This might be a temporary issue, so please try again in a few minutes.",
            file=sys.stderr,
        )
        return

    for name, value in report.values.items():
        marker = " (locked)" if report.locks.get(name) else ""
        print(f"{name} = {json.dumps(value)}{marker}")
    for name, message in report.validation.items():
        print(f"error: {name}: {message}", file=sys.stderr)
    if report.save_state is SaveState.SUCCESSFUL:
        print("Saved.")
    elif report.save_state is SaveState.FAILED and not report.validation:
        print(f"Saving failed (status={report.status_code}).", file=sys.stderr)


def _exit_code(report: SettingsReport) -> int:
    if report.ok:
        return EXIT_OK
    if report.validation:
        return EXIT_USAGE
    return EXIT_FAILED


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        changes = _parse_assignments(parsed_args.assignments) if parsed_args.action == "set" else {}
    except ValueError:
        configure_logging()
        log.exception("CLI validation error")
        sys.exit(EXIT_USAGE)

    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        session = _build_session(parsed_args)
        if parsed_args.action == "set":
            report = asyncio.run(update_settings(session, changes))
        else:
            report = asyncio.run(show_settings(session))
    except Exception:
        log.exception("Fatal error while handling settings")
        sys.exit(EXIT_FAILED)

    _print_report(report)
    sys.exit(_exit_code(report))


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
