"""Command line interface for the Drupal security status tasks."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from jinja2 import TemplateError

from .config import ACCEPTED_PROJECT_TYPES, DEFAULT_TEMPLATE, get_ssh_key_filename, get_ssh_timeout
from .core import collect_security_report, export_report_to_excel, print_summary
from .projects import ProjectConfigError, load_projects
from .snippets import write_team_snippets
from .store import ReportFormatError, load_report, report_path, save_report


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Return parsed command line arguments."""

    parser = argparse.ArgumentParser(
        description="Poll Drupal sites for module security updates and publish the results."
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: INFO)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    status = subparsers.add_parser("status", help="Poll project servers and write the security report")
    status.add_argument("--source-dir", required=True, help="Directory holding the project descriptors")
    status.add_argument("--output-dir", required=True, help="Directory where the report is written")
    status.add_argument(
        "--project-type",
        dest="project_types",
        action="append",
        default=None,
        help=f"Project type to poll; repeatable (default: {', '.join(ACCEPTED_PROJECT_TYPES)})",
    )
    status.add_argument("--json", dest="json_path", help="Optional path to export the report as JSON")
    status.add_argument(
        "--excel",
        dest="excel_path",
        help="Optional path to export the summary as an Excel workbook (.xlsx)",
    )

    snippets = subparsers.add_parser("snippets", help="Render the security report as HTML per team")
    snippets.add_argument("--source-file", required=True, help="Security report written by 'status'")
    snippets.add_argument("--output-dir", required=True, help="Directory where the HTML files are written")
    snippets.add_argument("--template-dir", default=None, help="Directory with the page template")
    snippets.add_argument(
        "--template",
        dest="template_name",
        default=DEFAULT_TEMPLATE,
        help=f"Page template name inside the template directory (default: {DEFAULT_TEMPLATE})",
    )
    return parser.parse_args(argv)


def run_status(args: argparse.Namespace) -> int:
    try:
        get_ssh_key_filename()
        get_ssh_timeout()
        projects = load_projects(args.source_dir)
    except (ProjectConfigError, RuntimeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    project_types = tuple(args.project_types) if args.project_types else ACCEPTED_PROJECT_TYPES
    report = collect_security_report(projects, project_types=project_types)
    print_summary(report)

    try:
        path = save_report(report, report_path(args.output_dir))
    except OSError as exc:
        print(f"Error: failed to write security report: {exc}", file=sys.stderr)
        return 1
    print(f"Security report written to {path}")

    if args.json_path:
        try:
            with open(args.json_path, "w", encoding="utf-8") as fh:
                json.dump(report.to_dict(), fh, indent=2, default=str)
        except OSError as exc:
            print(f"Error: failed to export JSON report: {exc}", file=sys.stderr)
            return 1
        print(f"Report exported to {args.json_path}")

    if args.excel_path:
        try:
            path = export_report_to_excel(report, args.excel_path)
        except RuntimeError as exc:
            print(f"Failed to export Excel report: {exc}", file=sys.stderr)
        else:
            print(f"Excel report written to {path}")

    return 0


def run_snippets(args: argparse.Namespace) -> int:
    try:
        report = load_report(args.source_file)
        written = write_team_snippets(
            report, args.output_dir, template_dir=args.template_dir, template_name=args.template_name
        )
    except (OSError, ReportFormatError, TemplateError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    for path in written:
        print(f"Wrote {path}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point used by ``python -m drupal_security_status``."""

    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if args.command == "status":
        return run_status(args)
    return run_snippets(args)


__all__ = ["main", "parse_args"]
