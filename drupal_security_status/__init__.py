"""Security update status reporting for fleets of Drupal sites."""

from __future__ import annotations

from .core import build_project_report, collect_security_report, poll_server, print_summary
from .parser import StatusParseError, parse_status_output
from .report import AggregateReport, ModuleRecord, ProjectReport, ServerReport
from .snippets import build_team_tables, write_team_snippets
from .status import StatusCode, label_of
from .store import load_report, save_report

__all__ = [
    "AggregateReport",
    "ModuleRecord",
    "ProjectReport",
    "ServerReport",
    "StatusCode",
    "StatusParseError",
    "build_project_report",
    "build_team_tables",
    "collect_security_report",
    "label_of",
    "load_report",
    "parse_status_output",
    "poll_server",
    "print_summary",
    "save_report",
    "write_team_snippets",
]
