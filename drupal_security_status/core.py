"""Core orchestration: poll project servers and summarise the results."""
from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from .config import ACCEPTED_PROJECT_TYPES, STATUS_COMMAND
from .parser import StatusParseError, parse_status_output
from .projects import PollableProject, PollableServer
from .report import AggregateReport, ProjectReport, ServerReport
from .status import StatusCode

logger = logging.getLogger(__name__)

AUTO_CHECK_DISABLED = "Auto check has been disabled for this project."
NO_POLLABLE_SERVERS = "No server configured for auto polling."
UNKNOWN_ERROR = "Unknown Error"


def poll_server(
    project: PollableProject, server: PollableServer, command: str = STATUS_COMMAND
) -> ServerReport:
    """Run the status command on ``server`` and classify its output."""

    logger.info("Visiting %s", server.label)
    result = server.run_remote(command)
    report = ServerReport(host=server.host)
    origin = f"{server.user}@{server.host}"

    if result.return_code != 0:
        logger.warning(
            "%s on %s exited with status %d", project.identifier, origin, result.return_code
        )
        details = "\n".join(result.output)
        report.message = f"{origin} -- error code: {result.return_code}"
        if details:
            report.message += f"\n{details}"
        return report

    try:
        parsed = parse_status_output(result.output)
    except StatusParseError as exc:
        logger.error("Unable to parse status output from %s: %s", origin, exc)
        report.message = f"{origin} -- unable to parse status output: {exc}"
        return report

    report.checked = True
    report.counts = parsed.counts
    report.modules = parsed.modules
    report.need_update_modules = parsed.need_update_modules
    return report


def build_project_report(
    project: PollableProject, command: str = STATUS_COMMAND
) -> ProjectReport:
    """Poll every security pollable server of ``project``."""

    report = ProjectReport(
        id=project.identifier,
        type=project.type,
        group=project.group,
        name=project.name,
        team=project.team,
    )

    if not project.poll_security_automatically:
        report.message = AUTO_CHECK_DISABLED
        return report

    servers = list(project.security_pollable_servers())
    if not servers:
        report.message = NO_POLLABLE_SERVERS
        return report

    for server in servers:
        report.checked = True
        report.report[server.label] = poll_server(project, server, command)
    return report


def collect_security_report(
    projects: Iterable[PollableProject],
    *,
    project_types: Optional[Sequence[str]] = ACCEPTED_PROJECT_TYPES,
    command: str = STATUS_COMMAND,
) -> AggregateReport:
    """Build the aggregate report for ``projects``.

    Projects whose type is not in ``project_types`` are skipped; pass ``None``
    to poll every project.
    """

    aggregate = AggregateReport()
    for project in projects:
        if project_types is not None and project.type not in project_types:
            logger.debug("Skipping %s (type %s)", project.identifier, project.type)
            continue
        logger.info("Handling %s", project.identifier)
        aggregate.add(build_project_report(project, command))
    return aggregate


def summary_rows(report: AggregateReport) -> Iterator[Tuple[str, str, str, str, str, str, str]]:
    """Yield one row per project/server: team, project, server and counters.

    Numeric cells are blank when the project or server could not be checked
    and the last cell then carries the explanatory message.
    """

    for project in report:
        if not project.checked:
            yield (project.team, project.display_name, "", "", "", "", project.message)
            continue
        for label, server in project.report.items():
            if not server.checked:
                yield (
                    project.team,
                    project.display_name,
                    label,
                    "",
                    "",
                    "",
                    server.message or UNKNOWN_ERROR,
                )
                continue
            unsupported = server.count(StatusCode.REVOKED) + server.count(StatusCode.NOT_SUPPORTED)
            yield (
                project.team,
                project.display_name,
                label,
                str(server.count(StatusCode.NOT_SECURE)),
                str(server.count(StatusCode.NOT_CURRENT)),
                str(unsupported),
                server.host,
            )


def print_summary(report: AggregateReport) -> None:
    """Pretty-print a per server summary to stdout."""

    rows = list(summary_rows(report))
    if not rows:
        print("No projects were polled.")
        return

    header = f"{'Project':<30} {'Server':<15} {'Insecure':>8} {'Updates':>8} {'Unsupp.':>8}  Detail"
    print(header)
    print("-" * len(header))
    for _, project, server, insecure, updates, unsupported, detail in rows:
        name = (project[:27] + "...") if len(project) > 30 else project
        detail = detail.splitlines()[0] if detail else ""
        print(f"{name:<30} {server:<15} {insecure:>8} {updates:>8} {unsupported:>8}  {detail}")


def export_report_to_excel(report: AggregateReport, path: str) -> str:
    """Write the per server summary of ``report`` to an Excel workbook."""

    headers = ("Team", "Project", "Server", "Insecure", "Update available", "Unsupported", "Detail")
    rows = list(summary_rows(report))

    try:
        from openpyxl import Workbook
        from openpyxl.utils import get_column_letter
    except ImportError as exc:  # pragma: no cover - dependency missing during tests
        raise RuntimeError(
            "The 'openpyxl' package is required to export the security report "
            "to Excel. Install it with 'pip install openpyxl'."
        ) from exc

    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Security status"

    sheet.append(list(headers))
    column_widths: List[int] = [len(header) for header in headers]

    for row in rows:
        values = [int(v) if v.isdigit() else v for v in row]
        sheet.append(values)
        for idx, value in enumerate(row):
            column_widths[idx] = max(column_widths[idx], len(value))

    for idx, width in enumerate(column_widths, start=1):
        sheet.column_dimensions[get_column_letter(idx)].width = min(width + 2, 60)

    workbook.save(path)
    return path


__all__ = [
    "AUTO_CHECK_DISABLED",
    "NO_POLLABLE_SERVERS",
    "UNKNOWN_ERROR",
    "build_project_report",
    "collect_security_report",
    "export_report_to_excel",
    "poll_server",
    "print_summary",
    "summary_rows",
]
