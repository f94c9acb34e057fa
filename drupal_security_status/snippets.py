"""Render the stored security report as HTML snippets grouped by team."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from .config import DEFAULT_TEMPLATE, DEFAULT_TEMPLATE_DIR
from .core import UNKNOWN_ERROR
from .html_utils import Table, heading, paragraph
from .report import AggregateReport, ProjectReport
from .status import StatusCode

logger = logging.getLogger(__name__)

SUMMARY_HEADERS = ("Project", "Insecure", "Update available", "Unsupported", "Detail")
DETAIL_HEADERS = ("Module", "Status", "Current version", "Required version")
UNASSIGNED_TEAM = "unassigned"

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


@dataclass
class DetailTable:
    """Modules needing an update on one server, with the headings shown above them."""

    header: str
    subheader: str
    table: Table

    def render(self) -> str:
        return self.header + self.subheader + self.table.render()


@dataclass
class TeamTable:
    """Summary and detail tables for every project owned by one team."""

    summary: Table = field(default_factory=lambda: Table(SUMMARY_HEADERS))
    details: List[DetailTable] = field(default_factory=list)


def _add_project_rows(team_table: TeamTable, project: ProjectReport) -> None:
    summary = team_table.summary
    if not project.checked:
        summary.add_row(project.display_name, "", "", "", project.message)
        return

    # Multi site setups poll several servers; each gets its own row.
    for label, server in project.report.items():
        if not server.checked:
            summary.add_row(project.display_name, "", "", "", server.message or UNKNOWN_ERROR)
            continue

        unsupported = server.count(StatusCode.REVOKED) + server.count(StatusCode.NOT_SUPPORTED)
        summary.add_row(
            project.display_name,
            server.count(StatusCode.NOT_SECURE),
            server.count(StatusCode.NOT_CURRENT),
            unsupported,
            server.host,
        )

        if not server.need_update_modules:
            continue
        detail = Table(DETAIL_HEADERS)
        for module in server.need_update_modules.values():
            detail.add_row(module.label, module.message, module.current_version, module.new_version)
        team_table.details.append(
            DetailTable(
                header=heading(f"{project.name} ({project.group})"),
                subheader=paragraph(label),
                table=detail,
            )
        )


def build_team_tables(report: AggregateReport) -> Dict[str, TeamTable]:
    """Group the projects of ``report`` by team and build their tables."""

    tables: Dict[str, TeamTable] = {}
    for project in report:
        team_table = tables.setdefault(project.team, TeamTable())
        _add_project_rows(team_table, project)
    return tables


def team_file_stem(team: str) -> str:
    """Return a file name stem for ``team`` that stays inside the output directory."""

    stem = _UNSAFE_FILENAME_CHARS.sub("-", team).strip(".-")
    return stem or UNASSIGNED_TEAM


def render_team_fragment(team_table: TeamTable) -> str:
    """Return the summary table followed by every detail table."""

    return team_table.summary.render() + "".join(d.render() for d in team_table.details)


def create_environment(template_dir: Optional[Union[str, Path]] = None) -> Environment:
    """Return a Jinja2 environment loading page templates from ``template_dir``."""

    directory = Path(template_dir) if template_dir else DEFAULT_TEMPLATE_DIR
    return Environment(
        loader=FileSystemLoader(str(directory)),
        autoescape=select_autoescape(["html", "htm", "xml", "twig"]),
    )


def write_team_snippets(
    report: AggregateReport,
    output_dir: Union[str, Path],
    template_dir: Optional[Union[str, Path]] = None,
    template_name: str = DEFAULT_TEMPLATE,
) -> List[Path]:
    """Write ``<team>-snippet.html`` and ``<team>.html`` for every team.

    Returns the paths written, snippet first then page for each team.
    """

    output = Path(output_dir)
    output.mkdir(parents=True, exist_ok=True)
    template = create_environment(template_dir).get_template(template_name)

    written: List[Path] = []
    for team, team_table in build_team_tables(report).items():
        fragment = render_team_fragment(team_table)

        stem = team_file_stem(team)
        snippet_path = output / f"{stem}-snippet.html"
        snippet_path.write_text(fragment, encoding="utf-8")

        page_path = output / f"{stem}.html"
        page_path.write_text(template.render(content=Markup(fragment)), encoding="utf-8")

        logger.info("Wrote snippets for team %s to %s", team or "(none)", output)
        written.extend([snippet_path, page_path])
    return written


__all__ = [
    "DETAIL_HEADERS",
    "DetailTable",
    "SUMMARY_HEADERS",
    "TeamTable",
    "build_team_tables",
    "create_environment",
    "render_team_fragment",
    "team_file_stem",
    "write_team_snippets",
]
