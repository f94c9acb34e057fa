"""Persist the aggregate report as a YAML document."""
from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Union

import yaml

from .config import REPORT_FILENAME
from .report import AggregateReport

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class ReportFormatError(ValueError):
    """Raised when a stored report does not have the expected shape."""


def report_path(output_dir: PathLike) -> Path:
    """Return the location of the report inside ``output_dir``."""

    return Path(output_dir) / REPORT_FILENAME


def dump_report(report: AggregateReport) -> str:
    """Return ``report`` serialised as YAML, keeping project order."""

    return yaml.safe_dump(
        report.to_dict(), sort_keys=False, default_flow_style=False, allow_unicode=True
    )


def save_report(report: AggregateReport, path: PathLike) -> Path:
    """Write ``report`` to ``path``.

    The document is written to a temporary file next to ``path`` and renamed
    over it, so readers never see a truncated report.
    """

    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    content = dump_report(report)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", dir=str(target.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(content)
        os.replace(tmp_name, target)
    except BaseException:
        os.unlink(tmp_name)
        raise

    logger.info("Security report written to %s", target)
    return target


def load_report(path: PathLike) -> AggregateReport:
    """Load a report previously written by :func:`save_report`."""

    with Path(path).open("r", encoding="utf-8") as fh:
        try:
            data = yaml.safe_load(fh)
        except yaml.YAMLError as exc:
            raise ReportFormatError(f"{path} is not valid YAML: {exc}") from exc

    if data is None:
        return AggregateReport()
    if not isinstance(data, dict):
        raise ReportFormatError(f"{path} does not contain a mapping of projects")
    try:
        return AggregateReport.from_dict(data)
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise ReportFormatError(f"{path} has an unexpected structure: {exc}") from exc


__all__ = ["ReportFormatError", "dump_report", "load_report", "report_path", "save_report"]
