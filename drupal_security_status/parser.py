"""Parse the CSV output of ``drush ups`` into module records.

The update manager prints one module per line with five comma separated
fields: label, machine name, existing version, candidate version and the
numeric status code. Fields are not quoted, so a value containing a comma
cannot be represented and is reported as a malformed line.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Union

from .report import ModuleRecord
from .status import empty_counts, label_of

FIELD_COUNT = 5


class StatusParseError(ValueError):
    """Raised when a line of status output cannot be parsed."""

    def __init__(self, line_number: int, line: str, reason: str) -> None:
        super().__init__(f"line {line_number}: {reason}: {line!r}")
        self.line_number = line_number
        self.line = line
        self.reason = reason


@dataclass
class ParsedStatus:
    """Module records of a single poll together with their tallies."""

    records: List[ModuleRecord] = field(default_factory=list)
    counts: Dict[int, int] = field(default_factory=empty_counts)
    modules: Dict[str, ModuleRecord] = field(default_factory=dict)
    need_update_modules: Dict[str, ModuleRecord] = field(default_factory=dict)


def parse_status_line(line: str, line_number: int = 1) -> ModuleRecord:
    """Return the :class:`ModuleRecord` described by ``line``."""

    fields = line.split(",")
    if len(fields) != FIELD_COUNT:
        raise StatusParseError(
            line_number, line, f"expected {FIELD_COUNT} fields, got {len(fields)}"
        )
    label, machine_name, current_version, new_version, raw_status = fields
    try:
        status_code = int(raw_status.strip())
    except ValueError:
        raise StatusParseError(line_number, line, "status code is not an integer") from None

    return ModuleRecord(
        label=label,
        machine_name=machine_name,
        current_version=current_version,
        new_version=new_version,
        status_code=status_code,
        message=label_of(status_code),
    )


def parse_status_output(output: Union[str, Iterable[str]]) -> ParsedStatus:
    """Parse every non-empty line of ``output``.

    ``output`` may be the raw command output or the list of lines captured by
    the remote runner.
    """

    lines = output.splitlines() if isinstance(output, str) else output
    parsed = ParsedStatus()
    need_update: List[ModuleRecord] = []

    for line_number, raw_line in enumerate(lines, start=1):
        line = raw_line.rstrip("\r\n")
        if not line.strip():
            continue
        record = parse_status_line(line, line_number)
        previous = parsed.modules.get(record.machine_name)
        if previous is not None:
            # A repeated machine name replaces the earlier line everywhere.
            parsed.records.remove(previous)
            parsed.counts[previous.status_code] -= 1
            if previous.needs_update:
                need_update.remove(previous)
        parsed.records.append(record)
        parsed.counts[record.status_code] = parsed.counts.get(record.status_code, 0) + 1
        parsed.modules[record.machine_name] = record
        if record.needs_update:
            need_update.append(record)

    for record in sorted(need_update, key=ModuleRecord.sort_key):
        parsed.need_update_modules[record.update_key()] = record
    return parsed


__all__ = ["FIELD_COUNT", "ParsedStatus", "StatusParseError", "parse_status_line", "parse_status_output"]
