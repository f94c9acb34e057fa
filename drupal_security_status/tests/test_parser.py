"""Tests for parsing ``drush ups`` CSV output."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


from drupal_security_status.parser import StatusParseError, parse_status_line, parse_status_output
from drupal_security_status.status import StatusCode


SAMPLE_OUTPUT = [
    "Views,views,8.1.0,8.2.0,4",
    "Drupal core,drupal,8.5.0,8.5.6,1",
    "",
    "Token,token,8.1.1,8.1.1,5",
    "Pathauto,pathauto,8.1.0,8.1.3,1",
    "Old thing,old_thing,8.1.0,,3",
    "Gone,gone,8.0.0,,2",
]


def test_single_not_current_line() -> None:
    """A single update-available line is classified and counted."""

    parsed = parse_status_output("Views,views,8.1.0,8.2.0,4\n")

    assert len(parsed.records) == 1
    record = parsed.records[0]
    assert record.machine_name == "views"
    assert record.status_code == StatusCode.NOT_CURRENT
    assert record.message == "Update available"
    assert parsed.counts[4] == 1
    assert all(total == 0 for code, total in parsed.counts.items() if code != 4)
    assert list(parsed.need_update_modules) == ["4views"]


def test_counts_match_number_of_records() -> None:
    """The per status tallies add up to the parsed records."""

    parsed = parse_status_output(SAMPLE_OUTPUT)

    assert len(parsed.records) == 6
    assert sum(parsed.counts.values()) == 6
    assert parsed.counts[StatusCode.NOT_SECURE] == 2
    assert parsed.counts[StatusCode.CURRENT] == 1
    assert parsed.counts[StatusCode.UNKNOWN] == 0
    assert parsed.counts[StatusCode.NOT_CHECKED] == 0


def test_need_update_excludes_current_and_is_ordered() -> None:
    """Needs-update modules are grouped by status, then sorted by name."""

    parsed = parse_status_output(SAMPLE_OUTPUT)
    records = list(parsed.need_update_modules.values())

    assert all(r.status_code != StatusCode.CURRENT for r in records)
    assert [r.machine_name for r in records] == [
        "drupal",
        "pathauto",
        "gone",
        "old_thing",
        "views",
    ]
    assert "token" in parsed.modules


def test_negative_codes_sort_before_positive() -> None:
    """Unknown and unchecked modules lead the needs-update listing."""

    parsed = parse_status_output(
        ["A,alpha,1.0,1.1,4", "B,beta,1.0,,-1", "C,gamma,1.0,,-2", "D,delta,1.0,2.0,1"]
    )

    assert [r.status_code for r in parsed.need_update_modules.values()] == [-2, -1, 1, 4]


def test_unknown_status_is_counted_with_fallback_label() -> None:
    """Codes outside the taxonomy still keep the tally consistent."""

    parsed = parse_status_output(["Odd,odd,1.0,1.0,9"])

    assert parsed.records[0].message == "Update code unknown"
    assert parsed.counts[9] == 1
    assert sum(parsed.counts.values()) == 1


def test_blank_and_crlf_lines() -> None:
    """Blank lines are skipped and Windows line endings are tolerated."""

    parsed = parse_status_output("\r\nViews,views,8.1.0,8.2.0,4\r\n\r\n")

    assert len(parsed.records) == 1
    assert parsed.records[0].status_code == 4


def test_empty_output() -> None:
    """No output yields zero counts and no modules."""

    parsed = parse_status_output([])

    assert parsed.records == []
    assert sum(parsed.counts.values()) == 0
    assert parsed.need_update_modules == {}


def test_wrong_field_count_raises() -> None:
    """A line with an embedded comma is reported, not silently misparsed."""

    with pytest.raises(StatusParseError) as excinfo:
        parse_status_output(["Views,views,8.1.0,8.2.0,4", "Foo, Bar,foo,1.0,1.1,4"])

    assert excinfo.value.line_number == 2
    assert "expected 5 fields" in str(excinfo.value)


def test_non_numeric_status_raises() -> None:
    """The status column must be an integer."""

    with pytest.raises(StatusParseError, match="not an integer"):
        parse_status_line("Views,views,8.1.0,8.2.0,four")


def test_repeated_machine_name_replaces_earlier_line() -> None:
    """A later line for the same module replaces the earlier one in every mapping."""

    parsed = parse_status_output(["Views,views,8.1.0,8.2.0,4", "Views,views,8.2.0,8.2.0,5"])

    assert [r.status_code for r in parsed.records] == [5]
    assert parsed.modules["views"].status_code == StatusCode.CURRENT
    assert parsed.need_update_modules == {}
    assert parsed.counts[StatusCode.NOT_CURRENT] == 0
    assert parsed.counts[StatusCode.CURRENT] == 1


def test_counts_match_modules_tally() -> None:
    """Counts always equal the tally of the modules mapping by status."""

    parsed = parse_status_output(
        ["A,alpha,1.0,1.1,4", "B,beta,1.0,1.0,5", "A,alpha,1.0,1.2,1", "B,beta,1.0,,3"]
    )

    tally = {}
    for record in parsed.modules.values():
        tally[record.status_code] = tally.get(record.status_code, 0) + 1
    assert {code: n for code, n in parsed.counts.items() if n} == tally
    assert list(parsed.need_update_modules) == ["1alpha", "3beta"]
