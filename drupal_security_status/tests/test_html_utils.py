"""Tests for HTML helper utilities."""

from __future__ import annotations

import sys
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


from drupal_security_status.html_utils import Table, escape_cell, heading


def test_escape_cell_turns_newlines_into_breaks() -> None:
    """Multi-line messages keep their line breaks once escaped."""

    assert escape_cell("deploy@web1 -- error code: 1\r\n<denied>") == (
        "deploy@web1 -- error code: 1<br>&lt;denied&gt;"
    )


def test_table_render() -> None:
    """Tables render a header row and one body row per added row."""

    table = Table(("Module", "Status"))
    table.add_row("Views & co", 4)
    table.add_row(None, "Insecure")

    html = table.render()

    assert len(table) == 2
    assert html.startswith("<table><thead><tr><th>Module</th><th>Status</th></tr></thead>")
    assert "<tr><td>Views &amp; co</td><td>4</td></tr>" in html
    assert "<tr><td></td><td>Insecure</td></tr>" in html
    assert html.endswith("</tbody></table>")


def test_heading_is_escaped() -> None:
    """Heading text is escaped."""

    assert heading("Shop <beta> (acme)") == "<h2>Shop &lt;beta&gt; (acme)</h2>"
