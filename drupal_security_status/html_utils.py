"""Helpers for building the HTML tables of the security snippets."""

from __future__ import annotations

from dataclasses import dataclass, field
from html import escape as html_escape
from typing import Iterable, List, Sequence


def escape_cell(value: object) -> str:
    """Return ``value`` escaped for use inside a table cell.

    Messages captured from remote commands can span several lines; each line is
    escaped on its own and the lines are joined with ``<br>`` so the break
    survives in the rendered page.
    """

    text = "" if value is None else str(value)
    lines = text.replace("\r\n", "\n").split("\n")
    return "<br>".join(html_escape(line, quote=True) for line in lines)


def format_row(cells: Iterable[object], *, tag: str = "td") -> str:
    """Return a ``<tr>`` element with one ``tag`` element per cell."""

    body = "".join(f"<{tag}>{escape_cell(cell)}</{tag}>" for cell in cells)
    return f"<tr>{body}</tr>"


@dataclass
class Table:
    """A simple HTML table with a single header row and any number of body rows."""

    headers: Sequence[str]
    rows: List[List[str]] = field(default_factory=list)

    def add_row(self, *cells: object) -> None:
        self.rows.append(["" if cell is None else str(cell) for cell in cells])

    def __len__(self) -> int:
        return len(self.rows)

    def render(self) -> str:
        """Return the table as an HTML string."""

        head = f"<thead>{format_row(self.headers, tag='th')}</thead>"
        body = "<tbody>" + "".join(format_row(row) for row in self.rows) + "</tbody>"
        return f"<table>{head}{body}</table>"


def heading(text: str, *, level: int = 2) -> str:
    """Return an escaped ``<hN>`` element."""

    return f"<h{level}>{html_escape(text, quote=True)}</h{level}>"


def paragraph(text: str) -> str:
    """Return an escaped ``<p>`` element."""

    return f"<p>{html_escape(text, quote=True)}</p>"


__all__ = ["Table", "escape_cell", "format_row", "heading", "paragraph"]
