from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass, field

from ..models.columns import KNOWN_COLUMNS
from ..models.row_data import MalformedLine, RawRow

"""Tabular text parser for catalog import files.

Rules:
- Leading BOM dropped, blank / whitespace-only lines skipped.
- First non-blank line is the header (cells trimmed, quote characters stripped).
- Every later non-blank line becomes a RawRow keyed by the header cells.
- Unquoted cells are trimmed. Quoted cells keep their content as is, may
  contain the delimiter and line breaks, and ``""`` is a literal quote, which
  is exactly what serializer output contains.
- A line with a different cell count than the header is kept as MalformedLine
  so the coordinator can report it instead of losing it.
- A quote that never closes, or closes with stray text after it, only spoils
  its own line. Such a multi-line record (and any multi-line record with the
  wrong cell count) is read again one physical line at a time, so the lines
  it ran over still count.
- Fewer than two non-blank lines, or a header without any catalog column,
  means the text is not a catalog file at all -> TabularStructureError.
"""

__all__ = [
    "TabularStructureError",
    "ParsedTable",
    "parse_tabular",
]

_BOM = "\ufeff"
_LINE_BREAK = re.compile(r"(\r\n|\r|\n)")
_LEADING_SPACE = " \t"


class TabularStructureError(Exception):
    """Raised when the whole input cannot be treated as tabular data."""


@dataclass
class ParsedTable:
    header: list[str]
    rows: list[RawRow | MalformedLine] = field(default_factory=list)
    unknown_columns: list[str] = field(default_factory=list)

    @property
    def data_row_count(self) -> int:
        return len(self.rows)


@dataclass(frozen=True)
class _Line:
    text: str
    end: str  # line break as found in the source, "" on the last line


@dataclass(frozen=True)
class _Record:
    first_line: int
    last_line: int
    cells: list[str]


def _physical_lines(text: str) -> list[_Line]:
    parts = _LINE_BREAK.split(text)
    lines = [_Line(parts[i], parts[i + 1]) for i in range(0, len(parts) - 1, 2)]
    if parts[-1]:
        lines.append(_Line(parts[-1], ""))
    return lines


def _read_record(
    lines: list[_Line],
    start: int,
    delimiter: str,
    quotechar: str,
    *,
    single_line: bool = False,
) -> tuple[list[str], int, bool]:
    """Split the record beginning at ``lines[start]`` into cells.

    Returns (cells, index of the next unread line, clean). ``clean`` is False
    when a quoted cell was still open at the end of the input (or of the line,
    with ``single_line``) or a closing quote was followed by stray text.
    """
    cells: list[str] = []
    clean = True
    i = start
    line = lines[i].text
    pos = 0
    while True:
        while pos < len(line) and line[pos] in _LEADING_SPACE:
            pos += 1
        if line.startswith(quotechar, pos):
            pos += 1
            parts: list[str] = []
            while True:
                end = line.find(quotechar, pos)
                if end == -1:
                    parts.append(line[pos:])
                    if single_line or i + 1 >= len(lines):
                        cells.append("".join(parts))
                        return cells, i + 1, False
                    parts.append(lines[i].end)
                    i += 1
                    line = lines[i].text
                    pos = 0
                    continue
                parts.append(line[pos:end])
                if line.startswith(quotechar, end + 1):
                    parts.append(quotechar)
                    pos = end + 2
                    continue
                pos = end + 1
                break
            # text between the closing quote and the delimiter is kept, minus padding
            nxt = line.find(delimiter, pos)
            tail = line[pos:] if nxt == -1 else line[pos:nxt]
            if tail.strip():
                clean = False
            cells.append("".join(parts) + tail.rstrip())
        else:
            nxt = line.find(delimiter, pos)
            cells.append((line[pos:] if nxt == -1 else line[pos:nxt]).strip())
        if nxt == -1:
            return cells, i + 1, clean
        pos = nxt + len(delimiter)


def _records(lines: list[_Line], delimiter: str, quotechar: str) -> Iterator[_Record]:
    """Yield every non-blank record with its 1-based physical line span."""
    i = 0
    while i < len(lines):
        if not lines[i].text.strip():
            i += 1
            continue
        cells, nxt, clean = _read_record(lines, i, delimiter, quotechar)
        record = _Record(first_line=i + 1, last_line=nxt, cells=cells)
        if not clean and nxt - i > 1:
            # a quote ran over line ends it should not have crossed
            yield from _one_per_line(lines, record, delimiter, quotechar)
        else:
            yield record
        i = nxt


def _one_per_line(lines: list[_Line], record: _Record, delimiter: str, quotechar: str) -> Iterator[_Record]:
    """Read every non-blank line spanned by ``record`` as a record of its own."""
    for i in range(record.first_line - 1, record.last_line):
        if lines[i].text.strip():
            cells, _, _ = _read_record(lines, i, delimiter, quotechar, single_line=True)
            yield _Record(first_line=i + 1, last_line=i + 1, cells=cells)


def parse_tabular(text: str, *, delimiter: str = ",", quotechar: str = '"') -> ParsedTable:
    """Parse catalog text into a header plus ordered data rows.

    Parameters
    ----------
    text: full file content
    delimiter: single-character cell separator
    quotechar: quote character used for cells containing the delimiter

    Raises
    ------
    TabularStructureError: fewer than two usable lines, or no known column in the header
    """
    if text.startswith(_BOM):
        text = text[len(_BOM):]

    lines = _physical_lines(text)
    records = list(_records(lines, delimiter, quotechar))
    if len(records) < 2:
        raise TabularStructureError("file is empty or has no data rows (header plus at least one row required)")

    header = [cell.strip().replace(quotechar, "") for cell in records[0].cells]
    if not KNOWN_COLUMNS.intersection(header):
        raise TabularStructureError(f"header has no recognised catalog columns: {header}")

    table = ParsedTable(
        header=header,
        unknown_columns=[h for h in header if h and h not in KNOWN_COLUMNS],
    )
    width = len(header)
    for record in records[1:]:
        # a multi-line record of the wrong width ran over its neighbours
        if record.last_line > record.first_line and len(record.cells) != width:
            pieces = list(_one_per_line(lines, record, delimiter, quotechar))
        else:
            pieces = [record]
        for piece in pieces:
            if len(piece.cells) != width:
                table.rows.append(
                    MalformedLine(line_number=piece.first_line, expected_cells=width, found_cells=len(piece.cells))
                )
                continue
            table.rows.append(RawRow(line_number=piece.first_line, values=dict(zip(header, piece.cells))))
    return table
