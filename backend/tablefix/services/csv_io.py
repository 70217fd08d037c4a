"""
CSV I/O - converting between CSV text and tables of string cells.

Both cleaners work on a "table": a list of rows, each a list of strings,
with row 0 holding the header. This module is the only place that touches
the CSV format itself.

ROW WIDTH POLICY:
─────────────────
The header defines the width of the table.
• Short rows are padded with empty strings (they then show up as missing)
• Long rows are rejected with TableShapeError, because there is no column
  to put the extra cells in

Everything is read as text. pandas is told not to guess dtypes or NaN
markers, so "NULL", "007" and "" come back exactly as written.
"""

import io
import logging
from typing import List, Optional

import pandas as pd

from tablefix.models.schemas import Table


logger = logging.getLogger(__name__)


class TableShapeError(ValueError):
    """Raised when CSV text or a table does not fit a rectangular header layout."""


def _quote_whitespace_lines(text: str) -> str:
    """
    Wrap whitespace-only lines in quotes so pandas reads them as a cell.

    pandas' skip_blank_lines drops these along with truly empty lines.
    Lines inside a quoted multi-line field are left alone.
    """
    lines = []
    in_quotes = False
    for line in io.StringIO(text, newline=""):
        body = line.rstrip("\r\n")
        if not in_quotes and body and not body.strip():
            line = f'"{body}"' + line[len(body):]
        lines.append(line)
        # A doubled "" escape leaves the quote state unchanged
        if body.count('"') % 2:
            in_quotes = not in_quotes
    return "".join(lines)


def parse_csv(text: Optional[str]) -> Table:
    """
    Parse CSV text into a table of strings.

    Empty lines are skipped. A line holding only whitespace is kept as a
    row whose first cell is that whitespace. Empty or whitespace-only text
    yields an empty table rather than an error.

    Raises:
        TableShapeError: a data line has more fields than the header, or
            the text cannot be tokenized as CSV
    """
    if not text or not text.strip():
        return []

    try:
        frame = pd.read_csv(
            io.StringIO(_quote_whitespace_lines(text)),
            header=None,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except pd.errors.EmptyDataError:
        return []
    except pd.errors.ParserError as e:
        raise TableShapeError(f"Invalid CSV format: {e}") from e

    # Short lines come back as NaN in the trailing columns
    table = frame.fillna("").values.tolist()
    logger.debug("Parsed CSV into %d rows x %d columns", len(table), frame.shape[1])
    return table


def normalize_table(table: Optional[Table]) -> Table:
    """
    Return a copy of the table with every row as wide as the header.

    Raises:
        TableShapeError: a row is wider than the header
    """
    if not table:
        return []

    width = len(table[0])
    normalized = [list(table[0])]
    for line_number, row in enumerate(table[1:], start=2):
        if len(row) > width:
            raise TableShapeError(
                f"Row {line_number} has {len(row)} cells but the header has {width}"
            )
        normalized.append(list(row) + [""] * (width - len(row)))
    return normalized


def table_to_csv(table: Optional[Table]) -> str:
    """Serialize a table (header first) to CSV text with "\\n" line endings."""
    if not table:
        return ""

    table = normalize_table(table)
    frame = pd.DataFrame(table[1:], columns=table[0], dtype=str)
    return frame.to_csv(index=False, lineterminator="\n")


def unique_field_names(header: List[str]) -> List[str]:
    """
    Make header names unique so rows can be keyed by field name.

    The first occurrence keeps its name; later ones get _1, _2, ... suffixes,
    skipping any name already taken.
        >>> unique_field_names(["id", "name", "id"])
        ['id', 'name', 'id_1']
    """
    taken = set(header)
    seen = set()
    fields = []
    for name in header:
        if name not in seen:
            seen.add(name)
            fields.append(name)
            continue
        suffix = 1
        while f"{name}_{suffix}" in taken or f"{name}_{suffix}" in seen:
            suffix += 1
        renamed = f"{name}_{suffix}"
        seen.add(renamed)
        fields.append(renamed)
    return fields
