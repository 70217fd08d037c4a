"""
Positional Cleaner - fill, repair and dedupe a table by column role.

Unlike the profiler, this cleaner CHANGES data. Each column is assigned a
role (numeric, email, free text) by index or header name, and every data
cell is checked against it:

    1. Blank cell                    → schema.missing_fill ("0")
    2. Email column, not an email    → random plausible email
    3. Numeric column, not a number  → random integer in [random_min, random_max]
    4. Anything else                 → unchanged

After repair, exact duplicate rows are removed (first occurrence wins).
The header is never altered.

Replacement values are random. Pass `rng` (anything with choice() and
randint(), e.g. random.Random(42)) to make them reproducible.
"""

import logging
import random
import re
from typing import Dict, List, Optional

import numpy as np

from tablefix.models.schemas import (
    ColumnRole,
    CleanResult,
    PositionalSchema,
    Table,
    DEFAULT_POSITIONAL_SCHEMA,
)
from tablefix.services.csv_io import normalize_table


logger = logging.getLogger(__name__)


# Local part, "@", and a domain with at least one dot; no whitespace anywhere
EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')

# Prefixed integer literals accepted by generic numeric coercion (unsigned only)
PREFIXED_INT_PATTERN = re.compile(r'^0([xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)$')


# ============================================
# Cell Validation
# ============================================

def is_email(value: str) -> bool:
    return bool(EMAIL_PATTERN.match(value))


def is_numeric(value: str) -> bool:
    """
    Check whether a cell coerces to a number the way a browser would.

    Surrounding whitespace is ignored and whitespace-only text counts as
    zero. Decimal, exponent, "Infinity" and 0x/0o/0b forms are numbers;
    "NaN", "inf", digit separators ("1_000") and non-ASCII digits ("١٢")
    are not.
    """
    text = value.strip()
    if not text:
        return True
    if PREFIXED_INT_PATTERN.match(text):
        return True
    if "_" in text or not text.isascii():
        return False

    unsigned = text.lstrip("+-")
    if unsigned.lower() in ("inf", "infinity", "nan") and unsigned != "Infinity":
        return False

    try:
        number = float(text)
    except ValueError:
        return False
    return not np.isnan(number)


# ============================================
# Replacement Values
# ============================================

def random_email(schema: PositionalSchema, rng=None) -> str:
    """Build "{name}{0-99}@{domain}" from the schema's name and domain pools."""
    rng = rng if rng is not None else random
    name = rng.choice(schema.email_names)
    domain = rng.choice(schema.email_domains)
    return f"{name}{rng.randint(0, 99)}@{domain}"


def random_number(schema: PositionalSchema, rng=None) -> str:
    rng = rng if rng is not None else random
    return str(rng.randint(schema.random_min, schema.random_max))


# ============================================
# Schema Resolution
# ============================================

def resolve_roles(schema: PositionalSchema, header: List[str]) -> Dict[int, ColumnRole]:
    """
    Turn the schema's role keys into column indexes for this header.

    Header names take precedence over numeric-looking strings, so a column
    literally called "3" is matched by name. Keys that match nothing are
    skipped with a warning.
    """
    resolved: Dict[int, ColumnRole] = {}
    for key, role in schema.roles.items():
        if isinstance(key, str) and key in header:
            index = header.index(key)
        elif isinstance(key, int):
            index = key
        elif key.strip().isdigit():
            index = int(key)
        else:
            logger.warning("Ignoring role for unknown column %r", key)
            continue

        if not 0 <= index < len(header):
            logger.warning("Ignoring role for column index %d (table has %d columns)", index, len(header))
            continue
        resolved[index] = role
    return resolved


# ============================================
# Main Cleaning Function
# ============================================

def clean_table(
    table: Optional[Table],
    schema: Optional[PositionalSchema] = None,
    rng=None,
) -> CleanResult:
    """
    Fill blanks, repair out-of-role cells and drop duplicate rows.

    Args:
        table: Header row followed by data rows. Not modified.
        schema: Column roles and replacement settings
                (defaults to columns 2/4 numeric, 3 email)
        rng: Random source with choice() and randint(); defaults to the
             global `random` module

    Returns:
        CleanResult with the cleaned table and a change log holding one
        line per kind of change that actually happened

    Raises:
        TableShapeError: a data row is wider than the header
    """
    if not table:
        return CleanResult(cleaned=[], change_log=[])

    if schema is None:
        schema = DEFAULT_POSITIONAL_SCHEMA

    table = normalize_table(table)
    header, rows = table[0], table[1:]
    roles = resolve_roles(schema, header)

    missing_count = 0
    invalid_count = 0
    repaired_rows = []

    for row in rows:
        repaired = []
        for col_index, val in enumerate(row):
            role = roles.get(col_index, ColumnRole.FREE_TEXT)

            if val == "":
                missing_count += 1
                repaired.append(schema.missing_fill)
            elif role == ColumnRole.EMAIL and not is_email(val):
                invalid_count += 1
                repaired.append(random_email(schema, rng))
            elif role == ColumnRole.NUMERIC and not is_numeric(val):
                invalid_count += 1
                repaired.append(random_number(schema, rng))
            else:
                repaired.append(val)
        repaired_rows.append(repaired)

    change_log = []
    if missing_count > 0:
        change_log.append(f"Replaced {missing_count} missing value(s) with {schema.missing_fill}")
    if invalid_count > 0:
        change_log.append(f"Replaced {invalid_count} invalid value(s) with random valid values")

    # Tuples compare cell by cell, so ["a,b"] never matches ["a", "b"]
    seen = set()
    unique_rows = []
    for row in repaired_rows:
        key = tuple(row)
        if key not in seen:
            seen.add(key)
            unique_rows.append(row)

    removed = len(repaired_rows) - len(unique_rows)
    if removed > 0:
        change_log.append(f"Removed {removed} duplicate row(s)")

    logger.info(
        "Cleaned %d rows: %d missing filled, %d invalid repaired, %d duplicates removed",
        len(rows), missing_count, invalid_count, removed,
    )

    return CleanResult(cleaned=[list(header)] + unique_rows, change_log=change_log)
