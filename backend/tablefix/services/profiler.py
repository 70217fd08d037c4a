"""
Profiler Service - Column Type Inference and Row-Level Issue Reporting

This module is the "analyze" half of the system. It never repairs or drops
anything: the only change it makes is trimming whitespace from every cell.
It answers "what looks wrong, and where?"

HOW IT WORKS:
─────────────
1. Parse the CSV text; the first line supplies the field names.
2. Infer a type for each column from the first `sample_size` rows
   (the most frequent detect_type() result; on a tie, whichever type
   appeared first in the sample).
3. Walk every data row and flag:
   • Duplicate row     - identical (trimmed) to an earlier row
   • Missing value     - blank, "null" or "undefined" (any case)
   • Invalid type      - detected type differs from the column type
                         (never flagged for "string" columns)
   • Duplicate value   - value already seen earlier in the same column

Row numbers in the report are CSV line numbers, so the first data row is
row 2.

OUTPUT FORMAT:
──────────────
profile_csv() returns a ProfileReport containing:
- cleaned_csv: the trimmed table, same rows and columns as the input
- issues: one RowIssue per row that has findings, in row order
- column_types: inferred ColumnType per column
- issue_counts: totals per category
"""

import json
import logging
import re
from collections import Counter
from typing import Dict, List, Optional

import numpy as np
import pandas as pd

from tablefix.models.schemas import (
    ColumnType,
    Finding,
    IssueCategory,
    IssueCounts,
    ProfileConfig,
    ProfileReport,
    RowIssue,
    Table,
    DEFAULT_PROFILE_CONFIG,
)
from tablefix.services.csv_io import (
    normalize_table,
    parse_csv,
    table_to_csv,
    unique_field_names,
)


logger = logging.getLogger(__name__)


# ============================================
# Value Classification
# ============================================

MISSING_MARKERS = {"", "null", "undefined"}

BOOLEAN_VALUES = {"true", "false"}

# A value must look like a date before pandas is asked to parse it.
# Bare numbers like "1" or "2023" are deliberately not dates.
DATE_PATTERNS = [
    # 2023-01-15, 2023/01/15, 2023-01-15T10:30:00Z, 2023-01-15 10:30
    re.compile(r'^\d{4}[-/.]\d{1,2}[-/.]\d{1,2}([T ]\d{1,2}:\d{2}(:\d{2}(\.\d+)?)?(Z|[+-]\d{2}:?\d{2})?)?$'),
    # 01/15/2023, 15-01-2023, 1.5.23
    re.compile(r'^\d{1,2}[-/.]\d{1,2}[-/.]\d{2,4}$'),
    # March 1, 2023 / Mar 1 2023
    re.compile(r'^[A-Za-z]{3,9}\.? \d{1,2},? \d{4}$'),
    # 1 March 2023 / 1 Mar, 2023
    re.compile(r'^\d{1,2} [A-Za-z]{3,9}\.?,? \d{4}$'),
]


def is_missing(value: Optional[str]) -> bool:
    """True for None, blank text, or "null"/"undefined" in any case."""
    if value is None:
        return True
    return value.strip().lower() in MISSING_MARKERS


def looks_like_date(text: str) -> bool:
    if not any(pattern.match(text) for pattern in DATE_PATTERNS):
        return False
    try:
        pd.to_datetime(text)
    except (ValueError, TypeError, OverflowError):
        return False
    return True


def looks_like_number(text: str) -> bool:
    # float() also accepts digit separators and non-ASCII digits
    if "_" in text or not text.isascii():
        return False
    try:
        number = float(text)
    except ValueError:
        return False
    return bool(np.isfinite(number))


def looks_like_json(text: str) -> bool:
    """Only objects and arrays count; bare JSON scalars do not."""
    try:
        parsed = json.loads(text)
    except ValueError:
        return False
    return isinstance(parsed, (dict, list))


def detect_type(value: Optional[str]) -> ColumnType:
    """
    Classify a single cell. The first matching rule wins:

        missing marker  → null
        true / false    → boolean
        date            → date
        finite number   → number
        object or array → json
        anything else   → string

    Surrounding whitespace is ignored.
    """
    if is_missing(value):
        return ColumnType.NULL

    text = value.strip()
    if text.lower() in BOOLEAN_VALUES:
        return ColumnType.BOOLEAN
    if looks_like_date(text):
        return ColumnType.DATE
    if looks_like_number(text):
        return ColumnType.NUMBER
    if looks_like_json(text):
        return ColumnType.JSON
    return ColumnType.STRING


def infer_column_type(values: List[Optional[str]]) -> ColumnType:
    """
    Return the most frequent detected type among `values`.

    Ties go to the type that appears first in `values`. An empty sample
    is typed as null.
    """
    if not values:
        return ColumnType.NULL
    counts = Counter(map(detect_type, values))
    return counts.most_common(1)[0][0]


def infer_column_types(
    records: List[Dict[str, str]],
    fields: List[str],
    sample_size: int = 50,
) -> Dict[str, ColumnType]:
    sample = records[:sample_size]
    return {
        field: infer_column_type([record[field] for record in sample])
        for field in fields
    }


# ============================================
# Row Scanning
# ============================================

def profile_table(
    table: Optional[Table],
    config: Optional[ProfileConfig] = None,
) -> ProfileReport:
    """
    Profile an already-parsed table (header row first).

    Args:
        table: Header row followed by data rows. Not modified.
        config: Profiling tunables (sample size)

    Returns:
        ProfileReport with the trimmed CSV, per-row issues, column types
        and issue totals

    Raises:
        TableShapeError: a data row is wider than the header
    """
    if not table:
        return ProfileReport()

    if config is None:
        config = DEFAULT_PROFILE_CONFIG

    table = normalize_table(table)
    fields = unique_field_names(table[0])
    records = [dict(zip(fields, row)) for row in table[1:]]

    column_types = infer_column_types(records, fields, config.sample_size)
    logger.debug("Inferred column types: %s", {f: t.value for f, t in column_types.items()})

    issues: List[RowIssue] = []
    counts = IssueCounts()
    seen_rows = set()
    seen_values: Dict[str, set] = {field: set() for field in fields}

    for index, record in enumerate(records):
        findings: List[Finding] = []
        trimmed = {field: record[field].strip() for field in fields}

        # Keyed on trimmed values: rows differing only in whitespace are duplicates
        row_key = json.dumps([trimmed[field] for field in fields])
        if row_key in seen_rows:
            findings.append(Finding(category=IssueCategory.DUPLICATE_ROW, message="Duplicate row"))
            counts.duplicate_row += 1
        else:
            seen_rows.add(row_key)

        for field in fields:
            val = trimmed[field]
            expected_type = column_types[field]

            if is_missing(val):
                findings.append(Finding(
                    category=IssueCategory.MISSING,
                    message=f'Missing value in "{field}"',
                ))
                counts.missing += 1
            else:
                actual_type = detect_type(val)
                if actual_type != expected_type and expected_type != ColumnType.STRING:
                    findings.append(Finding(
                        category=IssueCategory.INVALID_TYPE,
                        message=f'Expected {expected_type.value} but got {actual_type.value} in "{field}"',
                    ))
                    counts.invalid_data += 1

                if val in seen_values[field]:
                    findings.append(Finding(
                        category=IssueCategory.DUPLICATE_VALUE,
                        message=f'Duplicate value "{val}" in "{field}"',
                    ))
                    counts.duplicate_value += 1
                else:
                    seen_values[field].add(val)

            record[field] = val

        if findings:
            issues.append(RowIssue(
                row=index + 2,
                issues=[finding.message for finding in findings],
                findings=findings,
            ))

    cleaned_rows = [[record[field] for field in fields] for record in records]
    cleaned_csv = table_to_csv([fields] + cleaned_rows)

    logger.info(
        "Profiled %d rows x %d columns: %d missing, %d invalid, %d duplicate values, %d duplicate rows",
        len(records), len(fields), counts.missing, counts.invalid_data,
        counts.duplicate_value, counts.duplicate_row,
    )

    return ProfileReport(
        cleaned_csv=cleaned_csv,
        issues=issues,
        column_types=column_types,
        issue_counts=counts,
    )


def profile_csv(text: Optional[str], config: Optional[ProfileConfig] = None) -> ProfileReport:
    """
    Profile raw CSV text whose first line is the header.

    This is the main entry point for the analyze workflow. Empty lines are
    skipped, whitespace-only lines are rows; empty text yields an empty report.

    Raises:
        TableShapeError: the text is not rectangular CSV
    """
    return profile_table(parse_csv(text), config)
