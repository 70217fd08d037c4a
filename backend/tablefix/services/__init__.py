"""Services package for business logic."""

from tablefix.services.csv_io import (
    TableShapeError,
    parse_csv,
    table_to_csv,
    normalize_table,
)
from tablefix.services.positional_cleaner import clean_table, is_email, is_numeric
from tablefix.services.profiler import (
    profile_csv,
    profile_table,
    detect_type,
    infer_column_type,
)

__all__ = [
    # CSV I/O
    "TableShapeError",
    "parse_csv",
    "table_to_csv",
    "normalize_table",
    # Positional cleaner
    "clean_table",
    "is_email",
    "is_numeric",
    # Profiler
    "profile_csv",
    "profile_table",
    "detect_type",
    "infer_column_type",
]
