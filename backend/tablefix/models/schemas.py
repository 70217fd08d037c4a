"""
Pydantic Models for API Request/Response Schemas

This module defines the data structures shared by the cleaning services and
the HTTP layer. Every endpoint uses these schemas for:
- Request validation (ensures required fields are present)
- Response formatting (ensures consistent JSON structure)
- Documentation (auto-generates OpenAPI/Swagger docs)

ORGANIZATION:
─────────────
1. Shared enums - ColumnRole, ColumnType, IssueCategory
2. Positional cleaning schemas - For /clean and /clean/upload
3. Profiling schemas - For /analyze and /analyze/upload
4. Export schemas - For /export

NAMING CONVENTION:
──────────────────
- *Request: Schema for incoming request body
- *Result/*Report: Outgoing payloads, also returned by the services
- Python attributes are snake_case; JSON keys are camelCase via aliases.
  Both spellings are accepted on input.
"""

from typing import Dict, List, Optional, Union
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, model_validator


Table = List[List[str]]


# ============================================
# Shared Enums
# ============================================

class ColumnRole(str, Enum):
    """What the positional cleaner expects a column to hold."""
    NUMERIC = "numeric"
    EMAIL = "email"
    FREE_TEXT = "free_text"


class ColumnType(str, Enum):
    """
    Column types inferred by the profiler.

    Order matters: detect_type() checks them top to bottom, and the first
    match wins.
    """
    NULL = "null"
    BOOLEAN = "boolean"
    DATE = "date"
    NUMBER = "number"
    JSON = "json"
    STRING = "string"


class IssueCategory(str, Enum):
    MISSING = "missing"
    INVALID_TYPE = "invalid_type"
    DUPLICATE_VALUE = "duplicate_value"
    DUPLICATE_ROW = "duplicate_row"


# ============================================
# Positional Cleaning Schemas
# ============================================
# The cleaner used to assume columns 2 and 4 were numeric and column 3 was
# an email. That layout is still the default, but callers can now describe
# their own table.

DEFAULT_COLUMN_ROLES: Dict[Union[int, str], ColumnRole] = {
    2: ColumnRole.NUMERIC,
    3: ColumnRole.EMAIL,
    4: ColumnRole.NUMERIC,
}

DEFAULT_EMAIL_NAMES = ["alice", "bob", "charlie", "dave", "emma", "john", "lisa"]
DEFAULT_EMAIL_DOMAINS = ["example.com", "mail.com", "test.org"]


class PositionalSchema(BaseModel):
    """
    Column layout and replacement settings for the positional cleaner.

    Roles are keyed by zero-based column index or by header name. Columns
    without a role are only checked for blanks.

    Example - a table whose email lives in the "contact" column:
        PositionalSchema(roles={"contact": "email", 1: "numeric"})
    """
    model_config = ConfigDict(populate_by_name=True)

    roles: Dict[Union[int, str], ColumnRole] = Field(
        default_factory=lambda: dict(DEFAULT_COLUMN_ROLES),
        description="Column index or header name -> expected role",
    )
    missing_fill: str = Field("0", alias="missingFill", description="Value written into blank cells")
    random_min: int = Field(20, alias="randomMin", description="Lower bound for synthesized numbers")
    random_max: int = Field(100000, alias="randomMax", description="Upper bound for synthesized numbers")
    email_names: List[str] = Field(
        default_factory=lambda: list(DEFAULT_EMAIL_NAMES),
        alias="emailNames",
        min_length=1,
    )
    email_domains: List[str] = Field(
        default_factory=lambda: list(DEFAULT_EMAIL_DOMAINS),
        alias="emailDomains",
        min_length=1,
    )

    @model_validator(mode="after")
    def check_random_range(self) -> "PositionalSchema":
        if self.random_min > self.random_max:
            raise ValueError(
                f"randomMin ({self.random_min}) must not exceed randomMax ({self.random_max})"
            )
        return self


DEFAULT_POSITIONAL_SCHEMA = PositionalSchema()


class CleanRequest(BaseModel):
    """Request schema for positional cleaning of an already-parsed table."""
    model_config = ConfigDict(populate_by_name=True)

    csv_data: Optional[Table] = Field(None, alias="csvData", description="Header row followed by data rows")
    column_schema: Optional[PositionalSchema] = Field(None, alias="schema", description="Column roles (defaults to 2/4 numeric, 3 email)")


class CleanResult(BaseModel):
    """Cleaned table plus one human-readable line per kind of change."""
    model_config = ConfigDict(populate_by_name=True)

    cleaned: Table = Field(default_factory=list, description="Header followed by surviving rows")
    change_log: List[str] = Field(default_factory=list, alias="changeLog", description="Summary of applied changes")


# ============================================
# Profiling Schemas
# ============================================

class ProfileConfig(BaseModel):
    """Tunables for the profiling cleaner."""
    model_config = ConfigDict(populate_by_name=True)

    sample_size: int = Field(50, alias="sampleSize", ge=1, description="Rows used to infer each column type")


DEFAULT_PROFILE_CONFIG = ProfileConfig()


class AnalyzeRequest(BaseModel):
    """Request schema for profiling raw CSV text."""
    model_config = ConfigDict(populate_by_name=True)

    csv: str = Field("", description="Raw CSV text; first line is the header")
    sample_size: Optional[int] = Field(None, alias="sampleSize", ge=1, description="Override the type-inference sample size")


class Finding(BaseModel):
    """A single tagged issue found in a row."""
    category: IssueCategory
    message: str


class RowIssue(BaseModel):
    """All findings for one data row. `row` is the 1-based line number in the CSV (header is line 1)."""
    row: int = Field(..., description="CSV line number of the row")
    issues: List[str] = Field(default_factory=list, description="Human-readable findings")
    findings: List[Finding] = Field(default_factory=list, description="Findings tagged by category")


class IssueCounts(BaseModel):
    """Aggregate issue counters across the whole table."""
    model_config = ConfigDict(populate_by_name=True)

    missing: int = 0
    invalid_data: int = Field(0, alias="invalidData")
    duplicate_value: int = Field(0, alias="duplicateValue")
    duplicate_row: int = Field(0, alias="duplicateRow")


class ProfileReport(BaseModel):
    """Schema for the complete profiling report."""
    model_config = ConfigDict(populate_by_name=True)

    cleaned_csv: str = Field("", alias="cleanedCSV", description="Whitespace-trimmed CSV, same rows and columns")
    issues: List[RowIssue] = Field(default_factory=list, description="Findings per row, in row order")
    column_types: Dict[str, ColumnType] = Field(default_factory=dict, alias="columnTypes", description="Inferred type per column")
    issue_counts: IssueCounts = Field(default_factory=IssueCounts, alias="issueCounts", description="Totals per issue category")


# ============================================
# Export Schemas
# ============================================

class ExportRequest(BaseModel):
    """Request schema for downloading a table as CSV."""
    model_config = ConfigDict(populate_by_name=True)

    csv_data: Table = Field(..., alias="csvData", description="Header row followed by data rows")
    filename: str = Field("cleaned_data.csv", description="Suggested download filename")
