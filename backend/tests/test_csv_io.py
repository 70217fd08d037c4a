"""
Unit tests for CSV parsing and serialization helpers.
"""

import pytest

from tablefix.services.csv_io import (
    TableShapeError,
    normalize_table,
    parse_csv,
    table_to_csv,
    unique_field_names,
)


class TestParseCsv:

    def test_everything_stays_text(self):
        table = parse_csv("code,flag,note\n007,NULL,\n")

        assert table == [["code", "flag", "note"], ["007", "NULL", ""]]

    def test_blank_lines_skipped(self):
        assert parse_csv("a\n1\n\n\n2\n") == [["a"], ["1"], ["2"]]

    def test_whitespace_only_lines_kept(self):
        table = parse_csv("name\nAnn\n   \nBob\n")

        assert table == [["name"], ["Ann"], ["   "], ["Bob"]]

    def test_whitespace_only_line_in_wide_table_is_padded(self):
        table = parse_csv("a,b\n \t\n1,2\n")

        assert table == [["a", "b"], [" \t", ""], ["1", "2"]]

    def test_whitespace_inside_quoted_field_untouched(self):
        table = parse_csv('a,b\n"x\n   \ny",2\n')

        assert table == [["a", "b"], ["x\n   \ny", "2"]]

    def test_quoted_fields(self):
        table = parse_csv('a,b\n"x, y","line\nbreak"\n')

        assert table == [["a", "b"], ["x, y", "line\nbreak"]]

    def test_surrounding_whitespace_kept(self):
        assert parse_csv("a\n  x  \n") == [["a"], ["  x  "]]

    @pytest.mark.parametrize("text", [None, "", "   ", "\n\n"])
    def test_empty_text(self, text):
        assert parse_csv(text) == []

    def test_short_rows_padded(self):
        assert parse_csv("a,b,c\n1\n") == [["a", "b", "c"], ["1", "", ""]]

    def test_long_rows_rejected(self):
        with pytest.raises(TableShapeError):
            parse_csv("a,b\n1,2\n3,4,5\n")


class TestTableToCsv:

    def test_basic(self):
        assert table_to_csv([["a", "b"], ["1", "2"]]) == "a,b\n1,2\n"

    def test_quotes_when_needed(self):
        assert table_to_csv([["a", "b"], ["x, y", "2"]]) == 'a,b\n"x, y",2\n'

    def test_header_only(self):
        assert table_to_csv([["a", "b"]]) == "a,b\n"

    def test_empty(self):
        assert table_to_csv([]) == ""
        assert table_to_csv(None) == ""

    def test_duplicate_column_names_allowed(self):
        assert table_to_csv([["a", "a"], ["1", "2"]]) == "a,a\n1,2\n"

    def test_parse_of_output_gives_back_table(self):
        table = [["name", "note"], ["Ann", 'said "hi", left'], ["Bo", ""]]

        assert parse_csv(table_to_csv(table)) == table


class TestNormalizeTable:

    def test_pads_and_copies(self):
        table = [["a", "b"], ["1"]]

        normalized = normalize_table(table)

        assert normalized == [["a", "b"], ["1", ""]]
        assert table == [["a", "b"], ["1"]]

    def test_rejects_wide_rows_with_line_number(self):
        with pytest.raises(TableShapeError, match="Row 2 has 3 cells but the header has 2"):
            normalize_table([["a", "b"], ["1", "2", "3"]])


class TestUniqueFieldNames:

    def test_no_duplicates_unchanged(self):
        assert unique_field_names(["a", "b"]) == ["a", "b"]

    def test_suffixes_added(self):
        assert unique_field_names(["id", "name", "id", "id"]) == ["id", "name", "id_1", "id_2"]

    def test_existing_suffix_names_skipped(self):
        assert unique_field_names(["id", "id_1", "id"]) == ["id", "id_1", "id_2"]
