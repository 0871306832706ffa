# =============================================================================
# tests/test_ingestor.py - Tabular Ingestor Tests
# =============================================================================
# Tests for parse_tabular:
# - header and preview row extraction
# - positional handling of short and long rows
# - type, size and empty-file rejections
# =============================================================================

import pytest

from app.exceptions import EmptyFileError, FileTooLargeError, UnsupportedFileTypeError
from core.models.dataset import FileMeta, ParseErrorKind
from lib.ingestor import parse_tabular, validate_upload


def _meta(text: str, filename: str = "sales.csv", content_type: str | None = None) -> FileMeta:
    return FileMeta(filename=filename, size_bytes=len(text.encode()), content_type=content_type)


# =============================================================================
# Parsing
# =============================================================================

class TestParseTabular:
    """Test header and row extraction."""

    def test_headers_from_first_line(self, sample_dataset):
        """First non-blank line becomes the headers."""
        assert sample_dataset.headers == ("date", "sku", "qty")
        assert sample_dataset.source_name == "sales.csv"

    def test_blank_lines_dropped_and_quotes_removed(self, sample_dataset):
        """Blank lines are skipped and double quotes stripped from cells."""
        assert sample_dataset.rows[0] == ("2024-01-01", "A-100", "12")
        assert sample_dataset.rows[1] == ("2024-01-02", "A-101", "7")

    def test_preview_is_bounded(self, sample_csv_text):
        """Only the configured number of rows is kept, total is still counted."""
        dataset = parse_tabular(sample_csv_text, _meta(sample_csv_text), preview_rows=2)

        assert len(dataset.rows) == 2
        assert dataset.row_count == 6

    def test_default_preview_limit_is_five(self, sample_dataset):
        """Default preview keeps five data rows."""
        assert len(sample_dataset.rows) == 5

    def test_short_row_kept_positionally(self, sample_dataset):
        """A short row is not padded, but reads as empty through cell()."""
        assert sample_dataset.rows[2] == ("2024-01-03", "A-102")
        assert sample_dataset.cell(2, 2) == ""
        assert sample_dataset.to_records()[2]["qty"] == ""

    def test_long_row_keeps_extra_cells(self, sample_dataset):
        """Extra cells are preserved in rows."""
        assert sample_dataset.rows[3] == ("2024-01-04", "A-103", "3", "promo")
        assert "promo" not in sample_dataset.to_records()[3].values()

    def test_header_whitespace_trimmed(self):
        """Cells are trimmed, including Windows line endings."""
        text = ' "date" , sku ,qty\r\n1,2,3\r\n'
        dataset = parse_tabular(text, _meta(text))

        assert dataset.headers == ("date", "sku", "qty")
        assert dataset.rows == (("1", "2", "3"),)

    def test_header_only_file(self):
        """A file with only a header parses with no rows."""
        text = "date,sku,qty\n"
        dataset = parse_tabular(text, _meta(text))

        assert dataset.headers == ("date", "sku", "qty")
        assert dataset.rows == ()
        assert dataset.row_count == 0

    def test_reparse_is_structurally_equal(self, sample_csv_text):
        """Parsing the same text twice gives equal, separate datasets."""
        first = parse_tabular(sample_csv_text, _meta(sample_csv_text))
        second = parse_tabular(sample_csv_text, _meta(sample_csv_text))

        assert first == second
        assert first is not second

    def test_dataset_is_immutable(self, sample_dataset):
        """Parsed datasets cannot be modified."""
        with pytest.raises(Exception):
            sample_dataset.source_name = "other.csv"


# =============================================================================
# Rejections
# =============================================================================

class TestRejections:
    """Test type, size and empty-file checks."""

    def test_empty_file(self):
        """Whitespace-only content is an empty file."""
        text = "\n   \n\n"
        with pytest.raises(EmptyFileError) as exc_info:
            parse_tabular(text, _meta(text))

        assert exc_info.value.kind == ParseErrorKind.EMPTY_FILE
        assert exc_info.value.status_code == 400

    def test_unsupported_extension(self):
        """Non-CSV extension without a CSV content type is refused."""
        text = "a,b\n1,2\n"
        with pytest.raises(UnsupportedFileTypeError) as exc_info:
            parse_tabular(text, _meta(text, filename="report.xlsx"))

        assert exc_info.value.kind == ParseErrorKind.UNSUPPORTED_TYPE
        assert exc_info.value.message == "Please upload a CSV file only."

    def test_content_type_accepted_without_extension(self):
        """A declared text/csv type is enough."""
        text = "a,b\n1,2\n"
        dataset = parse_tabular(text, _meta(text, filename="export", content_type="text/csv"))

        assert dataset.headers == ("a", "b")

    def test_extension_is_case_insensitive(self):
        """SALES.CSV is a CSV file."""
        text = "a,b\n"
        assert parse_tabular(text, _meta(text, filename="SALES.CSV")).headers == ("a", "b")

    def test_size_exceeded(self):
        """Declared size above the ceiling is refused before parsing."""
        meta = FileMeta(filename="big.csv", size_bytes=11 * 1024 * 1024)

        with pytest.raises(FileTooLargeError) as exc_info:
            validate_upload(meta)

        assert exc_info.value.kind == ParseErrorKind.SIZE_EXCEEDED
        assert exc_info.value.status_code == 413
        assert "10MB" in exc_info.value.message

    def test_custom_size_ceiling(self):
        """The ceiling can be passed explicitly."""
        text = "a,b\n1,2\n"
        with pytest.raises(FileTooLargeError):
            parse_tabular(text, _meta(text), max_size_bytes=4)
