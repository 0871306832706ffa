# =============================================================================
# core/models/dataset.py - Uploaded Tabular Data Schemas
# =============================================================================
# These models describe what the ingestor produces from an uploaded file:
# - FileMeta: what the upload surface tells us about the file
# - TabularDataset: headers plus a bounded preview of rows
# - ParseErrorKind: why a file was rejected
#
# A TabularDataset is immutable once parsed. A new upload replaces it.
# =============================================================================

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ParseErrorKind(str, Enum):
    """
    Reasons the ingestor can reject a file.

    - empty_file: no non-blank lines at all
    - unsupported_type: neither the extension nor the declared type is CSV
    - size_exceeded: declared size is above the configured ceiling
    """
    EMPTY_FILE = "empty_file"
    UNSUPPORTED_TYPE = "unsupported_type"
    SIZE_EXCEEDED = "size_exceeded"


class FileMeta(BaseModel):
    """
    Metadata accompanying raw file text.

    Example:
        {
            "filename": "sales_q1.csv",
            "size_bytes": 20480,
            "content_type": "text/csv"
        }
    """

    filename: str = Field(
        ...,
        min_length=1,
        description="Original filename of the upload"
    )

    size_bytes: int = Field(
        ...,
        ge=0,
        description="Declared size of the file in bytes"
    )

    content_type: str | None = Field(
        default=None,
        description="Declared MIME type, if the upload surface provided one"
    )


class TabularDataset(BaseModel):
    """
    Structured result of parsing delimited text.

    Rows are kept positionally exactly as split: a short row is not padded
    and a long row keeps its extra cells. Use `cell()` or `to_records()` to
    read rows with missing trailing cells treated as empty strings.

    Example:
        {
            "headers": ["date", "sku", "qty"],
            "rows": [["2024-01-01", "A-1", "12"], ["2024-01-02", "A-2"]],
            "source_name": "sales_q1.csv",
            "size_bytes": 20480,
            "row_count": 940
        }
    """

    model_config = ConfigDict(frozen=True)

    headers: tuple[str, ...] = Field(
        ...,
        description="Column names from the first non-blank line"
    )

    rows: tuple[tuple[str, ...], ...] = Field(
        default=(),
        description="Bounded prefix of data rows"
    )

    source_name: str = Field(
        ...,
        description="Filename the dataset was parsed from"
    )

    size_bytes: int = Field(
        default=0,
        ge=0,
        description="Size of the uploaded file in bytes"
    )

    # Number of non-blank data lines in the whole file, not just the preview
    row_count: int = Field(
        default=0,
        ge=0,
        description="Total data rows found in the file"
    )

    def cell(self, row_index: int, column_index: int) -> str:
        """Return one cell, or an empty string when the row is short."""
        row = self.rows[row_index]
        if column_index < len(row):
            return row[column_index]
        return ""

    def to_records(self) -> list[dict[str, str]]:
        """
        Preview rows keyed by header.

        Missing trailing cells become empty strings. Cells beyond the last
        header have no name and are left out here; they are still present
        in `rows`.
        """
        return [
            {header: self.cell(i, j) for j, header in enumerate(self.headers)}
            for i in range(len(self.rows))
        ]

    def describe_schema(self) -> str:
        """Comma-separated header list used when describing the data."""
        return ", ".join(self.headers)
