# =============================================================================
# lib/ingestor.py - Tabular Ingestor
# =============================================================================
# Turns raw delimited text into a TabularDataset (headers + preview rows).
#
# The parse is deliberately shallow: the assistant only needs the column
# names and a handful of rows to talk about the data.
#
# Rules:
# - the file must look like CSV (extension OR declared content type)
# - the declared size must be within the configured ceiling
# - blank lines are dropped; the first remaining line is the header
# - every cell is trimmed and has its double quotes removed
# - rows are kept positionally: short rows are not padded, long rows keep
#   their extra cells
#
# Usage:
#   from lib.ingestor import parse_tabular
#   dataset = parse_tabular(text, FileMeta(filename="sales.csv", size_bytes=1024))
# =============================================================================

import logging

from app.config import settings
from app.exceptions import EmptyFileError, FileTooLargeError, UnsupportedFileTypeError
from core.models.dataset import FileMeta, TabularDataset

logger = logging.getLogger(__name__)

RECORD_SEPARATOR = "\n"
FIELD_SEPARATOR = ","
QUOTE_CHAR = '"'


def _split_cells(line: str) -> tuple[str, ...]:
    """Split one line into cleaned cells."""
    return tuple(cell.strip().replace(QUOTE_CHAR, "") for cell in line.split(FIELD_SEPARATOR))


def _has_allowed_type(meta: FileMeta, extensions: list[str], content_types: list[str]) -> bool:
    """Check the extension first, then the declared content type."""
    filename = meta.filename.lower()
    if any(filename.endswith(ext) for ext in extensions):
        return True
    return (meta.content_type or "").lower() in content_types


def validate_upload(
    meta: FileMeta,
    max_size_bytes: int | None = None,
) -> None:
    """
    Reject files that are not CSV or are too large.

    Args:
        meta: Upload metadata
        max_size_bytes: Size ceiling (default from settings)

    Raises:
        UnsupportedFileTypeError: Neither extension nor content type is allowed
        FileTooLargeError: Declared size is above the ceiling
    """
    extensions = settings.allowed_extensions_list
    if not _has_allowed_type(meta, extensions, settings.allowed_content_types_list):
        raise UnsupportedFileTypeError(meta.filename, extensions)

    ceiling = settings.max_upload_size_bytes if max_size_bytes is None else max_size_bytes
    if meta.size_bytes > ceiling:
        max_mb = max(1, ceiling // (1024 * 1024))
        raise FileTooLargeError(meta.size_bytes, max_mb)


def parse_tabular(
    raw_text: str,
    meta: FileMeta,
    max_size_bytes: int | None = None,
    preview_rows: int | None = None,
) -> TabularDataset:
    """
    Parse delimited text into a TabularDataset.

    Args:
        raw_text: Full file content as text
        meta: Filename, declared size and optional content type
        max_size_bytes: Size ceiling (default from settings)
        preview_rows: How many data rows to keep (default from settings)

    Returns:
        TabularDataset with headers and a bounded prefix of rows

    Raises:
        UnsupportedFileTypeError: File is not CSV
        FileTooLargeError: File is above the size ceiling
        EmptyFileError: File has no non-blank lines
    """
    validate_upload(meta, max_size_bytes)

    limit = settings.PREVIEW_ROW_LIMIT if preview_rows is None else preview_rows
    lines = [line for line in raw_text.split(RECORD_SEPARATOR) if line.strip()]

    if not lines:
        raise EmptyFileError(meta.filename)

    headers = _split_cells(lines[0])
    rows = tuple(_split_cells(line) for line in lines[1:1 + limit])

    dataset = TabularDataset(
        headers=headers,
        rows=rows,
        source_name=meta.filename,
        size_bytes=meta.size_bytes,
        row_count=len(lines) - 1,
    )

    logger.info(
        f"Parsed {meta.filename}: {len(headers)} columns, "
        f"{dataset.row_count} rows ({len(rows)} kept for preview)"
    )
    return dataset
