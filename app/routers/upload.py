# =============================================================================
# app/routers/upload.py - File Upload Pipeline
# =============================================================================
# Handles CSV file uploads: validation, parsing, and attaching the dataset
# to the session's conversation.
#
# Rejections (wrong type, too large, empty) are returned as structured
# errors whose `detail` is the text shown in the upload area.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, File, UploadFile
from pydantic import BaseModel, Field

from app.dependencies import SessionDep
from core.models.chat import Message
from core.models.dataset import FileMeta, TabularDataset
from lib.ingestor import parse_tabular, validate_upload

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Response Models
# =============================================================================

class UploadResponse(BaseModel):
    """Result of a successful upload."""
    session_id: str
    dataset: TabularDataset
    preview: list[dict[str, str]] = Field(
        default_factory=list,
        description="Preview rows keyed by header, missing cells as empty strings"
    )
    messages: list[Message] = Field(
        default_factory=list,
        description="Messages appended to the conversation by this upload"
    )


# =============================================================================
# Endpoints
# =============================================================================

@router.post("/{session_id}/upload", response_model=UploadResponse)
async def upload_file(
    session: SessionDep,
    file: Annotated[UploadFile, File(description="CSV file to upload")],
):
    """
    Upload a CSV file to a session.

    This endpoint:
    1. Validates the file (extension or content type, size)
    2. Parses the header and a preview of the rows
    3. Attaches the dataset to the conversation (replacing any earlier one)
    """
    filename = file.filename or "data.csv"

    # Check type and declared size before reading the body
    if file.size is not None:
        validate_upload(FileMeta(filename=filename, size_bytes=file.size, content_type=file.content_type))

    content = await file.read()
    meta = FileMeta(filename=filename, size_bytes=len(content), content_type=file.content_type)

    logger.info(f"Processing upload: {filename} ({len(content)} bytes)")

    text = content.decode("utf-8-sig", errors="replace")
    dataset = parse_tabular(text, meta)

    messages = session.engine.record_upload(dataset)

    return UploadResponse(
        session_id=session.id,
        dataset=dataset,
        preview=dataset.to_records(),
        messages=messages,
    )
