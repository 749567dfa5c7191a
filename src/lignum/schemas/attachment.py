# src/lignum/schemas/attachment.py
"""Attachment metadata schemas."""

from datetime import datetime

from pydantic import Field

from .common import CamelModel


class AttachmentCreate(CamelModel):
    """Metadata registered after the upload store has saved the file."""

    card_id: int
    file_name: str = Field(min_length=1)
    stored_name: str = Field(min_length=1)
    mime_type: str = Field(min_length=1)


class AttachmentResponse(CamelModel):
    """Attachment metadata as stored."""

    id: int
    card_id: int
    file_name: str
    stored_name: str
    mime_type: str
    created_at: datetime
