"""Request/response schemas for the documents endpoints."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ContentKind(str, Enum):
    """The closed set of content kinds the admission pipeline accepts."""

    PDF = "pdf"
    DOCX = "docx"
    PLAIN_TEXT = "txt"


class DocumentSummary(BaseModel):
    """Document metadata for listings (no extracted text)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    filename: str = Field(..., description="Generated storage filename")
    original_name: str
    file_type: ContentKind
    file_size: int = Field(..., ge=0, description="Uploaded size in bytes")
    chunk_count: int = Field(default=0, ge=0)
    external_index_id: str | None = None
    uploaded_by: str
    uploaded_at: datetime


class DocumentDetail(DocumentSummary):
    """Full document record including the normalized text."""

    content: str


class DocumentResponse(BaseModel):
    success: bool = True
    data: DocumentDetail


class DocumentsListResponse(BaseModel):
    """Response for GET /documents (admin only), newest first."""

    success: bool = True
    data: list[DocumentSummary]


class DeleteResponse(BaseModel):
    success: bool = True
    message: str = "Document deleted successfully"
