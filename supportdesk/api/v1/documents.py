"""Documents endpoints (admin only): upload into the admission pipeline, list, delete."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from supportdesk.api.v1.auth import get_access_guard, require_admin
from supportdesk.core.config import Settings, get_settings
from supportdesk.core.database import get_db
from supportdesk.schemas.auth import Identity
from supportdesk.schemas.document import (
    DeleteResponse,
    DocumentDetail,
    DocumentResponse,
    DocumentsListResponse,
    DocumentSummary,
)
from supportdesk.services.access import AccessGuard
from supportdesk.services.admission import UploadedFile
from supportdesk.services.ingestion import IngestionConfig, IngestionOrchestrator

router = APIRouter()


def get_ingestion(
    db: Annotated[Session, Depends(get_db)],
    guard: Annotated[AccessGuard, Depends(get_access_guard)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> IngestionOrchestrator:
    return IngestionOrchestrator(db, guard, IngestionConfig.from_settings(settings))


@router.get("", response_model=DocumentsListResponse)
def list_documents(
    admin: Annotated[Identity, Depends(require_admin)],
    ingestion: Annotated[IngestionOrchestrator, Depends(get_ingestion)],
) -> DocumentsListResponse:
    """List document metadata, newest first. Extracted text is omitted."""
    records = ingestion.list_documents(admin)
    return DocumentsListResponse(
        data=[DocumentSummary.model_validate(r) for r in records]
    )


@router.post("", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
async def upload_document(
    file: Annotated[UploadFile, File(description="PDF, DOCX or TXT file")],
    admin: Annotated[Identity, Depends(require_admin)],
    ingestion: Annotated[IngestionOrchestrator, Depends(get_ingestion)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> DocumentResponse:
    """
    Upload one document as multipart/form-data (field ``file``).

    The file is size-checked, classified (declared MIME type, then extension),
    its text extracted and whitespace-normalized, then stored. Nothing is stored
    when any step fails.
    """
    # One byte past the limit is enough to know the upload is too large.
    content = await file.read(settings.MAX_UPLOAD_BYTES + 1)
    upload = UploadedFile(
        content=content,
        filename=file.filename or "",
        content_type=file.content_type,
        size=file.size if file.size is not None else len(content),
    )
    record = await run_in_threadpool(ingestion.admit, admin, upload)
    return DocumentResponse(data=DocumentDetail.model_validate(record))


@router.delete("/{document_id}", response_model=DeleteResponse)
def delete_document(
    document_id: str,
    admin: Annotated[Identity, Depends(require_admin)],
    ingestion: Annotated[IngestionOrchestrator, Depends(get_ingestion)],
) -> DeleteResponse:
    """Delete a document record permanently."""
    ingestion.delete_document(admin, document_id)
    return DeleteResponse()
