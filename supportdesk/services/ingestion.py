"""Ingestion: admin-gated admission of uploads into persisted document records."""

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from supportdesk.core.config import DEFAULT_MAX_UPLOAD_BYTES
from supportdesk.core.errors import NotFoundError, StoreUnavailableError, SupportDeskError
from supportdesk.models import DocumentRecord
from supportdesk.schemas.auth import Identity, Role
from supportdesk.services.access import AccessGuard
from supportdesk.services.admission import UploadedFile, admit_upload

if TYPE_CHECKING:
    from supportdesk.core.config import Settings

logger = logging.getLogger(__name__)

_WHITESPACE_RUN = re.compile(r"\s+")
_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9.\-_]")

FALLBACK_FILENAME = "upload"


@dataclass(frozen=True)
class IngestionConfig:
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES

    @classmethod
    def from_settings(cls, settings: "Settings") -> "IngestionConfig":
        return cls(max_upload_bytes=settings.MAX_UPLOAD_BYTES)


def sanitize_filename(name: str) -> str:
    """Whitespace runs become hyphens; anything outside [A-Za-z0-9.-_] is dropped."""
    hyphenated = _WHITESPACE_RUN.sub("-", name.strip())
    return _UNSAFE_FILENAME_CHARS.sub("", hyphenated)


def storage_filename(original_name: str, uploaded_at: datetime) -> str:
    """``<epoch millis>-<sanitized original name>``."""
    millis = int(uploaded_at.timestamp() * 1000)
    return f"{millis}-{sanitize_filename(original_name) or FALLBACK_FILENAME}"


class IngestionOrchestrator:
    """
    Ties the admin role gate to the admission pipeline and the document store.

    The role check always runs before the pipeline, so a non-admin upload is
    rejected without its bytes ever being parsed.
    """

    def __init__(
        self,
        session: Session,
        guard: AccessGuard,
        config: IngestionConfig,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._db = session
        self._guard = guard
        self._config = config
        self._clock = clock or (lambda: datetime.now(UTC))

    def admit(self, identity: Identity | None, upload: UploadedFile) -> DocumentRecord:
        """Admit one upload as a new DocumentRecord, or raise without creating anything."""
        admin = self._guard.require_role(identity, Role.ADMIN)
        try:
            admitted = admit_upload(upload, self._config.max_upload_bytes)
        except SupportDeskError as e:
            logger.info(
                "Upload rejected",
                extra={
                    "kind": e.kind.value,
                    "original_name": upload.filename,
                    "file_size": upload.size,
                },
            )
            raise

        uploaded_at = self._clock()
        original_name = upload.filename.strip() or FALLBACK_FILENAME
        record = DocumentRecord(
            filename=storage_filename(original_name, uploaded_at),
            original_name=original_name,
            file_type=admitted.kind.value,
            file_size=upload.size,
            content=admitted.text,
            chunk_count=0,
            uploaded_by=admin.id,
            uploaded_at=uploaded_at,
        )
        try:
            self._db.add(record)
            self._db.commit()
            self._db.refresh(record)
        except SQLAlchemyError as e:
            self._db.rollback()
            logger.error("Document insert failed: %s", type(e).__name__)
            raise StoreUnavailableError() from e
        logger.info(
            "Document admitted",
            extra={
                "document_id": record.id,
                "file_type": record.file_type,
                "file_size": record.file_size,
                "storage_filename": record.filename,
            },
        )
        return record

    def list_documents(self, identity: Identity | None) -> list[DocumentRecord]:
        """All document records, newest upload first."""
        self._guard.require_role(identity, Role.ADMIN)
        try:
            return (
                self._db.query(DocumentRecord)
                .order_by(DocumentRecord.uploaded_at.desc())
                .all()
            )
        except SQLAlchemyError as e:
            logger.error("Document listing failed: %s", type(e).__name__)
            raise StoreUnavailableError() from e

    def delete_document(self, identity: Identity | None, document_id: str) -> None:
        """Hard-delete one record; NotFoundError if the id does not resolve."""
        self._guard.require_role(identity, Role.ADMIN)
        try:
            record = self._db.get(DocumentRecord, document_id)
            if record is None:
                raise NotFoundError("Document not found")
            self._db.delete(record)
            self._db.commit()
        except SQLAlchemyError as e:
            self._db.rollback()
            logger.error("Document delete failed: %s", type(e).__name__)
            raise StoreUnavailableError() from e
        logger.info("Document deleted", extra={"document_id": document_id})
