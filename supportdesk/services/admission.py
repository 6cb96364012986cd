"""
Upload admission: size check, type classification, text extraction, normalization.

The pipeline is linear and all-or-nothing: it either returns non-empty
normalized text together with exactly one ContentKind, or raises one typed
failure (TooLarge, UnsupportedType, ExtractionFailed, EmptyDocument).
It holds no state; each call owns its byte buffer.
"""

import io
import logging
import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Any

from docx import Document as DocxDocument
from docx.table import Table
from pypdf import PdfReader

from supportdesk.core.errors import (
    EmptyDocumentError,
    ExtractionFailedError,
    TooLargeError,
    UnsupportedTypeError,
)
from supportdesk.schemas.document import ContentKind

logger = logging.getLogger(__name__)

DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

# Declared MIME type -> kind (checked first).
_MIME_TYPE_KINDS: dict[str, ContentKind] = {
    "application/pdf": ContentKind.PDF,
    DOCX_MIME_TYPE: ContentKind.DOCX,
    "text/plain": ContentKind.PLAIN_TEXT,
}

# File extension -> kind (fallback when the MIME type is unknown).
_EXTENSION_KINDS: dict[str, ContentKind] = {
    ".pdf": ContentKind.PDF,
    ".docx": ContentKind.DOCX,
    ".txt": ContentKind.PLAIN_TEXT,
}

_WHITESPACE_RUN = re.compile(r"\s+")


@dataclass(frozen=True)
class UploadedFile:
    """A single inbound file as received from the HTTP layer."""

    content: bytes
    filename: str
    content_type: str | None
    size: int

    @classmethod
    def from_bytes(
        cls, content: bytes, filename: str, content_type: str | None = None
    ) -> "UploadedFile":
        return cls(content=content, filename=filename, content_type=content_type, size=len(content))


@dataclass(frozen=True)
class AdmittedContent:
    """Successful pipeline output: normalized text and its classified kind."""

    text: str
    kind: ContentKind


def classify(content_type: str | None, filename: str | None) -> ContentKind:
    """
    Classify by declared MIME type first, then by file extension.

    Both inputs are advisory; a match on either is accepted. Raw bytes are
    never sniffed. Raises UnsupportedTypeError when neither matches.
    """
    if content_type:
        # Drop parameters such as "; charset=utf-8".
        mime = content_type.split(";")[0].strip().lower()
        kind = _MIME_TYPE_KINDS.get(mime)
        if kind is not None:
            return kind
    if filename:
        extension = PurePosixPath(filename.replace("\\", "/")).suffix.lower()
        kind = _EXTENSION_KINDS.get(extension)
        if kind is not None:
            return kind
    raise UnsupportedTypeError()


def _extract_pdf(content: bytes) -> str:
    reader = PdfReader(io.BytesIO(content))
    return "\n".join(page.extract_text() or "" for page in reader.pages)


def _docx_lines(container: Any) -> Iterator[str]:
    """Paragraph and table-cell text in body order; nested tables are walked too."""
    for block in container.iter_inner_content():
        if isinstance(block, Table):
            for row in block.rows:
                seen: set[int] = set()
                for cell in row.cells:
                    # A merged cell is repeated once per grid column it spans.
                    if id(cell._tc) in seen:
                        continue
                    seen.add(id(cell._tc))
                    yield from _docx_lines(cell)
        else:
            yield block.text


def _extract_docx(content: bytes) -> str:
    document = DocxDocument(io.BytesIO(content))
    return "\n".join(_docx_lines(document))


def _extract_plain_text(content: bytes) -> str:
    # utf-8-sig so a leading byte-order mark is not kept as text.
    return content.decode("utf-8-sig")


_EXTRACTORS: dict[ContentKind, Callable[[bytes], str]] = {
    ContentKind.PDF: _extract_pdf,
    ContentKind.DOCX: _extract_docx,
    ContentKind.PLAIN_TEXT: _extract_plain_text,
}


def extract_text(content: bytes, kind: ContentKind) -> str:
    """
    Extract raw text for the given kind. Zero bytes extract to "" for every kind.
    Any parser or decoding failure raises ExtractionFailedError; no partial text.
    """
    if not content:
        return ""
    try:
        return _EXTRACTORS[kind](content)
    except Exception as e:
        logger.info(
            "Text extraction failed",
            extra={"file_type": kind.value, "error_type": type(e).__name__},
        )
        raise ExtractionFailedError(
            f"Could not read {kind.value.upper()} content: the file is corrupt or unreadable."
        ) from e


def normalize_text(text: str) -> str:
    """Collapse every whitespace run (newlines included) to one space and trim."""
    return _WHITESPACE_RUN.sub(" ", text).strip()


def admit_upload(upload: UploadedFile, max_bytes: int) -> AdmittedContent:
    """
    Run the admission pipeline on one upload.

    1. size check (TooLarge) before anything else touches the bytes
    2. classification (UnsupportedType) before any parsing
    3. extraction (ExtractionFailed)
    4. whitespace normalization
    5. emptiness check (EmptyDocument)
    """
    size = max(upload.size, len(upload.content))
    if size > max_bytes:
        raise TooLargeError(
            f"File size must not exceed {max_bytes} bytes ({max_bytes / (1024 * 1024):g} MB)."
        )
    kind = classify(upload.content_type, upload.filename)
    text = normalize_text(extract_text(upload.content, kind))
    if not text:
        raise EmptyDocumentError()
    return AdmittedContent(text=text, kind=kind)
