"""Failure taxonomy shared by auth, access control and document ingestion.

Every failure raised by a component carries a stable machine-readable ``kind``
plus a human-readable message. Only the HTTP layer turns these into responses.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Stable failure codes exposed to clients."""

    MISSING_CREDENTIAL = "MISSING_CREDENTIAL"
    UNAUTHENTICATED = "UNAUTHENTICATED"
    FORBIDDEN = "FORBIDDEN"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    TOO_LARGE = "TOO_LARGE"
    UNSUPPORTED_TYPE = "UNSUPPORTED_TYPE"
    EXTRACTION_FAILED = "EXTRACTION_FAILED"
    EMPTY_DOCUMENT = "EMPTY_DOCUMENT"
    NOT_FOUND = "NOT_FOUND"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"


class SupportDeskError(Exception):
    """Base class for all typed failures."""

    kind: ErrorKind = ErrorKind.VALIDATION_ERROR
    status_code: int = 400
    default_message = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingCredentialError(SupportDeskError):
    """No Authorization header, or one not of the form ``Bearer <token>``."""

    kind = ErrorKind.MISSING_CREDENTIAL
    status_code = 401
    default_message = "Authentication token missing"


class UnauthenticatedError(SupportDeskError):
    """Bad, expired or malformed token, or a credentials mismatch."""

    kind = ErrorKind.UNAUTHENTICATED
    status_code = 401
    default_message = "Authentication required"


class TokenError(UnauthenticatedError):
    """Token verification failure; ``reason`` is for logs only."""

    reason = "invalid"


class InvalidSignatureError(TokenError):
    reason = "invalid_signature"
    default_message = "Token signature mismatch"


class ExpiredTokenError(TokenError):
    reason = "expired"
    default_message = "Token has expired"


class MalformedTokenError(TokenError):
    reason = "malformed"
    default_message = "Token is malformed"


class ForbiddenError(SupportDeskError):
    kind = ErrorKind.FORBIDDEN
    status_code = 403
    default_message = "Admin access required"


class ValidationFailedError(SupportDeskError):
    """Malformed registration or login input."""

    kind = ErrorKind.VALIDATION_ERROR
    status_code = 400
    default_message = "Invalid input"


class TooLargeError(SupportDeskError):
    kind = ErrorKind.TOO_LARGE
    status_code = 413
    default_message = "File exceeds the maximum upload size"


class UnsupportedTypeError(SupportDeskError):
    kind = ErrorKind.UNSUPPORTED_TYPE
    status_code = 415
    default_message = "Unsupported file type. Only PDF, DOCX, and TXT are allowed."


class ExtractionFailedError(SupportDeskError):
    kind = ErrorKind.EXTRACTION_FAILED
    status_code = 422
    default_message = "Could not read the document"


class EmptyDocumentError(SupportDeskError):
    kind = ErrorKind.EMPTY_DOCUMENT
    status_code = 422
    default_message = "Could not extract text from the document"


class NotFoundError(SupportDeskError):
    kind = ErrorKind.NOT_FOUND
    status_code = 404
    default_message = "Not found"


class StoreUnavailableError(SupportDeskError):
    """Persistence fault; never a domain validation failure."""

    kind = ErrorKind.STORE_UNAVAILABLE
    status_code = 503
    default_message = "Storage is unavailable"
