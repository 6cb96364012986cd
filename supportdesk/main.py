"""FastAPI application entrypoint. No business logic; only wiring, middleware and error rendering."""

from dotenv import load_dotenv

load_dotenv()

import logging
from collections.abc import Sequence
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from supportdesk.api.v1 import router as v1_router
from supportdesk.core.config import settings
from supportdesk.core.errors import SupportDeskError, ValidationFailedError

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Support Desk API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else [settings.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SupportDeskError)
async def handle_support_desk_error(request: Request, exc: SupportDeskError) -> JSONResponse:
    """Render typed failures as {success: false, error: {code, message}}."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.kind.value)
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": {"code": exc.kind.value, "message": exc.message},
        },
        headers=headers,
    )


def _describe_validation_errors(errors: Sequence[Any]) -> str:
    """First failing field as ``field: reason``; the body wrapper is left out of the path."""
    if not errors:
        return ValidationFailedError.default_message
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    reason = first.get("msg", ValidationFailedError.default_message)
    return f"{field}: {reason}" if field else reason


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed request bodies are VALIDATION_ERROR failures like any other."""
    errors = exc.errors()
    logger.info(
        "Request validation failed",
        extra={"path": request.url.path, "error_count": len(errors)},
    )
    return await handle_support_desk_error(
        request, ValidationFailedError(_describe_validation_errors(errors))
    )


app.include_router(v1_router, prefix=settings.API_V1_PREFIX)


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "Support Desk API"}
