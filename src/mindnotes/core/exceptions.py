"""
Error taxonomy and FastAPI exception handlers.

Services raise these; ``register_exception_handlers`` turns them into
JSON responses with the right status code.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger("mindnotes.errors")


class MindNotesError(Exception):
    """Base class for every error the service layer raises on purpose."""

    status_code: int = 500
    code: str = "internal_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.code, "message": self.message, "details": self.details or None}


class ValidationError(MindNotesError):
    """Malformed or missing input; the caller can fix it."""

    status_code = 400
    code = "validation_error"


class NotFoundError(MindNotesError):
    """Absent, or owned by somebody else (indistinguishable on purpose)."""

    status_code = 404
    code = "not_found"


class NotConnectedError(MindNotesError):
    """Sync attempted without a stored credential for the provider."""

    status_code = 400
    code = "not_connected"

    def __init__(self, provider: str):
        super().__init__(f"{_provider_label(provider)} not connected", {"provider": provider})
        self.provider = provider


class CredentialRefreshError(MindNotesError):
    """Refreshing an expired OAuth credential failed."""

    status_code = 502
    code = "credential_refresh_failed"

    def __init__(self, provider: str, message: str):
        super().__init__(message, {"provider": provider})
        self.provider = provider


class ExternalApiError(MindNotesError):
    """A Drive or GitHub call failed (network, rate limit, conflict...)."""

    status_code = 502
    code = "external_api_error"

    def __init__(
        self,
        provider: str,
        message: str,
        status_code: Optional[int] = None,
        note_id: Optional[Any] = None,
    ):
        details: Dict[str, Any] = {"provider": provider}
        if status_code is not None:
            details["status_code"] = status_code
        if note_id is not None:
            details["note_id"] = str(note_id)
        super().__init__(message, details)
        self.provider = provider
        self.upstream_status = status_code
        self.note_id = note_id


class NotConfiguredError(MindNotesError):
    """A provider integration is missing its server-side configuration."""

    status_code = 501
    code = "not_configured"


class StoreError(MindNotesError):
    """Persistence layer failure. Internal; message is never sent to clients."""

    status_code = 500
    code = "store_error"


def _provider_label(provider: str) -> str:
    return {"drive": "Google Drive", "github": "GitHub"}.get(provider, provider)


def _internal_error_response() -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={"error": "internal_error", "message": "Internal server error", "details": None},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Map the taxonomy (and a few framework errors) onto HTTP responses."""

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
        logger.error(
            "Store error",
            extra={"path": request.url.path, "method": request.method, "error_message": exc.message},
        )
        return _internal_error_response()

    @app.exception_handler(MindNotesError)
    async def mindnotes_error_handler(request: Request, exc: MindNotesError) -> JSONResponse:
        log = logger.warning if exc.status_code < 500 else logger.error
        log(
            f"{exc.code}: {exc.message}",
            extra={"path": request.url.path, "method": request.method, "details": exc.details},
        )
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = [
            {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg", "")}
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=400,
            content={
                "error": ValidationError.code,
                "message": "Invalid request",
                "details": {"errors": errors},
            },
        )

    @app.exception_handler(SQLAlchemyError)
    async def sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.exception(
            f"Database error: {type(exc).__name__}",
            extra={"path": request.url.path, "method": request.method},
        )
        return _internal_error_response()

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            f"Unhandled exception: {type(exc).__name__}",
            extra={"path": request.url.path, "method": request.method},
        )
        return _internal_error_response()
