"""Error envelope rendering."""
from http import HTTPStatus
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from guidauth.schemas.auth import ErrorMessage
from guidauth.services.errors import CredentialError, RefreshMismatch, UnknownSession

logger = logging.getLogger(__name__)


def error_response(
    status_code: int,
    error_code: str,
    message: str,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = ErrorMessage(status_code=status_code, error_code=error_code, error_message=message)
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


def http_error_code(status_code: int) -> str:
    """Stable snake_case code for a framework-raised HTTP status, e.g. ``method_not_allowed``."""
    try:
        return HTTPStatus(status_code).phrase.lower().replace(" ", "_").replace("-", "_")
    except ValueError:
        return "http_error"


async def credential_error_handler(request: Request, exc: CredentialError) -> JSONResponse:
    """Render protocol errors; optionally hide whether a session exists."""
    if isinstance(exc, (UnknownSession, RefreshMismatch)) and request.app.state.settings.mask_session_errors:
        return error_response(
            status.HTTP_401_UNAUTHORIZED,
            "invalid_refresh_token",
            "Invalid refresh token",
        )
    return error_response(exc.status_code, exc.error_code, exc.message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render routing errors (unknown path, wrong method) in the same envelope."""
    return error_response(
        exc.status_code,
        http_error_code(exc.status_code),
        str(exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.debug(f"Rejected malformed request to {request.url.path}: {exc.errors()}")
    return error_response(status.HTTP_400_BAD_REQUEST, "validation_error", "Malformed request body")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CredentialError, credential_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
