import logging

from fastapi import Request
from fastapi.responses import JSONResponse, Response

from skillhub.errors import (
    AccessDeniedError,
    AuthenticationError,
    DuplicateEmailError,
    EmailNotVerifiedError,
    InvalidAssertionError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def create_json_error_response(status_code: int, message: str, error_type: str | None = None) -> JSONResponse:
    """Create JSON error response with optional type for machine parsing."""
    content = {"message": message}
    if error_type:
        content["type"] = error_type
    return JSONResponse(status_code=status_code, content=content)


async def user_error_handler(request: Request, exc: Exception) -> Response:
    """Handle all UserError subclasses with appropriate status codes."""
    # Subclasses before their bases
    if isinstance(exc, InvalidCredentialsError):
        status_code = 401
        error_type = "invalid_credentials"
    elif isinstance(exc, AuthenticationError):
        status_code = 401
        error_type = "authentication_error"
    elif isinstance(exc, AccessDeniedError):
        status_code = 403
        error_type = "access_denied"
    elif isinstance(exc, NotFoundError):
        status_code = 404
        error_type = "not_found"
    elif isinstance(exc, DuplicateEmailError):
        status_code = 400
        error_type = "duplicate_email"
    elif isinstance(exc, EmailNotVerifiedError):
        status_code = 400
        error_type = "email_not_verified"
    elif isinstance(exc, ValidationError):
        status_code = 400
        error_type = "validation_error"
    elif isinstance(exc, InvalidAssertionError):
        status_code = 500
        error_type = "invalid_assertion"
    else:
        status_code = 400
        error_type = "bad_request"

    logger.info("%s %s -> %s (%s)", request.method, request.url.path, status_code, error_type)
    return create_json_error_response(status_code=status_code, message=str(exc), error_type=error_type)


async def store_error_handler(request: Request, exc: Exception) -> Response:
    """Handle backing store failures (500) without exposing driver details."""
    logger.error("Store error on %s %s: %s", request.method, request.url.path, exc, exc_info=exc.__cause__ or exc)
    return create_json_error_response(status_code=500, message="Database error", error_type="store_error")


async def general_exception_handler(_: Request, exc: Exception) -> Response:
    """Handle unexpected errors (500)."""
    logger.exception("Unexpected error: %s", exc)
    return create_json_error_response(
        status_code=500, message="An unexpected error occurred.", error_type="internal_server_error"
    )
