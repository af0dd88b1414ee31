"""Global exception handlers for the registry API.

Every failure leaves the service as an RFC 7807 problem body. Registry
errors carry their own status; authentication failures keep their
``WWW-Authenticate`` challenge; anything unexpected becomes a 500 whose
message is logged but never returned.
"""

from collections.abc import Mapping
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from oauth2_registry.core.logging import logger
from oauth2_registry.domain.exceptions import RegistryError
from oauth2_registry.models.errors import ProblemDetail, ValidationErrorDetail

GENERIC_SERVER_ERROR = "An unexpected error occurred. Please try again later."


def problem_response(
    request: Request,
    status: int,
    headers: Mapping[str, str] | None = None,
    **fields: Any,
) -> JSONResponse:
    """Render a problem body for ``request`` with the given status."""
    problem = ProblemDetail.for_status(
        status, instance=str(request.url.path), **fields
    )
    return JSONResponse(
        status_code=status,
        content=problem.model_dump(exclude_none=True),
        headers=dict(headers) if headers else None,
    )


def _request_context(request: Request) -> dict[str, str]:
    return {"path": str(request.url.path), "method": request.method}


async def http_exception_handler(
    request: Request, exc: HTTPException
) -> JSONResponse:  # noqa: ASYNC100
    """Handle HTTPException, including 401s raised by bearer authentication.

    Args:
        request: The FastAPI request object.
        exc: The HTTPException that was raised.

    Returns:
        JSONResponse with ProblemDetail body and the exception's headers.
    """
    logger.warning(
        f"HTTPException: {exc.status_code} - {exc.detail}",
        extra={"status_code": exc.status_code, **_request_context(request)},
    )
    return problem_response(
        request,
        exc.status_code,
        headers=getattr(exc, "headers", None),
        detail=str(exc.detail),
    )


async def registry_exception_handler(
    request: Request, exc: RegistryError
) -> JSONResponse:  # noqa: ASYNC100
    """Handle registry domain errors (not found, forbidden, invalid)."""
    logger.warning(
        f"{type(exc).__name__}: {exc}",
        extra={"status_code": exc.status_code, **_request_context(request)},
    )
    return problem_response(request, exc.status_code, title=exc.title, detail=str(exc))


async def general_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:  # noqa: ASYNC100
    """Handle unexpected exceptions with a generic 500 problem."""
    logger.exception(
        f"Unexpected error: {type(exc).__name__}",
        extra={
            "exception_type": type(exc).__name__,
            "exception_message": str(exc),
            **_request_context(request),
        },
    )
    return problem_response(request, 500, detail=GENERIC_SERVER_ERROR)


def _validation_detail(error: Mapping[str, Any]) -> ValidationErrorDetail:
    ctx = error.get("ctx")
    return ValidationErrorDetail(
        type=error["type"],
        loc=tuple(str(part) for part in error["loc"]),
        msg=error["msg"],
        input=error.get("input"),
        ctx={key: str(value) for key, value in ctx.items()} if ctx else None,
        url=error.get("url"),
    )


async def validation_exception_handler(  # noqa: ASYNC100
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request validation errors with one entry per rejected field.

    Args:
        request: The FastAPI request object.
        exc: The RequestValidationError from Pydantic validation.

    Returns:
        422 JSONResponse listing the rejected fields.
    """
    errors = [_validation_detail(error) for error in exc.errors()]
    logger.warning(
        f"Validation error: {len(errors)} errors",
        extra={"errors": exc.errors(), **_request_context(request)},
    )
    return problem_response(
        request,
        422,
        title="Validation Error",
        detail=f"One or more validation errors occurred ({len(errors)} errors).",
        errors=errors,
    )
