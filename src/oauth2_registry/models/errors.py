"""RFC 7807 problem bodies returned by every failing registry endpoint."""

from http import HTTPStatus
from typing import Any

from pydantic import BaseModel, Field, model_validator

RFC7231 = "https://datatracker.ietf.org/doc/html/rfc7231#section-"

# Statuses the registry answers with; anything else is typed as a server error.
PROBLEM_TYPES: dict[int, str] = {
    HTTPStatus.BAD_REQUEST: f"{RFC7231}6.5.1",
    HTTPStatus.UNAUTHORIZED: "https://datatracker.ietf.org/doc/html/rfc7235#section-3.1",
    HTTPStatus.FORBIDDEN: f"{RFC7231}6.5.3",
    HTTPStatus.NOT_FOUND: f"{RFC7231}6.5.4",
    HTTPStatus.METHOD_NOT_ALLOWED: f"{RFC7231}6.5.5",
    HTTPStatus.UNPROCESSABLE_ENTITY: "https://datatracker.ietf.org/doc/html/rfc4918#section-11.2",
    HTTPStatus.INTERNAL_SERVER_ERROR: f"{RFC7231}6.6.1",
}


def problem_type_uri(status: int) -> str:
    """Return the problem ``type`` URI documenting ``status``."""
    return PROBLEM_TYPES.get(status, PROBLEM_TYPES[HTTPStatus.INTERNAL_SERVER_ERROR])


def status_title(status: int) -> str:
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return "An error occurred"


class ValidationErrorDetail(BaseModel):
    """One rejected field of a request.

    Mirrors the entries pydantic reports, with ``loc`` flattened to strings so
    path, query and body locations serialize the same way.
    """

    type: str = Field(..., description="Error type")
    loc: tuple[str, ...] = Field(..., description="Error location in request")
    msg: str = Field(..., description="Human-readable error message")
    input: Any = Field(..., description="Invalid input value")
    ctx: dict[str, Any] | None = Field(None, description="Additional error context")
    url: str | None = Field(None, description="Error documentation URL")


class ProblemDetail(BaseModel):
    """Problem Detail response as defined in RFC 7807.

    ``type`` is derived from ``status`` when not given. Use
    :meth:`for_status` to also derive ``title`` from the status phrase.
    """

    type: str | None = Field(
        default=None,
        description="URI reference to the problem type (RFC 7807)",
        json_schema_extra={"example": f"{RFC7231}6.5.4"},
    )
    title: str = Field(
        ...,
        description="Short, human-readable summary",
        json_schema_extra={"example": "Not Found"},
    )
    status: int = Field(
        ...,
        description="HTTP status code",
        json_schema_extra={"example": 404},
    )
    detail: str | None = Field(
        default=None,
        description="Human-readable explanation",
        json_schema_extra={
            "example": "Requested Domain with id [9b1d...] was not found"
        },
    )
    instance: str | None = Field(
        default=None,
        description="Request path that produced the problem",
        json_schema_extra={"example": "/domain/info/9b1d..."},
    )
    errors: list[ValidationErrorDetail] | None = Field(
        default=None,
        description="Rejected fields (422 responses only)",
        json_schema_extra={
            "example": [
                {
                    "type": "uuid_parsing",
                    "loc": ["path", "domain_id"],
                    "msg": "Input should be a valid UUID",
                    "input": "abc",
                }
            ]
        },
    )

    @model_validator(mode="before")
    @classmethod
    def derive_type(cls, values: dict[str, Any]) -> dict[str, Any]:
        if values.get("type") is None:
            values["type"] = problem_type_uri(values.get("status", 500))
        return values

    @classmethod
    def for_status(cls, status: int, **fields: Any) -> "ProblemDetail":
        """Build a problem whose title is the standard phrase of ``status``."""
        fields.setdefault("title", status_title(status))
        return cls(status=status, **fields)
