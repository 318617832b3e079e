"""Problem Details (RFC 9457) for relay pagination errors.

Each error class fixes its HTTP status, title and ``error_code`` extension
as class attributes; instances only carry the occurrence-specific detail.
"""

from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field


PROBLEM_JSON = "application/problem+json"


class ProblemDetail(BaseModel):
    """Problem Details document; unknown keys are kept as extension members."""

    type: str = Field(default="about:blank", description="Problem type URI")
    title: str = Field(description="Short summary of the problem type")
    status: int = Field(description="HTTP status code")
    detail: Optional[str] = Field(default=None, description="Explanation of this occurrence")
    instance: Optional[str] = Field(default=None, description="URI of this occurrence")

    model_config = ConfigDict(extra="allow")

    def to_response(self) -> JSONResponse:
        return JSONResponse(
            status_code=self.status,
            content=self.model_dump(exclude_none=True),
            media_type=PROBLEM_JSON
        )


class ProblemDetailException(Exception):
    """Base for errors rendered as Problem Details.

    ``status`` and ``title`` default to the class attributes and may be
    overridden per instance for one-off problems.
    """

    status: int = 500
    title: str = "Internal Server Error"
    default_detail: Optional[str] = None
    error_code: Optional[str] = None

    def __init__(
        self,
        detail: Optional[str] = None,
        *,
        status: Optional[int] = None,
        title: Optional[str] = None,
        type_uri: str = "about:blank",
        instance: Optional[str] = None,
        **extensions: Any
    ):
        if status is not None:
            self.status = status
        if title is not None:
            self.title = title
        self.detail = detail or self.default_detail
        self.type_uri = type_uri
        self.instance = instance
        if self.error_code:
            extensions.setdefault("error_code", self.error_code)
        self.extensions: Dict[str, Any] = extensions
        super().__init__(self.detail or self.title)

    def to_problem_detail(self, request: Optional[Request] = None) -> ProblemDetail:
        """Build the Problem Details document, taking ``instance`` from the request path."""
        instance = self.instance
        if instance is None and request:
            instance = str(request.url.path)
        return ProblemDetail(
            type=self.type_uri,
            title=self.title,
            status=self.status,
            detail=self.detail,
            instance=instance,
            **self.extensions
        )

    def to_response(self, request: Optional[Request] = None) -> JSONResponse:
        return self.to_problem_detail(request).to_response()


class BadRequestError(ProblemDetailException):
    status = 400
    title = "Bad Request"


class InternalServerError(ProblemDetailException):
    default_detail = "Internal server error"


class InvalidArgumentsError(BadRequestError):
    """Conflicting or malformed pagination arguments (first/last/after/before)."""

    error_code = "INVALID_ARGUMENTS"


class InvalidCursorError(BadRequestError):
    """Cursor token that cannot be decoded or does not fit the active sort key."""

    default_detail = "Invalid cursor provided"
    error_code = "INVALID_CURSOR"


class StoreError(InternalServerError):
    """Failure raised by an ordered query store."""

    default_detail = "Store query failed"
    error_code = "STORE_ERROR"


def create_problem_response(
    status: int,
    title: str,
    detail: Optional[str] = None,
    request: Optional[Request] = None,
    **extensions: Any
) -> JSONResponse:
    """Problem Details response for errors that are not raised as exceptions."""
    return ProblemDetailException(
        detail, status=status, title=title, **extensions
    ).to_response(request)
