"""Error handling module for relay pagination."""

from .problem_details import (
    ProblemDetail,
    ProblemDetailException,
    BadRequestError,
    InternalServerError,
    InvalidArgumentsError,
    InvalidCursorError,
    StoreError,
    create_problem_response
)
from .handlers import register_exception_handlers

__all__ = [
    "ProblemDetail",
    "ProblemDetailException",
    "BadRequestError",
    "InternalServerError",
    "InvalidArgumentsError",
    "InvalidCursorError",
    "StoreError",
    "create_problem_response",
    "register_exception_handlers"
]
