"""Exception handlers that render pagination errors as Problem Details."""

import logging
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .problem_details import ProblemDetailException, create_problem_response

logger = logging.getLogger(__name__)


def _request_context(request: Request) -> Dict[str, Any]:
    return {"path": str(request.url.path), "method": request.method}


async def problem_detail_exception_handler(
    request: Request,
    exc: ProblemDetailException
) -> JSONResponse:
    """Render a raised Problem Details error; server-side failures log as errors."""
    level = logging.ERROR if exc.status >= 500 else logging.INFO
    logger.log(
        level,
        f"{type(exc).__name__} ({exc.status}): {exc.detail}",
        extra={**_request_context(request), "status_code": exc.status}
    )
    return exc.to_response(request)


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """Render malformed query parameters (e.g. a bad ``orderBy``) as 422."""
    errors = exc.errors()
    logger.info(f"Request validation failed with {len(errors)} errors", extra=_request_context(request))

    detail = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in errors
    )
    return create_problem_response(
        status=422,
        title="Validation Error",
        detail=f"Validation failed: {detail}",
        request=request
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all 500 that keeps internal details out of the response."""
    logger.error(f"Unhandled {type(exc).__name__}", extra=_request_context(request), exc_info=exc)
    return create_problem_response(
        status=500,
        title="Internal Server Error",
        detail="An unexpected error occurred",
        request=request
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the Problem Details handlers on ``app``."""
    handlers = {
        ProblemDetailException: problem_detail_exception_handler,
        RequestValidationError: validation_exception_handler,
        Exception: general_exception_handler,
    }
    for exc_class, handler in handlers.items():
        app.add_exception_handler(exc_class, handler)
