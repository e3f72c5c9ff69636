"""Exception handlers for the uploader API."""
import logging

import pydantic
from fastapi import Request, status
from fastapi.responses import JSONResponse

from uploader.exceptions import DiskNotConfiguredError, UploaderError

logger = logging.getLogger(__name__)


async def handle_uploader_errors(request: Request, exc: UploaderError) -> JSONResponse:
    """Map uploader errors to JSON responses; unknown disks are a 404."""
    status_code = (
        status.HTTP_404_NOT_FOUND
        if isinstance(exc, DiskNotConfiguredError)
        else status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    logger.warning(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "details": exc.details},
    )


async def handle_pydantic_validation_errors(request: Request, exc: pydantic.ValidationError) -> JSONResponse:
    errors = exc.errors()
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": [
                {
                    "msg": error["msg"],
                    "loc": list(error.get("loc", ())),
                }
                for error in errors
            ]
        },
    )


async def handle_broad_exceptions(request: Request, call_next):
    """Handle any exception that propagates out of a route handler."""
    try:
        return await call_next(request)
    except Exception as err:  # pylint: disable=broad-except
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {str(err)}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )
