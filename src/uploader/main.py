from textwrap import dedent
import logging

import pydantic
from fastapi import FastAPI
from fastapi.routing import APIRoute

from uploader.errors import (
    handle_broad_exceptions,
    handle_pydantic_validation_errors,
    handle_uploader_errors,
)
from uploader.exceptions import UploaderError
from uploader.manager import UploadManager
from uploader.routers.health import router as health_router
from uploader.routers.uploads import router as uploads_router
from uploader.settings import Settings

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, manager: UploadManager | None = None) -> FastAPI:
    """Create a FastAPI application."""
    settings = settings or Settings()

    app = FastAPI(
        title="Uploader",
        summary="Store uploaded files on configured disks",
        version="v1",
        description=dedent(
            """\
        Upload files to a local or S3 disk. Names are taken from the upload,
        a literal, or a generated strategy (unique, datetime, sequence, md5, hash).
        """
        ),
        docs_url="/",
        generate_unique_id_function=custom_generate_unique_id,
    )

    app.state.settings = settings
    app.state.upload_manager = manager or UploadManager(settings)
    logger.info(f"Default disk: {settings.default_disk}, configured disks: {settings.disk_names}")

    app.include_router(uploads_router, prefix="/v1", tags=["uploads"])
    app.include_router(health_router, tags=["health"])

    app.add_exception_handler(
        exc_class_or_status_code=pydantic.ValidationError,
        handler=handle_pydantic_validation_errors,
    )
    app.add_exception_handler(
        exc_class_or_status_code=UploaderError,
        handler=handle_uploader_errors,
    )
    app.middleware("http")(handle_broad_exceptions)

    return app


def custom_generate_unique_id(route: APIRoute):
    """
    Generate prettier `operationId`s in the OpenAPI schema.

    These become the function names in generated client SDKs.
    """
    return f"{route.tags[0]}-{route.name}"


if __name__ == "__main__":
    import uvicorn

    from uploader.logging_config import configure_logging

    configure_logging()
    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
