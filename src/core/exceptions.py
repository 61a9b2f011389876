import structlog
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.core.messages import message

logger = structlog.get_logger()


class AppError(Exception):
    """Request-level failure rendered as ``{"error": detail}``."""

    def __init__(self, status_code: int, detail: str) -> None:
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail


class NoImagesProvided(AppError):
    def __init__(self) -> None:
        super().__init__(status_code=400, detail=message("no_images"))


class MalformedPromptList(AppError):
    def __init__(self) -> None:
        super().__init__(status_code=400, detail=message("malformed_prompts"))


class NoCredentials(AppError):
    def __init__(self) -> None:
        super().__init__(status_code=400, detail=message("no_credentials"))


class PipelineError(Exception):
    """Item-level failure; contained in the item's result entry."""

    message_key = "unexpected_error"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or message(self.message_key))


class UploadFailed(PipelineError):
    message_key = "upload_failed"


class GenerationFailed(PipelineError):
    message_key = "generation_failed"


class ResourceCleanupFailed(PipelineError):
    pass


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    logger.warning("request_rejected", path=request.url.path, status_code=exc.status_code, error=exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [{k: v for k, v in error.items() if k != "url"} for error in exc.errors()]
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(errors)})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]
