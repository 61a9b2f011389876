import structlog
from fastapi import APIRouter, Form, Request
from starlette.datastructures import UploadFile

from src.schemas.annotations import BatchResponse, ErrorResponse
from src.services import pipeline, request_validator
from src.services.request_validator import UploadedImage

logger = structlog.get_logger()

router = APIRouter(prefix="/generate")


async def _read_uploads(request: Request) -> list[UploadedImage]:
    form = await request.form()
    uploads = []
    # text values under "images" are not files and count as absent
    for image in form.getlist("images"):
        if not isinstance(image, UploadFile):
            continue
        data = await image.read()
        await image.close()
        uploads.append(UploadedImage(filename=image.filename or "", data=data, content_type=image.content_type))
    return uploads


@router.post(
    "",
    response_model=BatchResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}},
)
async def generate_descriptions(
    request: Request,
    prompts: str | None = Form(default=None),
    default_prompt: str | None = Form(default=None, alias="defaultPrompt"),
    model: str | None = Form(default=None),
    api_keys: str | None = Form(default=None, alias="apiKeys"),
) -> BatchResponse:
    uploads = await _read_uploads(request)
    items, config = request_validator.build_batch(
        uploads,
        prompts_raw=prompts,
        default_prompt_raw=default_prompt,
        model_raw=model,
        api_keys_raw=api_keys,
    )
    logger.info("batch_received", images=len(items), model=config.model, keys=len(config.credentials))
    results = await pipeline.annotate_batch(items, config)
    return BatchResponse(results=results)
