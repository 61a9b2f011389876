import json
from typing import NamedTuple

from src.config import settings
from src.core.exceptions import MalformedPromptList, NoImagesProvided
from src.core.messages import message
from src.schemas.annotations import BatchConfig, ImageItem
from src.services import credentials, staging


class UploadedImage(NamedTuple):
    filename: str
    data: bytes
    content_type: str | None = None


def parse_prompt_list(raw: str | None) -> list[str | None]:
    if raw is None:
        return []
    try:
        parsed = json.loads(raw)
    except ValueError as e:
        raise MalformedPromptList() from e
    if not isinstance(parsed, list):
        raise MalformedPromptList()
    if any(prompt is not None and not isinstance(prompt, str) for prompt in parsed):
        raise MalformedPromptList()
    return parsed


def resolve_prompt(prompt: str | None, default_prompt: str) -> str:
    return (prompt or "").strip() or default_prompt


def _is_empty_part(upload: UploadedImage) -> bool:
    return not upload.filename and not upload.data


def build_batch(
    uploads: list[UploadedImage],
    prompts_raw: str | None = None,
    default_prompt_raw: str | None = None,
    model_raw: str | None = None,
    api_keys_raw: str | None = None,
) -> tuple[list[ImageItem], BatchConfig]:
    uploads = [upload for upload in uploads if not _is_empty_part(upload)]
    if not uploads:
        raise NoImagesProvided()

    prompts = parse_prompt_list(prompts_raw)
    default_prompt = (
        (default_prompt_raw or "").strip() or settings.default_prompt.strip() or message("default_prompt")
    )
    model = (model_raw or "").strip() or settings.default_model
    pool = credentials.build_credential_pool(api_keys_raw)

    items = [
        ImageItem(
            filename=upload.filename,
            data=upload.data,
            media_type=staging.resolve_media_type(upload.content_type, upload.data),
            prompt=prompts[index] if index < len(prompts) else None,
        )
        for index, upload in enumerate(uploads)
    ]
    return items, BatchConfig(model=model, default_prompt=default_prompt, credentials=pool)
