import asyncio

import structlog

from src.config import settings
from src.core.messages import message
from src.schemas.annotations import BatchConfig, ImageItem, ResultEntry
from src.services import gemini_client, staging
from src.services.credentials import CredentialSelector
from src.services.request_validator import resolve_prompt
from src.services.response_text import extract_text

logger = structlog.get_logger()


async def annotate_image(item: ImageItem, config: BatchConfig, selector: CredentialSelector) -> ResultEntry:
    prompt = resolve_prompt(item.prompt, config.default_prompt)
    try:
        data, media_type = await asyncio.to_thread(
            staging.prepare_image, item.data, item.media_type, settings.max_image_size
        )
        with staging.staged_file(data, item.filename) as path:
            async with gemini_client.get_generation_client(selector.pick()) as client:
                asset = await client.upload(path, media_type)
                response = await client.generate(config.model, prompt, asset)
        text = extract_text(response)
    except Exception as e:
        logger.error("image_annotation_failed", filename=item.filename, error=str(e))
        return ResultEntry(filename=item.filename, prompt=prompt, error=str(e) or message("unexpected_error"))

    logger.info("image_annotated", filename=item.filename, model=config.model, chars=len(text))
    return ResultEntry(filename=item.filename, prompt=prompt, text=text)


async def annotate_batch(items: list[ImageItem], config: BatchConfig) -> list[ResultEntry]:
    selector = CredentialSelector(config.credentials, strategy=settings.credential_strategy)
    results: list[ResultEntry] = []
    for item in items:
        results.append(await annotate_image(item, config, selector))
    failed = sum(1 for result in results if result.error is not None)
    logger.info("batch_annotated", total=len(results), failed=failed, model=config.model)
    return results
