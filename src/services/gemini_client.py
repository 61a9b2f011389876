from pathlib import Path
from types import TracebackType
from typing import Any, Protocol, Self

import structlog
from google import genai
from google.genai import types

from src.config import settings
from src.core.exceptions import GenerationFailed, UploadFailed
from src.core.logging import mask_key
from src.schemas.annotations import AssetReference
from src.services.response_text import get_field

logger = structlog.get_logger()


class GenerationClient(Protocol):
    async def __aenter__(self) -> Self: ...

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None: ...

    async def upload(self, path: Path, media_type: str) -> AssetReference: ...

    async def generate(self, model: str, prompt: str, asset: AssetReference) -> Any: ...


def asset_reference_from_upload(uploaded: Any, fallback_media_type: str) -> AssetReference | None:
    """Normalize an upload response into an ``AssetReference``.

    The file descriptor is either the response itself or nested under ``file``.
    Returns ``None`` when no usable URI or media type can be found.
    """
    nested = get_field(uploaded, "file")
    if nested is not None and get_field(nested, "uri"):
        uri = get_field(nested, "uri")
        media_type = get_field(nested, "mime_type") or get_field(nested, "mimeType")
    else:
        uri = get_field(uploaded, "uri")
        media_type = get_field(uploaded, "mime_type") or get_field(uploaded, "mimeType") or fallback_media_type
    if not isinstance(uri, str) or not uri or not isinstance(media_type, str) or not media_type:
        return None
    return AssetReference(uri=uri, media_type=media_type)


class GeminiClient:
    def __init__(self, api_key: str) -> None:
        self.key_hint = mask_key(api_key)
        self._client = genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=int(settings.generation_timeout * 1000)),
        )

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        try:
            await self._client.aio.aclose()
        except Exception as e:
            logger.warning("client_close_failed", key=self.key_hint, error=str(e))

    async def upload(self, path: Path, media_type: str) -> AssetReference:
        try:
            uploaded = await self._client.aio.files.upload(
                file=str(path),
                config=types.UploadFileConfig(mime_type=media_type),
            )
        except Exception as e:
            logger.error("asset_upload_failed", key=self.key_hint, error=str(e))
            raise UploadFailed() from e

        asset = asset_reference_from_upload(uploaded, media_type)
        if asset is None:
            logger.error("asset_upload_incomplete", key=self.key_hint)
            raise UploadFailed()
        logger.debug("asset_uploaded", key=self.key_hint, uri=asset.uri)
        return asset

    async def generate(self, model: str, prompt: str, asset: AssetReference) -> types.GenerateContentResponse:
        contents = [
            types.Content(
                role="user",
                parts=[
                    types.Part.from_text(text=prompt),
                    types.Part.from_uri(file_uri=asset.uri, mime_type=asset.media_type),
                ],
            )
        ]
        try:
            return await self._client.aio.models.generate_content(model=model, contents=contents)
        except Exception as e:
            logger.error("generation_failed", key=self.key_hint, model=model, error=str(e))
            raise GenerationFailed(str(e)) from e


def get_generation_client(api_key: str) -> GenerationClient:
    return GeminiClient(api_key)
