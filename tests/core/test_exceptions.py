from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from pydantic import BaseModel

from src.config import settings
from src.core.exceptions import (
    AppError,
    GenerationFailed,
    MalformedPromptList,
    NoCredentials,
    NoImagesProvided,
    UploadFailed,
    register_exception_handlers,
)
from src.main import app


class _Caption(BaseModel):
    max_words: int


def _app_with_handlers() -> FastAPI:
    test_app = FastAPI()
    register_exception_handlers(test_app)

    @test_app.post("/captions")
    async def _create_caption(body: _Caption) -> _Caption:
        return body

    @test_app.get("/teapot")
    async def _teapot() -> None:
        raise AppError(status_code=418, detail="short and stout")

    return test_app


class TestExceptionHandlers:
    async def test_validation_errors_drop_docs_url(self) -> None:
        async with AsyncClient(transport=ASGITransport(app=_app_with_handlers()), base_url="http://test") as client:
            response = await client.post("/captions", json={"max_words": "many"})
        assert response.status_code == 422
        errors = response.json()["detail"]
        assert errors[0]["loc"] == ["body", "max_words"]
        assert all("url" not in error for error in errors)

    async def test_app_error_status_and_body(self) -> None:
        async with AsyncClient(transport=ASGITransport(app=_app_with_handlers()), base_url="http://test") as client:
            response = await client.get("/teapot")
        assert response.status_code == 418
        assert response.json() == {"error": "short and stout"}


class TestAppError:
    def test_stores_status_and_detail(self) -> None:
        err = AppError(status_code=404, detail="Not found")
        assert err.status_code == 404
        assert err.detail == "Not found"

    def test_request_errors_are_400(self) -> None:
        for err in (NoImagesProvided(), MalformedPromptList(), NoCredentials()):
            assert err.status_code == 400
            assert err.detail

    async def test_app_error_handler_returns_error_body(self) -> None:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.post("/api/generate", data={"prompts": "[]"})
        assert response.status_code == 400
        assert response.json() == {"error": "at least one image must be uploaded"}


class TestPipelineErrors:
    def test_upload_failed_default_message(self) -> None:
        assert str(UploadFailed()) == "unable to upload file to the generation service"

    def test_generation_failed_keeps_description(self) -> None:
        assert str(GenerationFailed("quota exceeded")) == "quota exceeded"

    def test_generation_failed_fallback(self) -> None:
        assert str(GenerationFailed("")) == "unable to generate a description for this image"

    def test_localized_messages(self, monkeypatch) -> None:
        monkeypatch.setattr(settings, "locale", "th")
        assert str(UploadFailed()) == "ไม่สามารถอัปโหลดไฟล์ไปยัง Gemini ได้"
        assert NoImagesProvided().detail == "ต้องอัปโหลดรูปอย่างน้อย 1 รูป"

    def test_unknown_locale_falls_back_to_english(self, monkeypatch) -> None:
        monkeypatch.setattr(settings, "locale", "xx")
        assert NoCredentials().detail.startswith("no API key found")
