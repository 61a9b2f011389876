from collections.abc import AsyncIterator, Iterator
from pathlib import Path
from unittest.mock import patch

import pytest
from httpx import ASGITransport, AsyncClient

from src.config import settings
from src.main import app
from src.services import staging


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path) -> Iterator[Path]:
    staging_dir = tmp_path / "staging"
    with (
        patch.object(settings, "google_api_keys", ""),
        patch.object(settings, "google_api_key", ""),
        patch.object(settings, "credential_strategy", "random"),
        patch.object(settings, "default_prompt", ""),
        patch.object(settings, "default_model", "gemini-2.5-flash"),
        patch.object(settings, "locale", "en"),
        patch.object(staging, "STAGING_DIR", staging_dir),
    ):
        yield staging_dir


@pytest.fixture
async def client() -> AsyncIterator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
