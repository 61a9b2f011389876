from fastapi import APIRouter

from src.config import settings
from src.schemas.annotations import ModelsResponse

router = APIRouter(prefix="/models")


@router.get("", response_model=ModelsResponse)
async def list_models() -> ModelsResponse:
    models = list(dict.fromkeys([settings.default_model, *settings.available_models]))
    return ModelsResponse(default=settings.default_model, models=models)
