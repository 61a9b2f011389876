from pydantic import BaseModel, ConfigDict


class ImageItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    filename: str
    data: bytes
    media_type: str
    prompt: str | None = None


class BatchConfig(BaseModel):
    model_config = ConfigDict(frozen=True, protected_namespaces=())

    model: str
    default_prompt: str
    credentials: tuple[str, ...]


class AssetReference(BaseModel):
    uri: str
    media_type: str


class ResultEntry(BaseModel):
    filename: str
    prompt: str
    text: str | None = None
    error: str | None = None


class BatchResponse(BaseModel):
    results: list[ResultEntry]


class ErrorResponse(BaseModel):
    error: str


class ModelsResponse(BaseModel):
    default: str
    models: list[str]
