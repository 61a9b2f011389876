from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    app_name: str = "image-annotation-service"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "info"
    cors_origins: list[str] = ["*"]

    google_api_keys: str = ""
    google_api_key: str = ""
    credential_strategy: Literal["random", "round-robin"] = "random"

    default_model: str = "gemini-2.5-flash"
    default_prompt: str = ""
    available_models: list[str] = ["gemini-2.5-flash", "gemini-2.0-flash-exp", "gemini-1.5-pro"]
    locale: str = "en"

    staging_path: str = ""
    max_image_size: int = 3072
    generation_timeout: float = 120.0


settings = Settings()
