import os
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings

DEFAULT_STORE_PATH = Path(__file__).resolve().parent / "data" / "local_store.json"


class Settings(BaseSettings):
    store_backend: Literal["memory", "json", "database"] = Field("json", alias="APTIDUDE_STORE_BACKEND")
    store_path: Path = Field(DEFAULT_STORE_PATH, alias="APTIDUDE_STORE_PATH")
    database_url: Optional[str] = Field(None, alias="APTIDUDE_DATABASE_URL")
    database_echo: bool = Field(False, alias="APTIDUDE_DATABASE_ECHO")
    log_level: str = Field("INFO", alias="APTIDUDE_LOG_LEVEL")

    class Config:
        env_file = os.getenv("ENV_FILE", ".env")
        env_file_encoding = "utf-8"
        case_sensitive = True
        populate_by_name = True


@lru_cache
def get_settings() -> Settings:
    try:
        return Settings()  # type: ignore[call-arg]
    except ValidationError as exc:
        raise RuntimeError(f"Invalid AptiDude configuration: {exc}") from exc
