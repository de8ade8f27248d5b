from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    host: str = "127.0.0.1"
    port: int = 9000
    log_level: str = "INFO"
    storage_backend: str = "json"  # json, supabase
    data_file: Path = Path("formsmith_data.json")
    supabase_url: str = ""
    supabase_key: str = ""
    public_base_url: str = "http://localhost:9000"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
