"""Process configuration, read from ``BRAIN_*`` environment variables or ``.env``."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="BRAIN_", env_file=".env", extra="ignore")

    # Basic-auth credential pair every request must present
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    tasks_dir: Path = Path("tasks")

    host: str = "0.0.0.0"
    port: int = 8080
    # TLS is served only when both files are given
    tls_cert_file: Path | None = None
    tls_key_file: Path | None = None

    log_level: str = "INFO"

    @model_validator(mode="after")
    def _check_tls_pair(self) -> "Settings":
        if (self.tls_cert_file is None) != (self.tls_key_file is None):
            raise ValueError("BRAIN_TLS_CERT_FILE and BRAIN_TLS_KEY_FILE must be set together")
        return self

    @property
    def tls_enabled(self) -> bool:
        return self.tls_cert_file is not None


@lru_cache()
def get_settings() -> Settings:
    return Settings()
