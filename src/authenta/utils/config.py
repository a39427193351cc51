"""
Runtime configuration using pydantic-settings.

Values come from ``AUTHENTA_*`` environment variables, then an optional
``.env`` file, then the defaults below. Crypto parameters are deliberately not
configurable: the stored payload formats do not record them, so changing them
would make existing records undecryptable.
"""
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "Authenta"

    # Document store
    STORE_PATH: str = "./authenta_store.json"
    INVENTIONS_COLLECTION: str = "inventions"
    VAULT_ITEMS_COLLECTION: str = "vault_items"

    # Embedded payloads larger than this are rejected by the store
    MAX_DOCUMENT_BYTES: int = 1_048_576

    # Credential vault
    MIN_MASTER_PASSWORD_LENGTH: int = 4

    LOG_LEVEL: str = "INFO"

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return str(v).strip().upper() or "INFO"

    @field_validator("MAX_DOCUMENT_BYTES", "MIN_MASTER_PASSWORD_LENGTH")
    @classmethod
    def must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be a positive integer")
        return v

    model_config = SettingsConfigDict(
        env_prefix="AUTHENTA_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """Cached settings instance, loaded once per process."""
    return Settings()
