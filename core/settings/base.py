# core/settings/base.py
from pydantic_settings import BaseSettings, SettingsConfigDict


class CareBaseSettings(BaseSettings):
    """Shared loading rules: exact env names via aliases, .env in the working directory."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )
