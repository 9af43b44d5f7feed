"""
Service Configuration

Settings are resolved, highest priority first, from:

1. Constructor arguments (tests)
2. Environment variables prefixed with ``REVCATGPT_``
3. A ``.env`` file in the working directory
4. A TOML file (``revcatgpt.toml`` or the path in ``REVCATGPT_CONFIG_FILE``)
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional, Tuple, Type
from urllib.parse import urlparse

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

PACKAGE_DIR = Path(__file__).parent
DEFAULT_CONFIG_FILE = "revcatgpt.toml"


class Settings(BaseSettings):
    # HTTP server
    local_addr: str = "localhost:81"
    external_addr: str = "http://localhost:81"
    tls_cert: Optional[str] = None
    tls_key: Optional[str] = None

    log_file: Optional[str] = None
    log_level: str = "DEBUG"

    templates_dir: str = str(PACKAGE_DIR / "templates")

    # Localization bundles (active.<lang>.toml)
    locale_default: str = "en"
    locale_folder: str = str(PACKAGE_DIR / "locales")
    locale_available: List[str] = Field(default_factory=lambda: ["de", "en", "fr", "it"])

    # RevCat GraphQL search backend
    revcat_endpoint: str = "http://localhost:8080/graphql"
    revcat_api_key: SecretStr = SecretStr("")
    revcat_insecure: bool = False

    # Embedding provider
    openai_api_key: SecretStr = Field(
        default=SecretStr(""),
        validation_alias=AliasChoices(
            "revcatgpt_openai_api_key", "openai_api_key", "openaiapikey"
        ),
    )
    openai_base_url: str = "https://api.openai.com/v1"
    embedding_model: str = "text-embedding-ada-002"

    # Context assembly
    token_model: str = "gpt-4-0314"
    cache_size: int = Field(default=100, ge=1)
    search_limit: int = Field(default=30, ge=1)
    token_budget: int = Field(default=3000, ge=1)
    request_timeout: float = 60.0

    model_config = SettingsConfigDict(
        env_prefix="REVCATGPT_",
        env_file=".env",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        toml_file = os.getenv("REVCATGPT_CONFIG_FILE", DEFAULT_CONFIG_FILE)
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            file_secret_settings,
        )

    @property
    def subpath(self) -> str:
        """Path component of the external address, e.g. ``/gpt`` or ``""``."""
        path = urlparse(self.external_addr).path.strip("/")
        return f"/{path}" if path else ""

    @property
    def tls_enabled(self) -> bool:
        return bool(self.tls_cert and self.tls_key)


settings = Settings()
