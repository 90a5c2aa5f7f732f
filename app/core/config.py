from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.core.errors import ConfigurationError


class Settings(BaseSettings):
    # -------------------------
    # App
    # -------------------------
    app_name: str = "Todo Service"
    environment: str = "production"
    log_level: str = "INFO"
    static_dir: str = str(Path(__file__).resolve().parent.parent / "static")

    # -------------------------
    # Cosmos connection source
    # "keyvault" is authoritative, "config" reads the CosmosDb section
    # -------------------------
    cosmos_secret_source: str = "keyvault"

    # -------------------------
    # Key Vault
    # -------------------------
    key_vault_uri: str | None = None
    key_vault_scope: str = "https://vault.azure.net/.default"

    azure_tenant_id: str | None = None
    azure_client_id: str | None = None
    azure_client_secret: str | None = None
    azure_authority_host: str | None = None

    secret_name_uri: str = "cosmosdbURI"
    secret_name_key: str = "cosmosdbKeys"
    secret_name_database: str = "cosmosDBDatabaseName"
    secret_name_container: str = "cosmosDBContainerName"

    # -------------------------
    # CosmosDb section
    # -------------------------
    cosmosdb_account: str | None = None
    cosmosdb_key: str | None = None
    cosmosdb_database_name: str | None = None
    cosmosdb_container_name: str | None = None

    # -------------------------
    # HTTP pipeline
    # -------------------------
    hsts_max_age: int = 31536000
    cookie_consent_name: str = "cookie_consent"
    essential_cookies: str = ""

    # -------------------------
    # Pydantic v2 config
    # -------------------------
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @model_validator(mode="after")
    def _check_source(self) -> "Settings":
        if self.cosmos_secret_source == "keyvault":
            if not self.key_vault_uri:
                raise ConfigurationError("KEY_VAULT_URI not set")
            if self.azure_client_secret:
                missing = [
                    name
                    for name in ("azure_tenant_id", "azure_client_id")
                    if not getattr(self, name)
                ]
                if missing:
                    raise ConfigurationError(
                        f"Client secret set without {', '.join(missing)}"
                    )
        elif self.cosmos_secret_source == "config":
            missing = [
                name
                for name in (
                    "cosmosdb_account",
                    "cosmosdb_key",
                    "cosmosdb_database_name",
                    "cosmosdb_container_name",
                )
                if not getattr(self, name)
            ]
            if missing:
                raise ConfigurationError(
                    f"CosmosDb section incomplete: {', '.join(missing)}"
                )
        else:
            raise ConfigurationError(
                f"Unknown cosmos_secret_source: {self.cosmos_secret_source}"
            )
        return self

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    @property
    def secret_names(self) -> List[str]:
        """Vault keys in the order they are resolved."""
        return [
            self.secret_name_uri,
            self.secret_name_key,
            self.secret_name_database,
            self.secret_name_container,
        ]

    @property
    def essential_cookie_names(self) -> List[str]:
        return [c.strip() for c in self.essential_cookies.split(",") if c.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
