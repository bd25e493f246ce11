from __future__ import annotations

from pydantic import AliasChoices, Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .utils import ensure_scheme, is_url_absolute


class ClientSettings(BaseSettings):
    """Settings for the SharePoint client and its HTTP transport.

    Values are read from the environment automatically. Field names are
    accepted as well as the environment names listed below.

    Environment variables:
        - SHAREPOINT_SITE_URL
        - SHAREPOINT_TIMEOUT
        - SHAREPOINT_MAX_RETRIES
        - SHAREPOINT_RETRY_BASE_DELAY
        - SHAREPOINT_VERIFY_SSL
        - AZURE_TENANT_ID
        - AZURE_CLIENT_ID
        - AZURE_CLIENT_SECRET
    """

    model_config = SettingsConfigDict(
        case_sensitive=False,
        extra="ignore",
    )

    site_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("site_url", "SHAREPOINT_SITE_URL"),
    )
    timeout: float = Field(
        default=60.0,
        gt=0,
        validation_alias=AliasChoices("timeout", "SHAREPOINT_TIMEOUT"),
    )
    max_retries: int = Field(
        default=5,
        ge=0,
        validation_alias=AliasChoices("max_retries", "SHAREPOINT_MAX_RETRIES"),
    )
    retry_base_delay: float = Field(
        default=1.0,
        ge=0,
        validation_alias=AliasChoices("retry_base_delay", "SHAREPOINT_RETRY_BASE_DELAY"),
    )
    verify_ssl: bool = Field(
        default=True,
        validation_alias=AliasChoices("verify_ssl", "SHAREPOINT_VERIFY_SSL"),
    )
    tenant_id: str | None = Field(
        default=None, validation_alias=AliasChoices("tenant_id", "AZURE_TENANT_ID")
    )
    client_id: str | None = Field(
        default=None, validation_alias=AliasChoices("client_id", "AZURE_CLIENT_ID")
    )
    client_secret: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("client_secret", "AZURE_CLIENT_SECRET"),
    )

    @field_validator("site_url")
    @classmethod
    def _ensure_absolute_url(cls, v: str | None) -> str | None:
        """Ensure the site URL includes a host, defaulting the scheme to https."""
        if v is not None:
            v = ensure_scheme(v)
        if v is not None and not is_url_absolute(v):
            raise ValueError(f"site_url must be an absolute URL: {v}")
        return v

    @model_validator(mode="after")
    def _client_secret_requires_app(self) -> "ClientSettings":
        if self.client_secret and not (self.tenant_id and self.client_id):
            raise ValueError("client_secret requires tenant_id and client_id.")
        return self
