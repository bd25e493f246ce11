"""Credential plumbing between azure-identity and the HTTP transport."""

from __future__ import annotations

from typing import Callable

from azure.core.credentials import TokenCredential
from azure.identity import (
    ClientSecretCredential,
    DefaultAzureCredential,
    get_bearer_token_provider,
)

from .config import ClientSettings
from .utils import spo_scope_from_url


def get_credential(settings: ClientSettings | None = None) -> TokenCredential:
    """Construct a :class:`TokenCredential` from :class:`ClientSettings`.

    Args:
        settings: Client settings. If ``None``, they are read from the environment.

    Returns:
        A ``ClientSecretCredential`` when an app secret is configured,
        otherwise ``DefaultAzureCredential``.
    """
    cfg = settings or ClientSettings()
    if cfg.client_secret:
        return ClientSecretCredential(
            tenant_id=cfg.tenant_id,
            client_id=cfg.client_id,
            client_secret=cfg.client_secret.get_secret_value(),
        )
    return DefaultAzureCredential()


def token_provider(credential: TokenCredential, site_url: str) -> Callable[[], str]:
    """Return a callable producing bearer tokens scoped to the site's tenant."""
    return get_bearer_token_provider(credential, spo_scope_from_url(site_url))
