from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .auth import get_credential, token_provider
from .batch import Batch
from .config import ClientSettings
from .transport import RequestsTransport, Transport
from .utils import ensure_scheme
from .web import Web

if TYPE_CHECKING:
    from azure.core.credentials import TokenCredential

logger = logging.getLogger(__name__)


@dataclass
class SharePointClient:
    """Entry point for a specific SharePoint site.

    The client owns the transport and hands out root handles; there is no
    process-wide default instance, so every handle traces back to the client
    that created it.
    """

    _site_url: str
    _settings: ClientSettings
    _transport: Transport

    def __init__(
        self,
        site_url: str | None = None,
        *,
        transport: Transport | None = None,
        credential: "TokenCredential | None" = None,
        settings: ClientSettings | None = None,
    ) -> None:
        """Initialize the client for a site.

        Args:
            site_url: The URL of the SharePoint site. Falls back to
                ``SHAREPOINT_SITE_URL``; ``https://`` is assumed when the
                scheme is missing.
            transport: Transport to send requests with. When omitted a
                :class:`RequestsTransport` authenticated with ``credential``
                is created.
            credential: Azure credential for the default transport. When
                omitted it is built from ``settings``.
            settings: Client settings; read from the environment if omitted.

        Raises:
            ValueError: If no site URL is given or configured.
        """
        self._settings = settings or ClientSettings()
        site_url = site_url or self._settings.site_url
        if not site_url:
            raise ValueError("site_url is required, pass it or set SHAREPOINT_SITE_URL.")

        self._site_url = ensure_scheme(site_url)
        self._transport = transport or self._create_transport(credential)

    @property
    def site_url(self) -> str:
        return self._site_url

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def web(self) -> Web:
        """Return the root handle of the site."""
        return Web(self._site_url, transport=self._transport)

    def create_batch(self) -> Batch:
        """Create a batch for this site; see :class:`Batch`."""
        return self.web.create_batch()

    def _create_transport(self, credential: "TokenCredential | None") -> Transport:
        credential = credential or get_credential(self._settings)
        logger.debug("Creating requests transport for %s", self._site_url)
        return RequestsTransport(
            token_provider=token_provider(credential, self._site_url),
            settings=self._settings,
        )
