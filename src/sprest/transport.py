from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass, field
from typing import Callable, Mapping, Protocol

import requests

from .config import ClientSettings
from .odata import error_from_response

logger = logging.getLogger(__name__)

RETRY_STATUS_CODES = frozenset({429, 503, 504})


@dataclass(frozen=True)
class TransportResponse:
    """A successful HTTP response as seen by the core."""

    status: int
    text: str
    headers: Mapping[str, str] = field(default_factory=dict)
    reason: str | None = None


class Transport(Protocol):
    """Protocol for sending one HTTP request.

    Implementations return a :class:`TransportResponse` for 2xx answers and
    raise :class:`~sprest.exceptions.SharePointRequestError` (or their own
    network error) otherwise. The core never implements HTTP itself.
    """

    def send(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: bytes | None = None,
    ) -> TransportResponse:
        """Send a request and return the response."""
        raise NotImplementedError


class RequestsTransport:
    """:class:`Transport` implementation on top of :mod:`requests`."""

    def __init__(
        self,
        session: requests.Session | None = None,
        *,
        token_provider: Callable[[], str] | None = None,
        settings: ClientSettings | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            session: Session to send through; a new one is created if omitted.
            token_provider: Callable returning a bearer token, called per request.
            settings: Timeout, retry and TLS settings.
        """
        self._session = session or requests.Session()
        self._token_provider = token_provider
        self._settings = settings or ClientSettings()

    def _build_headers(self, headers: Mapping[str, str] | None) -> dict[str, str]:
        merged = dict(headers or {})
        if self._token_provider is not None:
            merged["Authorization"] = f"Bearer {self._token_provider()}"
        return merged

    def send(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: bytes | None = None,
    ) -> TransportResponse:
        # Only reads are safe to repeat.
        attempts = self._settings.max_retries + 1 if method.upper() == "GET" else 1

        for attempt in range(1, attempts + 1):
            response = self._session.request(
                method,
                url,
                headers=self._build_headers(headers),
                data=body,
                timeout=self._settings.timeout,
                verify=self._settings.verify_ssl,
            )
            if response.status_code < 400:
                return TransportResponse(
                    status=response.status_code,
                    text=response.text,
                    headers=dict(response.headers),
                    reason=response.reason,
                )
            if response.status_code not in RETRY_STATUS_CODES or attempt == attempts:
                raise error_from_response(
                    response.status_code, response.reason, response.text, url
                )

            retry_after = response.headers.get("Retry-After")
            if retry_after and retry_after.isdigit():
                delay = float(retry_after)
            else:
                delay = self._settings.retry_base_delay * (2 ** (attempt - 1))
                delay += random.uniform(0, 0.5)  # jitter
            logger.warning(
                "SharePoint API %s error. Retrying in %.1f seconds (attempt %d/%d)",
                response.status_code,
                delay,
                attempt,
                attempts - 1,
            )
            time.sleep(delay)
        raise RuntimeError("Unreachable")
