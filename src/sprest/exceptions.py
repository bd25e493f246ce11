"""Exceptions raised by sprest.

Remote and transport failures surface where the caller receives the result:
raised directly for immediate calls, set on the future for batched calls.
Batch lifecycle errors are raised synchronously and never touch the network.
"""

from __future__ import annotations

from typing import Any


class SharePointError(Exception):
    """Base exception for sprest errors."""


class SharePointRequestError(SharePointError):
    """Raised when the remote service answers with a non-2xx status.

    The structured error payload is kept verbatim on :attr:`payload`; the
    message is only located, never translated.
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        *,
        payload: Any = None,
        url: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.message = message
        self.payload = payload
        self.url = url
        super().__init__(f"[HTTP {status_code}] {message}")


class BatchError(SharePointError):
    """Base exception for batch coordinator errors."""


class BatchClosedError(BatchError):
    """Raised when an operation is added to a batch that already executed."""


class BatchAlreadyExecutedError(BatchError):
    """Raised when ``execute`` is called a second time."""


class BatchProtocolError(BatchError):
    """Raised when a batch response cannot be matched to its requests."""
