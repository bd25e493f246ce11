from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Mapping

from .exceptions import SharePointError
from .odata import parse_body

if TYPE_CHECKING:
    from .queryable import Queryable

logger = logging.getLogger(__name__)

ACCEPT = "application/json;odata=verbose"
JSON_CONTENT_TYPE = "application/json;odata=verbose;charset=utf-8"


class Verb(str, Enum):
    GET = "GET"
    POST = "POST"
    PATCH = "PATCH"
    DELETE = "DELETE"


@dataclass(frozen=True)
class PendingOperation:
    """One request bound to a resource handle, consumed exactly once."""

    verb: Verb
    target: "Queryable"
    body: Any = None
    headers: Mapping[str, str] = field(default_factory=dict)
    tag: str | None = None
    raw: bool = False

    @property
    def url(self) -> str:
        return self.target.to_url()

    @property
    def is_json(self) -> bool:
        return self.body is not None and not isinstance(self.body, (str, bytes))

    def request_headers(self) -> dict[str, str]:
        headers = {"Accept": ACCEPT}
        if self.is_json:
            headers["Content-Type"] = JSON_CONTENT_TYPE
        headers.update(self.headers)
        return headers

    def encoded_body(self) -> bytes | None:
        if self.body is None:
            return None
        if isinstance(self.body, bytes):
            return self.body
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return json.dumps(self.body).encode("utf-8")


def dispatch(op: PendingOperation) -> Any:
    """Send an operation now, or queue it when its target is batched.

    Returns:
        The parsed payload, or a :class:`~concurrent.futures.Future` of it
        for batched targets.

    Raises:
        BatchClosedError: If the target's batch has already executed.
        SharePointError: If the target has neither a batch nor a transport.
    """
    batch = op.target.batch
    if batch is not None:
        logger.debug("Queueing %s %s [%s] in batch %s", op.verb.value, op.url, op.tag, batch.batch_id)
        return batch.add(op)

    transport = op.target.transport
    if transport is None:
        raise SharePointError(f"No transport is bound to {op.target!r}.")

    logger.debug("%s %s [%s]", op.verb.value, op.url, op.tag)
    response = transport.send(
        op.verb.value,
        op.url,
        headers=op.request_headers(),
        body=op.encoded_body(),
    )
    return parse_body(response.status, response.text, raw=op.raw)


def sp_get(
    target: "Queryable",
    *,
    headers: Mapping[str, str] | None = None,
    tag: str | None = None,
    raw: bool = False,
) -> Any:
    return dispatch(
        PendingOperation(Verb.GET, target, headers=dict(headers or {}), tag=tag, raw=raw)
    )


def sp_post(
    target: "Queryable",
    body: Any = None,
    *,
    headers: Mapping[str, str] | None = None,
    tag: str | None = None,
) -> Any:
    return dispatch(
        PendingOperation(Verb.POST, target, body=body, headers=dict(headers or {}), tag=tag)
    )


def sp_patch(
    target: "Queryable",
    body: Any = None,
    *,
    headers: Mapping[str, str] | None = None,
    tag: str | None = None,
) -> Any:
    return dispatch(
        PendingOperation(Verb.PATCH, target, body=body, headers=dict(headers or {}), tag=tag)
    )


def sp_delete(
    target: "Queryable",
    *,
    headers: Mapping[str, str] | None = None,
    tag: str | None = None,
) -> Any:
    return dispatch(
        PendingOperation(Verb.DELETE, target, headers=dict(headers or {}), tag=tag)
    )
