"""Parsing of OData JSON payloads returned by the REST API."""

from __future__ import annotations

import json
import logging
from typing import Any

from .exceptions import SharePointRequestError
from .utils import combine, extract_web_url

logger = logging.getLogger(__name__)


def parse_odata_json(payload: Any) -> Any:
    """Unwrap the verbose (``d`` / ``d.results``) or light (``value``) envelope."""
    if not isinstance(payload, dict):
        return payload
    if "d" in payload:
        inner = payload["d"]
        if isinstance(inner, dict) and "results" in inner:
            return inner["results"]
        return inner
    if "value" in payload:
        return payload["value"]
    return payload


def parse_body(status: int, text: str | None, raw: bool = False) -> Any:
    """Turn a successful response body into a Python value.

    Args:
        status: HTTP status of the (sub-)response.
        text: Decoded body text.
        raw: Return the text untouched instead of decoding JSON.

    Returns:
        ``None`` for 204 or an empty body, the text when ``raw`` is set or
        the body is not JSON, otherwise the unwrapped JSON value.
    """
    if status == 204 or not text or not text.strip():
        return None
    if raw:
        return text
    try:
        payload = json.loads(text)
    except ValueError:
        return text
    return parse_odata_json(payload)


def error_message(payload: Any) -> str | None:
    """Locate the human readable message inside an OData error payload."""
    if not isinstance(payload, dict):
        return None
    error = payload.get("odata.error") or payload.get("error")
    if isinstance(error, str):
        return error
    if not isinstance(error, dict):
        return None
    message = error.get("message")
    if isinstance(message, dict):
        return message.get("value")
    return message


def error_from_response(
    status: int, reason: str | None, text: str | None, url: str | None = None
) -> SharePointRequestError:
    try:
        payload: Any = json.loads(text) if text else text
    except ValueError:
        payload = text
    message = error_message(payload) or reason or (text or "").strip() or "Request failed"
    return SharePointRequestError(status, message, payload=payload, url=url)


def entity_url(entity: Any) -> str:
    """Return the REST URL of an entity from its OData metadata.

    Webs carry an absolute URL in ``odata.id``; other entities are
    addressed by ``odata.editLink`` (rooted at the web found in
    ``odata.metadata`` when present). Verbose payloads carry
    ``__metadata.uri``.
    """
    if not isinstance(entity, dict):
        entity = {}
    parts: list[str] = []
    metadata = entity.get("__metadata")
    verbose_uri = metadata.get("uri") if isinstance(metadata, dict) else None

    if entity.get("odata.type") == "SP.Web":
        if "odata.id" in entity:
            parts.append(entity["odata.id"])
        elif verbose_uri:
            parts.append(verbose_uri)
    elif "odata.metadata" in entity and "odata.editLink" in entity:
        parts.extend(
            [extract_web_url(entity["odata.metadata"]), "_api", entity["odata.editLink"]]
        )
    elif "odata.editLink" in entity:
        parts.extend(["_api", entity["odata.editLink"]])
    elif verbose_uri:
        parts.append(verbose_uri)

    if not parts:
        logger.warning(
            "No uri information found in entity, chaining will fail for this object."
        )
        return ""
    return combine(*parts)
