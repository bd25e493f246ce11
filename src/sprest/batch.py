"""Grouping of operations into a single ``$batch`` request.

Operations are serialized in the order they were added into a
``multipart/mixed`` document. The service answers with one sub-response per
sub-request in the same order and without correlation ids, so the
sub-responses are matched to placeholders purely by position.

A batch is meant to be filled and executed by one owner; it does not lock.
"""

from __future__ import annotations

import email
import logging
import re
from concurrent.futures import Future
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from .exceptions import BatchAlreadyExecutedError, BatchClosedError, BatchProtocolError
from .odata import error_from_response, parse_body
from .operations import PendingOperation, Verb
from .utils import combine, extract_web_url, is_url_absolute

if TYPE_CHECKING:
    from .transport import Transport, TransportResponse

logger = logging.getLogger(__name__)

_STATUS_LINE = re.compile(r"^HTTP/[0-9.]+\s+([0-9]+)\s*(.*)$", re.IGNORECASE)

SubResponse = tuple[int, str, str]


class Batch:
    """Collects operations and sends them as one grouped request.

    Example:
        with client.create_batch() as batch:
            folders = client.web.folders.in_batch(batch)
            reports = folders.add("Reports")
            archive = folders.add("Archive")
        print(reports.result().resource)
    """

    def __init__(
        self,
        base_url: str,
        transport: "Transport",
        *,
        batch_id: str | None = None,
    ) -> None:
        """Initialize an empty batch.

        Args:
            base_url: Any URL of the target web; the web URL is extracted from it.
            transport: Transport the grouped request is sent with.
            batch_id: Boundary id, generated when omitted.
        """
        self._base_url = extract_web_url(base_url)
        self._transport = transport
        self._batch_id = batch_id or str(uuid4())
        self._queue: list[tuple[PendingOperation, Future]] = []
        self._executed = False

    def __len__(self) -> int:
        return len(self._queue)

    def __enter__(self) -> "Batch":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None:
            if not self._executed:
                self.execute()
            return False

        self._executed = True
        for _, future in self._queue:
            future.cancel()
        return False

    @property
    def batch_id(self) -> str:
        return self._batch_id

    @property
    def executed(self) -> bool:
        return self._executed

    def ensure_open(self, what: str = "new operations") -> None:
        """Raise ``BatchClosedError`` if the batch can no longer accept ``what``."""
        if self._executed:
            raise BatchClosedError(f"Batch {self._batch_id} has already executed; it cannot accept {what}.")

    def add(self, op: PendingOperation) -> Future:
        """Queue an operation and return the placeholder for its result.

        Raises:
            BatchClosedError: If the batch has already executed.
        """
        self.ensure_open(f"{op.verb.value} {op.url}")
        future: Future = Future()
        self._queue.append((op, future))
        return future

    def execute(self) -> None:
        """Send all queued operations and resolve their placeholders.

        A failing sub-response only rejects its own placeholder. When the
        grouped request fails, or its response cannot be matched to the
        queue, every placeholder is rejected and the error is raised here too.

        Raises:
            BatchAlreadyExecutedError: If called more than once.
            BatchProtocolError: If the number of sub-responses is wrong.
        """
        if self._executed:
            raise BatchAlreadyExecutedError(f"Batch {self._batch_id} has already been executed.")
        self._executed = True

        if not self._queue:
            logger.debug("Batch %s is empty, nothing to send.", self._batch_id)
            return

        logger.info("Executing batch %s with %d operation(s).", self._batch_id, len(self._queue))
        try:
            response = self._transport.send(
                "POST",
                combine(self._base_url, "_api/$batch"),
                headers={
                    "Accept": "application/json",
                    "Content-Type": f'multipart/mixed; boundary="batch_{self._batch_id}"',
                },
                body=self._serialize(),
            )
            responses = self._split_response(response)
            if len(responses) != len(self._queue):
                raise BatchProtocolError(
                    "Could not properly parse responses to match requests in batch "
                    f"(expected {len(self._queue)}, got {len(responses)})."
                )
        except Exception as exc:
            self._reject_all(exc)
            raise

        for (op, future), (status, reason, body) in zip(self._queue, responses):
            if future.cancelled():
                continue
            if status >= 400:
                future.set_exception(error_from_response(status, reason, body, op.url))
            else:
                future.set_result(parse_body(status, body, raw=op.raw))
        logger.info("Batch %s resolved %d operation(s).", self._batch_id, len(responses))

    def _reject_all(self, error: BaseException) -> None:
        for _, future in self._queue:
            if not future.done():
                future.set_exception(error)

    def _serialize(self) -> bytes:
        lines: list[str] = []
        changeset: str | None = None

        for op, _ in self._queue:
            if op.verb is Verb.GET:
                if changeset is not None:
                    lines.append(f"--changeset_{changeset}--\r\n\r\n")
                    changeset = None
                lines.append(f"--batch_{self._batch_id}\r\n")
            else:
                if changeset is None:
                    changeset = str(uuid4())
                    lines.append(f"--batch_{self._batch_id}\r\n")
                    lines.append(
                        f'Content-Type: multipart/mixed; boundary="changeset_{changeset}"\r\n\r\n'
                    )
                lines.append(f"--changeset_{changeset}\r\n")

            lines.append("Content-Type: application/http\r\n")
            lines.append("Content-Transfer-Encoding: binary\r\n\r\n")

            url = op.url if is_url_absolute(op.url) else combine(self._base_url, op.url)
            lines.append(f"{op.verb.value} {url} HTTP/1.1\r\n")
            for name, value in op.request_headers().items():
                lines.append(f"{name}: {value}\r\n")
            lines.append("\r\n")

            body = op.encoded_body()
            if body:
                lines.append(body.decode("utf-8", errors="surrogateescape") + "\r\n\r\n")

        if changeset is not None:
            lines.append(f"--changeset_{changeset}--\r\n\r\n")
        lines.append(f"--batch_{self._batch_id}--\r\n")
        return "".join(lines).encode("utf-8", errors="surrogateescape")

    @staticmethod
    def _split_response(response: "TransportResponse") -> list[SubResponse]:
        """Split a ``multipart/mixed`` batch response into sub-responses.

        Nested changeset responses are flattened in document order.
        """
        content_type = next(
            (value for name, value in response.headers.items() if name.lower() == "content-type"),
            "",
        )
        text = response.text or ""
        if "boundary=" not in content_type:
            first = next((line for line in text.splitlines() if line.strip()), "")
            if not first.startswith("--"):
                raise BatchProtocolError("Batch response is not a multipart document.")
            content_type = f'multipart/mixed; boundary="{first[2:].strip()}"'

        message = email.message_from_string(f"Content-Type: {content_type}\r\n\r\n{text}")
        return [
            _parse_http_part(part.get_payload())
            for part in message.walk()
            if part.get_content_type() == "application/http"
        ]


def _parse_http_part(payload: Any) -> SubResponse:
    text = str(payload).replace("\r\n", "\n").lstrip("\n")
    head, _, body = text.partition("\n\n")
    status_line = head.split("\n", 1)[0].strip()
    match = _STATUS_LINE.match(status_line)
    if match is None:
        raise BatchProtocolError(f"Invalid status line in batch response: {status_line!r}")
    return int(match.group(1)), match.group(2).strip(), body.strip()
