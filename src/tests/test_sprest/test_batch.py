from __future__ import annotations

import json
from concurrent.futures import Future

import pytest

from sprest.batch import Batch
from sprest.exceptions import (
    BatchAlreadyExecutedError,
    BatchClosedError,
    BatchProtocolError,
    SharePointRequestError,
)
from sprest.results import OperationResult
from sprest.transport import TransportResponse
from sprest.web import Web

from fakes import SITE_URL, RecordingTransport, batch_response

BATCH_URL = f"{SITE_URL}/_api/$batch"


def _ok(payload) -> tuple[int, str, str]:
    return 200, "OK", json.dumps({"d": payload})


@pytest.fixture()
def batch(web: Web, transport: RecordingTransport) -> Batch:
    return Batch(web.to_url(), transport, batch_id="b1")


def test_batched_calls__return_placeholders_without_network(
    web: Web, transport: RecordingTransport, batch: Batch
) -> None:
    folders = web.folders.in_batch(batch)
    reports = folders.add("Reports")
    archive = folders.add("Archive")

    assert isinstance(reports, Future) and isinstance(archive, Future)
    assert len(batch) == 2
    assert transport.calls == []


def test_execute__resolves_placeholders_by_position(
    web: Web, transport: RecordingTransport, batch: Batch
) -> None:
    folders = web.folders.in_batch(batch)
    reports = folders.add("Reports")
    title = web.in_batch(batch).select("Title").get()
    archive = folders.add("Archive")
    transport.queue(
        batch_response(
            _ok({"Name": "Reports"}),
            _ok({"Title": "Source"}),
            _ok({"Name": "Archive"}),
        )
    )

    batch.execute()

    assert len(transport.calls) == 1
    assert transport.calls[0].method == "POST"
    assert transport.calls[0].url == BATCH_URL
    assert reports.result(timeout=0).data == {"Name": "Reports"}
    assert reports.result(timeout=0).resource.to_url() == f"{SITE_URL}/_api/web/folders('Reports')"
    assert title.result(timeout=0) == {"Title": "Source"}
    assert archive.result(timeout=0).data == {"Name": "Archive"}
    assert batch.executed


def test_execute__failed_sub_response_rejects_only_its_placeholder(
    web: Web, transport: RecordingTransport, batch: Batch
) -> None:
    folders = web.folders.in_batch(batch)
    first = folders.add("A")
    second = folders.add("B")
    third = folders.add("C")
    error = {"error": {"code": "-2147024713", "message": {"lang": "en-US", "value": "Already exists."}}}
    transport.queue(
        batch_response(_ok({"Name": "A"}), (409, "Conflict", json.dumps(error)), _ok({"Name": "C"}))
    )

    batch.execute()

    assert first.result(timeout=0).data == {"Name": "A"}
    assert third.result(timeout=0).data == {"Name": "C"}
    exc = second.exception(timeout=0)
    assert isinstance(exc, SharePointRequestError)
    assert exc.status_code == 409
    assert exc.message == "Already exists."
    assert exc.payload == error
    assert exc.url == f"{SITE_URL}/_api/web/folders/add('B')"


def test_execute__count_mismatch_rejects_everything(
    web: Web, transport: RecordingTransport, batch: Batch
) -> None:
    folders = web.folders.in_batch(batch)
    first = folders.add("A")
    second = folders.add("B")
    transport.queue(batch_response(_ok({"Name": "A"})))

    with pytest.raises(BatchProtocolError, match="expected 2, got 1"):
        batch.execute()

    assert isinstance(first.exception(timeout=0), BatchProtocolError)
    assert isinstance(second.exception(timeout=0), BatchProtocolError)


def test_execute__transport_failure_rejects_everything(
    web: Web, transport: RecordingTransport, batch: Batch
) -> None:
    pending = web.in_batch(batch).get()
    failure = SharePointRequestError(401, "Unauthorized")
    transport.queue(failure)

    with pytest.raises(SharePointRequestError):
        batch.execute()
    assert pending.exception(timeout=0) is failure


def test_execute__twice_raises_without_network(
    web: Web, transport: RecordingTransport, batch: Batch
) -> None:
    web.in_batch(batch).get()
    transport.queue(batch_response(_ok({})))
    batch.execute()

    with pytest.raises(BatchAlreadyExecutedError):
        batch.execute()
    assert len(transport.calls) == 1


def test_add_after_execute__raises_closed_without_network(
    web: Web, transport: RecordingTransport, batch: Batch
) -> None:
    batched_web = web.in_batch(batch)
    batched_web.get()
    transport.queue(batch_response(_ok({})))
    batch.execute()

    with pytest.raises(BatchClosedError):
        batched_web.folders.add("Late")
    assert len(transport.calls) == 1


def test_execute__empty_batch_sends_nothing(transport: RecordingTransport, batch: Batch) -> None:
    batch.execute()
    assert transport.calls == []
    assert batch.executed


def test_execute__skips_cancelled_placeholders(
    web: Web, transport: RecordingTransport, batch: Batch
) -> None:
    first = web.in_batch(batch).get()
    second = web.in_batch(batch).folders.get()
    assert first.cancel()
    transport.queue(batch_response(_ok({"Title": "x"}), _ok({"results": []})))

    batch.execute()

    assert first.cancelled()
    assert second.result(timeout=0) == []


def test_serialize__groups_writes_into_changesets(web: Web, batch: Batch) -> None:
    web.in_batch(batch).select("Title").get()
    folders = web.folders.in_batch(batch)
    folders.add("Reports")
    folders.get_by_name("Old").delete(etag='"1"')
    folders.get_by_name("Docs").update({"Name": "New"})

    body = batch._serialize().decode("utf-8")

    assert body.startswith("--batch_b1\r\n")
    assert body.endswith("--batch_b1--\r\n")
    assert body.count("--batch_b1\r\n") == 2
    assert "Content-Type: multipart/mixed; boundary=\"changeset_" in body
    assert f"GET {SITE_URL}/_api/web?$select=Title HTTP/1.1\r\n" in body
    assert f"POST {SITE_URL}/_api/web/folders/add('Reports') HTTP/1.1\r\n" in body
    assert f"DELETE {SITE_URL}/_api/web/folders('Old') HTTP/1.1\r\n" in body
    assert f"PATCH {SITE_URL}/_api/web/folders('Docs') HTTP/1.1\r\n" in body
    assert 'If-Match: "1"\r\n' in body
    assert "Content-Type: application/json;odata=verbose;charset=utf-8\r\n" in body
    assert '{"__metadata": {"type": "SP.Folder"}, "Name": "New"}' in body
    assert body.index("GET ") < body.index("POST ") < body.index("DELETE ") < body.index("PATCH ")


def test_execute__sends_multipart_headers(web: Web, transport: RecordingTransport, batch: Batch) -> None:
    web.in_batch(batch).get()
    transport.queue(batch_response(_ok({})))
    batch.execute()

    headers = transport.calls[0].headers
    assert headers["Content-Type"] == 'multipart/mixed; boundary="batch_b1"'
    assert transport.calls[0].body == batch._serialize()


def test_execute__flattens_changeset_responses(
    web: Web, transport: RecordingTransport, batch: Batch
) -> None:
    read = web.in_batch(batch).get()
    folders = web.folders.in_batch(batch)
    added = folders.add("A")
    deleted = folders.get_by_name("B").delete()
    text = "\r\n".join(
        [
            "--batchresponse_x",
            "Content-Type: application/http",
            "Content-Transfer-Encoding: binary",
            "",
            "HTTP/1.1 200 OK",
            "CONTENT-TYPE: application/json;odata=verbose;charset=utf-8",
            "",
            json.dumps({"d": {"Title": "Source"}}),
            "--batchresponse_x",
            "Content-Type: multipart/mixed; boundary=changesetresponse_y",
            "",
            "--changesetresponse_y",
            "Content-Type: application/http",
            "Content-Transfer-Encoding: binary",
            "",
            "HTTP/1.1 201 Created",
            "CONTENT-TYPE: application/json;odata=verbose;charset=utf-8",
            "",
            json.dumps({"d": {"Name": "A"}}),
            "--changesetresponse_y",
            "Content-Type: application/http",
            "Content-Transfer-Encoding: binary",
            "",
            "HTTP/1.1 204 No Content",
            "",
            "",
            "--changesetresponse_y--",
            "--batchresponse_x--",
            "",
        ]
    )
    transport.queue(
        TransportResponse(
            status=200,
            text=text,
            headers={"content-type": "multipart/mixed; boundary=batchresponse_x"},
        )
    )

    batch.execute()

    assert read.result(timeout=0) == {"Title": "Source"}
    assert added.result(timeout=0).data == {"Name": "A"}
    assert deleted.result(timeout=0) is None


def test_execute__sniffs_boundary_when_header_is_missing(
    web: Web, transport: RecordingTransport, batch: Batch
) -> None:
    read = web.in_batch(batch).get()
    transport.queue(batch_response(_ok({"Title": "Source"}), with_header=False))

    batch.execute()
    assert read.result(timeout=0) == {"Title": "Source"}


def test_execute__non_multipart_response_is_protocol_error(
    web: Web, transport: RecordingTransport, batch: Batch
) -> None:
    read = web.in_batch(batch).get()
    transport.queue(TransportResponse(status=200, text='{"d": {}}'))

    with pytest.raises(BatchProtocolError):
        batch.execute()
    assert isinstance(read.exception(timeout=0), BatchProtocolError)


def test_context_manager__executes_on_exit(web: Web, transport: RecordingTransport) -> None:
    transport.queue(batch_response(_ok({"Name": "Reports"})))

    with web.create_batch() as batch:
        result = web.folders.in_batch(batch).add("Reports")

    assert batch.executed
    assert isinstance(result.result(timeout=0), OperationResult)


def test_context_manager__cancels_on_error(web: Web, transport: RecordingTransport) -> None:
    with pytest.raises(RuntimeError):
        with web.create_batch() as batch:
            result = web.folders.in_batch(batch).add("Reports")
            raise RuntimeError("abort")

    assert result.cancelled()
    assert transport.calls == []
    with pytest.raises(BatchClosedError):
        web.in_batch(batch).get()


def test_batch__uses_web_url_of_any_handle(transport: RecordingTransport) -> None:
    batch = Batch(f"{SITE_URL}/_api/web/folders('x')/files", transport, batch_id="b2")
    Web(SITE_URL).in_batch(batch).get()
    transport.queue(batch_response(_ok({})))
    batch.execute()
    assert transport.calls[0].url == BATCH_URL


def test_ensure_open__raises_once_executed(batch: Batch) -> None:
    batch.ensure_open()
    batch.execute()

    with pytest.raises(BatchClosedError, match="cannot accept folder.move_to"):
        batch.ensure_open("folder.move_to")
