from __future__ import annotations

import os
from typing import Iterator

import pytest

from sprest.web import Web

from fakes import SITE_URL, RecordingTransport


@pytest.fixture()
def clear_sharepoint_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Remove SHAREPOINT_* and AZURE_* vars to prevent cross-test leakage."""
    to_clear = [k for k in os.environ if k.startswith(("SHAREPOINT_", "AZURE_"))]
    for k in to_clear:
        monkeypatch.delenv(k, raising=False)
    yield


@pytest.fixture()
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture()
def web(transport: RecordingTransport) -> Web:
    return Web(SITE_URL, transport=transport)
