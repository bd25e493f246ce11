from __future__ import annotations

from concurrent.futures import CancelledError, Future

import pytest

from sprest.results import OperationResult, added_result, chain, updated_result


def test_chain__applies_immediately_to_plain_values() -> None:
    assert chain(2, lambda v: v * 10) == 20


def test_chain__resolves_when_source_resolves() -> None:
    source: Future = Future()
    derived = chain(source, lambda v: v + 1)

    assert isinstance(derived, Future)
    assert not derived.done()
    source.set_result(1)
    assert derived.result(timeout=0) == 2


def test_chain__propagates_source_exception() -> None:
    source: Future = Future()
    derived = chain(source, lambda v: v)
    source.set_exception(KeyError("x"))

    with pytest.raises(KeyError):
        derived.result(timeout=0)


def test_chain__mapper_exception_lands_on_derived() -> None:
    source: Future = Future()
    derived = chain(source, lambda v: v["missing"])
    source.set_result({})

    with pytest.raises(KeyError):
        derived.result(timeout=0)


def test_chain__cancelling_source_cancels_derived() -> None:
    source: Future = Future()
    derived = chain(source, lambda v: v)
    source.cancel()

    assert derived.cancelled()
    with pytest.raises(CancelledError):
        derived.result(timeout=0)


def test_added_and_updated_results__carry_resource() -> None:
    resource = object()

    added = added_result({"Name": "A"}, resource)
    assert added == OperationResult(data={"Name": "A"}, resource=resource)

    source: Future = Future()
    updated = updated_result(source, resource)
    source.set_result(None)
    assert updated.result(timeout=0) == OperationResult(data=None, resource=resource)
