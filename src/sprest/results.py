"""Typed results and the mapping of raw payloads onto them.

Immediate calls hand back values; batched calls hand back
:class:`concurrent.futures.Future` objects. :func:`chain` lets every mapper
be written once for both.
"""

from __future__ import annotations

from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar, Union

T = TypeVar("T")
U = TypeVar("U")
R = TypeVar("R")

Outcome = Union[T, Future[T]]


@dataclass(frozen=True)
class OperationResult(Generic[R]):
    """Raw server payload plus a follow-on handle to the affected resource."""

    data: Any
    resource: R | None = None


def chain(outcome: Outcome[T], fn: Callable[[T], U]) -> Outcome[U]:
    """Apply ``fn`` to an outcome now, or once its future resolves.

    Exceptions raised by the source future or by ``fn`` end up on the
    derived future; cancelling the source cancels the derived future.
    """
    if not isinstance(outcome, Future):
        return fn(outcome)

    derived: Future = Future()

    def _resolve(source: Future) -> None:
        if derived.cancelled():
            return
        if source.cancelled():
            derived.cancel()
            return
        error = source.exception()
        if error is not None:
            derived.set_exception(error)
            return
        try:
            value = fn(source.result())
        except Exception as exc:
            derived.set_exception(exc)
        else:
            derived.set_result(value)

    outcome.add_done_callback(_resolve)
    return derived


def added_result(outcome: Outcome[Any], resource: R) -> Outcome[OperationResult[R]]:
    """Result of an add: ``resource`` is derived from the new identity."""
    return chain(outcome, lambda data: OperationResult(data=data, resource=resource))


def updated_result(outcome: Outcome[Any], target: R) -> Outcome[OperationResult[R]]:
    """Result of an update: identity is unchanged, so the target is reused."""
    return chain(outcome, lambda data: OperationResult(data=data, resource=target))
