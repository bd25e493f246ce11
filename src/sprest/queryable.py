"""Composable handles to addressable REST resources.

A handle carries everything needed to build a request URL (base URL, path
segments, query parameters) plus the transport and, optionally, the batch
its operations go to. Handles are never modified: every derivation or query
change returns a new handle, so a handle can be shared between threads.
"""

from __future__ import annotations

import copy
import urllib.parse
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, ClassVar, Mapping, Type, TypeVar

from .metadata import default_path_for, tag_for
from .operations import sp_delete, sp_get, sp_patch
from .paths import PathBuilder
from .results import OperationResult, Outcome, updated_result

if TYPE_CHECKING:
    from .batch import Batch
    from .transport import Transport

Q = TypeVar("Q", bound="Queryable")

# OData punctuation that stays readable in query values.
_QUERY_SAFE = "$,'()/:@*!~="


class Queryable:
    """A handle to one remote resource (the ``ResourceRef``).

    Args:
        base: Absolute URL string or a parent handle. A parent passes on its
            transport and batch; its query parameters are not inherited.
        path: Path appended to the base. Defaults to the kind's default path.
        transport: Transport used for immediate requests.
        batch: Batch to queue operations in.
        tag: Tag used in request logs.
    """

    kind: ClassVar[str] = "queryable"

    def __init__(
        self,
        base: str | Queryable,
        path: str | None = None,
        *,
        transport: "Transport | None" = None,
        batch: "Batch | None" = None,
        tag: str | None = None,
    ) -> None:
        if path is None:
            path = default_path_for(self.kind)

        if isinstance(base, Queryable):
            self._path = base._path.append(path)
            self._transport = transport or base._transport
            self._batch = batch if batch is not None else base._batch
        else:
            self._path = PathBuilder(base).append(path)
            self._transport = transport
            self._batch = batch

        self._query: Mapping[str, str] = MappingProxyType({})
        self._tag = tag or tag_for(self.kind)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_url()!r})"

    def _copy(self: Q, **attributes: Any) -> Q:
        clone = copy.copy(self)
        for name, value in attributes.items():
            setattr(clone, name, value)
        return clone

    @property
    def transport(self) -> "Transport | None":
        return self._transport

    @property
    def batch(self) -> "Batch | None":
        return self._batch

    @property
    def has_batch(self) -> bool:
        return self._batch is not None

    @property
    def query(self) -> Mapping[str, str]:
        return self._query

    @property
    def tag(self) -> str:
        return self._tag

    def to_url(self) -> str:
        """Return the request URL including query parameters."""
        url = self._path.to_url()
        if not self._query:
            return url
        query = "&".join(
            f"{name}={urllib.parse.quote(value, safe=_QUERY_SAFE)}"
            for name, value in self._query.items()
        )
        return f"{url}?{query}"

    def derive_child(self, path: str, factory: Type[Q] | None = None) -> Q:
        """Return a handle for ``path`` below this one; this handle is untouched."""
        return (factory or Queryable)(self, path)

    def clone(
        self,
        factory: Type[Q],
        path: str | None = None,
        *,
        include_batch: bool = True,
        tag: str | None = None,
    ) -> Q:
        """Derive a handle of another capability set from this one."""
        child = factory(self, path, tag=tag)
        if not include_batch:
            child = child.without_batch()
        return child

    def concat(self: Q, suffix: str) -> Q:
        """Glue ``suffix`` onto the last path segment, e.g. ``('Name')``."""
        return self._copy(_path=self._path.concat(suffix))

    def with_query(self: Q, name: str, value: Any) -> Q:
        """Return a copy with query parameter ``name`` set (last write wins)."""
        return self._copy(_query=MappingProxyType({**self._query, name: str(value)}))

    def select(self: Q, *fields: str) -> Q:
        if not fields:
            return self
        return self.with_query("$select", ",".join(fields))

    def expand(self: Q, *fields: str) -> Q:
        if not fields:
            return self
        return self.with_query("$expand", ",".join(fields))

    def in_batch(self: Q, batch: "Batch") -> Q:
        """Return a copy whose operations (and its children's) go to ``batch``."""
        return self._copy(_batch=batch)

    def without_batch(self: Q) -> Q:
        return self._copy(_batch=None)

    def get(self) -> Outcome[Any]:
        """Read the resource."""
        return sp_get(self, tag=self._tag)


class QueryableCollection(Queryable):
    """A handle to a collection, adding the collection query options."""

    def filter(self: Q, expression: str) -> Q:
        return self.with_query("$filter", expression)

    def orderby(self: Q, field: str, ascending: bool = True) -> Q:
        clause = f"{field} {'asc' if ascending else 'desc'}"
        existing = self._query.get("$orderby")
        return self.with_query("$orderby", f"{existing},{clause}" if existing else clause)

    def top(self: Q, count: int) -> Q:
        return self.with_query("$top", count)

    def skip(self: Q, count: int) -> Q:
        return self.with_query("$skip", count)


class QueryableInstance(Queryable):
    """A handle to a single entity."""

    def _update(
        self: Q,
        entity_type: str,
        properties: Mapping[str, Any],
        etag: str = "*",
    ) -> Outcome[OperationResult[Q]]:
        body = {"__metadata": {"type": entity_type}, **properties}
        outcome = sp_patch(
            self,
            body,
            headers={"If-Match": etag},
            tag=tag_for(f"{self.kind}.update"),
        )
        return updated_result(outcome, self)


class DeleteableWithETag:
    """Mixin adding ``delete`` guarded by an ``If-Match`` header."""

    kind: ClassVar[str]

    def delete(self, etag: str = "*") -> Outcome[None]:
        """Delete the resource.

        Args:
            etag: Only delete when the resource still has this ETag; ``*`` matches any.
        """
        return sp_delete(
            self,  # type: ignore[arg-type]
            headers={"If-Match": etag},
            tag=tag_for(f"{self.kind}.delete"),
        )
