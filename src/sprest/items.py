from __future__ import annotations

from typing import Any, ClassVar, Mapping

from .metadata import tag_for
from .odata import entity_url
from .operations import sp_get, sp_post
from .queryable import DeleteableWithETag, QueryableInstance
from .results import OperationResult, Outcome, chain


class Item(DeleteableWithETag, QueryableInstance):
    """A list item."""

    kind = "item"

    def update(
        self,
        properties: Mapping[str, Any],
        entity_type_full_name: str,
        etag: str = "*",
    ) -> Outcome[OperationResult["Item"]]:
        """Update the item's field values.

        Args:
            properties: Field values keyed by internal field name.
            entity_type_full_name: The list's ``ListItemEntityTypeFullName``,
                e.g. ``SP.Data.Shared_x0020_DocumentsItem``.
            etag: Only update when the item still has this ETag.
        """
        return self._update(entity_type_full_name, properties, etag)

    def recycle(self) -> Outcome[str]:
        outcome = sp_post(self.clone(Item, "recycle"), tag=tag_for("item.recycle"))
        return chain(outcome, recycle_id)


class HasListItem:
    """Mixin for resources backed by a list item (files and folders)."""

    kind: ClassVar[str]

    @property
    def list_item_all_fields(self) -> QueryableInstance:
        return QueryableInstance(
            self,  # type: ignore[arg-type]
            "listItemAllFields",
            tag=tag_for(f"{self.kind}.list_item_all_fields"),
        )

    def get_item(self, *selects: str) -> Outcome[OperationResult[Item]]:
        """Load the associated list item.

        The returned item handle is built from the entity URL in the
        response and shares this handle's transport but not its batch.
        """
        outcome = sp_get(
            self.list_item_all_fields.select(*selects),
            tag=tag_for(f"{self.kind}.get_item"),
        )
        transport = self.list_item_all_fields.transport
        return chain(
            outcome,
            lambda data: OperationResult(
                data=data, resource=Item(entity_url(data), transport=transport)
            ),
        )


def recycle_id(data: Any) -> Any:
    """Return the recycle bin item id from a ``recycle`` response."""
    if isinstance(data, dict) and "Recycle" in data:
        return data["Recycle"]
    return data
