from __future__ import annotations

from typing import Any, Mapping

from .files import Files
from .items import HasListItem, recycle_id
from .metadata import tag_for
from .models import FolderDeleteParams, FolderInfo
from .movecopy import MoveCopyMixin
from .operations import sp_post
from .queryable import (
    DeleteableWithETag,
    Queryable,
    QueryableCollection,
    QueryableInstance,
)
from .results import OperationResult, Outcome, added_result, chain
from .utils import escape_query_str_value, extract_web_url, to_resource_path


class Folders(QueryableCollection):
    """A collection of folders (``.../folders``)."""

    kind = "folders"

    def get_by_name(self, name: str) -> "Folder":
        """Gets a folder by its name.

        Args:
            name: Folder's name.
        """
        return self.clone(Folder, tag=tag_for("folders.get_by_name")).concat(
            f"('{escape_query_str_value(name)}')"
        )

    def add(self, url: str) -> Outcome[OperationResult["Folder"]]:
        """Adds a new folder.

        Args:
            url: Name (or URL) of the new folder.

        Returns:
            The server payload and a handle to the new folder, derived with
            :meth:`get_by_name`.
        """
        target = self.clone(Folders, f"add('{escape_query_str_value(url)}')")
        outcome = sp_post(target, tag=tag_for("folders.add"))
        return added_result(outcome, self.get_by_name(url))

    def add_using_path(
        self, server_relative_url: str, overwrite: bool = False
    ) -> Outcome[OperationResult["Folder"]]:
        """Adds a new folder by path; preferred over :meth:`add`.

        Args:
            server_relative_url: The server relative url of the new folder.
            overwrite: Overwrite an existing folder.
        """
        escaped = escape_query_str_value(server_relative_url)
        target = self.clone(
            Folders,
            f"addUsingPath(DecodedUrl='{escaped}',overwrite={str(overwrite).lower()})",
        )
        outcome = sp_post(target, tag=tag_for("folders.add_using_path"))
        folder = Folder(
            extract_web_url(self.to_url()),
            f"_api/web/getFolderByServerRelativePath(decodedUrl='{escaped}')",
            transport=self.transport,
            batch=self.batch,
        )
        return added_result(outcome, folder)


class Folder(DeleteableWithETag, MoveCopyMixin, HasListItem, QueryableInstance):
    """A single folder."""

    kind = "folder"
    move_copy_noun = "Folder"

    @property
    def folders(self) -> Folders:
        return Folders(self)

    @property
    def files(self) -> Files:
        return Files(self)

    @property
    def content_type_order(self) -> QueryableCollection:
        """Specifies the sequence in which content types are displayed."""
        return QueryableCollection(
            self, "contentTypeOrder", tag=tag_for("folder.content_type_order")
        )

    @property
    def unique_content_type_order(self) -> QueryableCollection:
        return QueryableCollection(
            self, "uniqueContentTypeOrder", tag=tag_for("folder.unique_content_type_order")
        )

    @property
    def parent_folder(self) -> "Folder":
        return Folder(self, "parentFolder", tag=tag_for("folder.parent_folder"))

    @property
    def properties(self) -> QueryableInstance:
        return QueryableInstance(self, "properties", tag=tag_for("folder.properties"))

    @property
    def server_relative_url(self) -> Queryable:
        return Queryable(
            self, "serverRelativeUrl", tag=tag_for("folder.server_relative_url")
        )

    def get_info(self) -> Outcome[FolderInfo]:
        return chain(self.get(), FolderInfo.from_payload)

    def update(
        self, properties: Mapping[str, Any], etag: str = "*"
    ) -> Outcome[OperationResult["Folder"]]:
        """Updates the folder's properties; the result's resource is this folder."""
        return self._update("SP.Folder", properties, etag)

    def recycle(self) -> Outcome[str]:
        """Moves the folder to the Recycle Bin and returns the new Recycle Bin item id."""
        outcome = sp_post(self.clone(Folder, "recycle"), tag=tag_for("folder.recycle"))
        return chain(outcome, recycle_id)

    def delete_with_params(self, params: FolderDeleteParams) -> Outcome[None]:
        outcome = sp_post(
            self.clone(Folder, "DeleteWithParameters"),
            {"parameters": params.to_payload()},
            tag=tag_for("folder.delete_with_params"),
        )
        return chain(outcome, lambda _: None)

    def add_sub_folder_using_path(self, leaf_path: str) -> Outcome["Folder"]:
        """Create a subfolder named ``leaf_path`` and return a handle to it."""
        outcome = sp_post(
            self.clone(Folder, "AddSubFolderUsingPath"),
            {"leafPath": to_resource_path(leaf_path)},
            tag=tag_for("folder.add_sub_folder_using_path"),
        )
        return chain(outcome, lambda _: self.folders.get_by_name(leaf_path))
