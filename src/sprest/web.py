from __future__ import annotations

from .batch import Batch
from .exceptions import SharePointError
from .files import File
from .folders import Folder, Folders
from .metadata import tag_for
from .queryable import QueryableInstance
from .utils import escape_query_str_value


class Web(QueryableInstance):
    """The root handle of a site (``<site>/_api/web``)."""

    kind = "web"

    @property
    def folders(self) -> Folders:
        return Folders(self)

    @property
    def root_folder(self) -> Folder:
        return Folder(self, "rootFolder")

    def get_folder_by_server_relative_url(self, folder_url: str) -> Folder:
        return Folder(
            self,
            f"getFolderByServerRelativeUrl('{escape_query_str_value(folder_url)}')",
            tag=tag_for("web.get_folder_by_server_relative_url"),
        )

    def get_folder_by_server_relative_path(self, folder_path: str) -> Folder:
        return Folder(
            self,
            f"getFolderByServerRelativePath(decodedUrl='{escape_query_str_value(folder_path)}')",
            tag=tag_for("web.get_folder_by_server_relative_path"),
        )

    def get_folder_by_id(self, unique_id: str) -> Folder:
        return Folder(
            self,
            f"getFolderById('{escape_query_str_value(unique_id)}')",
            tag=tag_for("web.get_folder_by_id"),
        )

    def get_file_by_server_relative_url(self, file_url: str) -> File:
        return File(
            self,
            f"getFileByServerRelativeUrl('{escape_query_str_value(file_url)}')",
            tag=tag_for("web.get_file_by_server_relative_url"),
        )

    def get_file_by_server_relative_path(self, file_path: str) -> File:
        return File(
            self,
            f"getFileByServerRelativePath(decodedUrl='{escape_query_str_value(file_path)}')",
            tag=tag_for("web.get_file_by_server_relative_path"),
        )

    def create_batch(self) -> Batch:
        """Create a batch that sends to this web's ``$batch`` endpoint."""
        if self.transport is None:
            raise SharePointError(f"No transport is bound to {self!r}.")
        return Batch(self.to_url(), self.transport)
