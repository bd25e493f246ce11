from __future__ import annotations

from .items import HasListItem, recycle_id
from .metadata import tag_for
from .models import FileInfo
from .movecopy import MoveCopyMixin
from .operations import sp_get, sp_post
from .queryable import DeleteableWithETag, QueryableCollection, QueryableInstance
from .results import OperationResult, Outcome, added_result, chain
from .utils import escape_query_str_value


class Files(QueryableCollection):
    """The files of a folder."""

    kind = "files"

    def get_by_url(self, url: str) -> "File":
        """Get a file by its name (or URL) within this collection."""
        return self.clone(File, tag=tag_for("files.get_by_url")).concat(
            f"('{escape_query_str_value(url)}')"
        )

    def add(
        self, url: str, content: bytes | str, overwrite: bool = True
    ) -> Outcome[OperationResult["File"]]:
        """Upload a file in a single request.

        Args:
            url: Name of the new file.
            content: File content.
            overwrite: Replace an existing file with the same name.
        """
        target = self.clone(
            Files,
            f"add(overwrite={str(overwrite).lower()},url='{escape_query_str_value(url)}')",
        )
        outcome = sp_post(target, content, tag=tag_for("files.add"))
        return added_result(outcome, self.get_by_url(url))


class File(DeleteableWithETag, MoveCopyMixin, HasListItem, QueryableInstance):
    """A file."""

    kind = "file"
    move_copy_noun = "File"

    def get_info(self) -> Outcome[FileInfo]:
        return chain(self.get(), FileInfo.from_payload)

    def get_text(self) -> Outcome[str]:
        """Download the file content as text."""
        return sp_get(self.clone(File, "$value"), tag=tag_for("file.get_text"), raw=True)

    def recycle(self) -> Outcome[str]:
        """Move the file to the recycle bin and return the recycle bin item id."""
        outcome = sp_post(self.clone(File, "recycle"), tag=tag_for("file.recycle"))
        return chain(outcome, recycle_id)
