from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Mapping


@dataclass
class FolderInfo:
    """Represents the properties of a SharePoint folder."""

    name: str | None
    server_relative_url: str | None
    exists: bool | None = None
    item_count: int | None = None
    time_created: str | None = None
    time_last_modified: str | None = None
    unique_id: str | None = None
    welcome_page: str | None = None
    extra: Mapping[str, Any] | None = None

    @classmethod
    def from_payload(cls, props: Mapping[str, Any], keep_metadata: bool = False) -> "FolderInfo":
        return cls(
            name=props.get("Name"),
            server_relative_url=props.get("ServerRelativeUrl"),
            exists=props.get("Exists"),
            item_count=props.get("ItemCount"),
            time_created=props.get("TimeCreated"),
            time_last_modified=props.get("TimeLastModified"),
            unique_id=props.get("UniqueId"),
            welcome_page=props.get("WelcomePage"),
            extra=props if keep_metadata else None,
        )


@dataclass
class FileInfo:
    """Represents the properties of a SharePoint file."""

    name: str | None
    server_relative_url: str | None
    length: int | None = None
    etag: str | None = None
    time_created: str | None = None
    time_last_modified: str | None = None
    unique_id: str | None = None
    extra: Mapping[str, Any] | None = None

    @classmethod
    def from_payload(cls, props: Mapping[str, Any], keep_metadata: bool = False) -> "FileInfo":
        length = props.get("Length")
        return cls(
            name=props.get("Name"),
            server_relative_url=props.get("ServerRelativeUrl"),
            length=int(length) if length is not None else None,
            etag=props.get("ETag"),
            time_created=props.get("TimeCreated"),
            time_last_modified=props.get("TimeLastModified"),
            unique_id=props.get("UniqueId"),
            extra=props if keep_metadata else None,
        )


@dataclass
class FolderDeleteParams:
    """Options for :meth:`Folder.delete_with_params`.

    Unset options are left out of the request.

    Attributes:
        bypass_shared_lock: Also delete when files hold shared locks.
        etag_match: Only delete a folder with this ETag.
        delete_if_empty: Only delete the folder when it is empty.
    """

    bypass_shared_lock: bool | None = None
    etag_match: str | None = None
    delete_if_empty: bool | None = None

    def to_payload(self) -> dict[str, Any]:
        names = {
            "bypass_shared_lock": "BypassSharedLock",
            "etag_match": "ETagMatch",
            "delete_if_empty": "DeleteIfEmpty",
        }
        return {
            names[key]: value for key, value in asdict(self).items() if value is not None
        }
