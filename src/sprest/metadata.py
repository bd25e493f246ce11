"""Static metadata for resource handles and their operations.

Each entry maps an operation name to the tag written to the debug log for
requests it issues and, for resource kinds, the default path segment used
when a handle is built without an explicit path.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Final, Mapping


@dataclass(frozen=True)
class OperationInfo:
    tag: str
    default_path: str | None = None


OPERATIONS: Final[Mapping[str, OperationInfo]] = MappingProxyType(
    {
        # resource kinds
        "queryable": OperationInfo(tag="q"),
        "web": OperationInfo(tag="w", default_path="_api/web"),
        "folders": OperationInfo(tag="fs", default_path="folders"),
        "folder": OperationInfo(tag="f"),
        "files": OperationInfo(tag="fis", default_path="files"),
        "file": OperationInfo(tag="fi"),
        "item": OperationInfo(tag="i"),
        # folders
        "folders.get_by_name": OperationInfo(tag="fs.getByName"),
        "folders.add": OperationInfo(tag="fs.add"),
        "folders.add_using_path": OperationInfo(tag="fs.addUsingPath"),
        # folder
        "folder.content_type_order": OperationInfo(tag="f.contentTypeOrder"),
        "folder.list_item_all_fields": OperationInfo(tag="f.listItemAllFields"),
        "folder.parent_folder": OperationInfo(tag="f.parentFolder"),
        "folder.properties": OperationInfo(tag="f.properties"),
        "folder.server_relative_url": OperationInfo(tag="f.serverRelativeUrl"),
        "folder.unique_content_type_order": OperationInfo(tag="f.uniqueContentTypeOrder"),
        "folder.update": OperationInfo(tag="f.update"),
        "folder.delete": OperationInfo(tag="f.delete"),
        "folder.recycle": OperationInfo(tag="f.recycle"),
        "folder.get_item": OperationInfo(tag="f.getItem"),
        "folder.delete_with_params": OperationInfo(tag="f.del-params"),
        "folder.add_sub_folder_using_path": OperationInfo(tag="f.addSubFolderUsingPath"),
        "folder.move_to": OperationInfo(tag="f.moveTo"),
        "folder.move_by_path": OperationInfo(tag="f.moveByPath"),
        "folder.copy_to": OperationInfo(tag="f.copyTo"),
        "folder.copy_by_path": OperationInfo(tag="f.copyByPath"),
        # files
        "files.get_by_url": OperationInfo(tag="fis.getByUrl"),
        "files.add": OperationInfo(tag="fis.add"),
        # file
        "file.delete": OperationInfo(tag="fi.delete"),
        "file.recycle": OperationInfo(tag="fi.recycle"),
        "file.get_text": OperationInfo(tag="fi.getText"),
        "file.list_item_all_fields": OperationInfo(tag="fi.listItemAllFields"),
        "file.get_item": OperationInfo(tag="fi.getItem"),
        "file.move_to": OperationInfo(tag="fi.moveTo"),
        "file.move_by_path": OperationInfo(tag="fi.moveByPath"),
        "file.copy_to": OperationInfo(tag="fi.copyTo"),
        "file.copy_by_path": OperationInfo(tag="fi.copyByPath"),
        # item
        "item.update": OperationInfo(tag="i.update"),
        "item.delete": OperationInfo(tag="i.delete"),
        "item.recycle": OperationInfo(tag="i.recycle"),
        # web
        "web.get_folder_by_server_relative_url": OperationInfo(tag="w.getFolderByServerRelativeUrl"),
        "web.get_folder_by_server_relative_path": OperationInfo(tag="w.getFolderByServerRelativePath"),
        "web.get_folder_by_id": OperationInfo(tag="w.getFolderById"),
        "web.get_file_by_server_relative_url": OperationInfo(tag="w.getFileByServerRelativeUrl"),
        "web.get_file_by_server_relative_path": OperationInfo(tag="w.getFileByServerRelativePath"),
    }
)


def tag_for(operation: str) -> str:
    info = OPERATIONS.get(operation)
    return info.tag if info else operation


def default_path_for(kind: str) -> str | None:
    info = OPERATIONS.get(kind)
    return info.default_path if info else None
