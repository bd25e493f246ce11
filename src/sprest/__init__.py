"""Fluent client for the SharePoint REST API.

Public API:
- SharePointClient (site entry point) and ClientSettings
- Web, Folders, Folder, Files, File, Item (resource handles)
- Batch (grouping of operations into one ``$batch`` request)
- OperationResult (payload plus follow-on handle)
- Transport, RequestsTransport, TransportResponse
- exceptions: SharePointError, SharePointRequestError, BatchError,
  BatchClosedError, BatchAlreadyExecutedError, BatchProtocolError
"""

from .batch import Batch
from .client import SharePointClient
from .config import ClientSettings
from .exceptions import (
    BatchAlreadyExecutedError,
    BatchClosedError,
    BatchError,
    BatchProtocolError,
    SharePointError,
    SharePointRequestError,
)
from .files import File, Files
from .folders import Folder, Folders
from .items import Item
from .models import FileInfo, FolderDeleteParams, FolderInfo
from .queryable import Queryable, QueryableCollection, QueryableInstance
from .results import OperationResult
from .transport import RequestsTransport, Transport, TransportResponse
from .web import Web

__all__ = [
    "Batch",
    "SharePointClient",
    "ClientSettings",
    "BatchAlreadyExecutedError",
    "BatchClosedError",
    "BatchError",
    "BatchProtocolError",
    "SharePointError",
    "SharePointRequestError",
    "File",
    "Files",
    "Folder",
    "Folders",
    "Item",
    "FileInfo",
    "FolderDeleteParams",
    "FolderInfo",
    "Queryable",
    "QueryableCollection",
    "QueryableInstance",
    "OperationResult",
    "RequestsTransport",
    "Transport",
    "TransportResponse",
    "Web",
]
