"""Moving and copying files and folders through ``SP.MoveCopyUtil``.

``MoveCopyUtil`` needs absolute source and destination URLs. The source's
server-relative URL and the web's URLs are read first, always as immediate
requests, and only then is the move or copy itself sent (or queued, when the
handle is batched). A handle bound to an executed batch fails before any read.
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar

from .metadata import tag_for
from .operations import sp_get, sp_post
from .queryable import Queryable
from .results import Outcome, chain
from .utils import extract_web_url, host_url_from_web, is_url_absolute, to_resource_path

logger = logging.getLogger(__name__)


class MoveCopyMixin:
    """Mixin adding ``move_to``/``copy_to`` and their by-path variants."""

    kind: ClassVar[str]
    move_copy_noun: ClassVar[str]

    def _locations(self, dest_url: str, operation: str) -> tuple[str, str, str]:
        """Return the web URL and the absolute source and destination URLs."""
        this: Queryable = self  # type: ignore[assignment]
        tag = tag_for(f"{self.kind}.{operation}")
        if this.batch is not None:
            # a closed batch must fail before the lookups below hit the network
            this.batch.ensure_open(f"{self.kind}.{operation}")

        source = sp_get(this.without_batch().select("ServerRelativeUrl"), tag=tag)
        web = sp_get(
            Queryable(
                extract_web_url(this.to_url()), "_api/web", transport=this.transport
            ).select("Url", "ServerRelativeUrl"),
            tag=tag,
        )

        host_url = host_url_from_web(web["Url"], web["ServerRelativeUrl"])
        src_url = source["ServerRelativeUrl"]
        src_url = src_url if is_url_absolute(src_url) else f"{host_url}{src_url}"
        dest_url = dest_url if is_url_absolute(dest_url) else f"{host_url}{dest_url}"
        logger.debug("Resolved %s: %s -> %s", operation, src_url, dest_url)
        return web["Url"], src_url, dest_url

    def _move_copy(self, action: str, operation: str, dest_url: str) -> Outcome[None]:
        this: Queryable = self  # type: ignore[assignment]
        web_url, src_url, dest_url = self._locations(dest_url, operation)
        target = Queryable(
            web_url,
            f"_api/SP.MoveCopyUtil.{action}{self.move_copy_noun}()",
            transport=this.transport,
            batch=this.batch,
        )
        outcome = sp_post(
            target,
            {"srcUrl": src_url, "destUrl": dest_url},
            tag=tag_for(f"{self.kind}.{operation}"),
        )
        return chain(outcome, _none)

    def _move_copy_by_path(
        self, action: str, operation: str, dest_url: str, keep_both: bool
    ) -> Outcome[None]:
        this: Queryable = self  # type: ignore[assignment]
        web_url, src_url, dest_url = self._locations(dest_url, operation)
        target = Queryable(
            web_url,
            f"_api/SP.MoveCopyUtil.{action}{self.move_copy_noun}ByPath()",
            transport=this.transport,
            batch=this.batch,
        )
        body = {
            "destPath": to_resource_path(dest_url),
            "options": {
                "KeepBoth": keep_both,
                "ResetAuthorAndCreatedOnCopy": True,
                "ShouldBypassSharedLocks": True,
                "__metadata": {"type": "SP.MoveCopyOptions"},
            },
            "srcPath": to_resource_path(src_url),
        }
        outcome = sp_post(target, body, tag=tag_for(f"{self.kind}.{operation}"))
        return chain(outcome, _none)

    def move_to(self, dest_url: str) -> Outcome[None]:
        """Move to a destination path.

        Args:
            dest_url: Absolute or server-relative URL of the destination.
        """
        return self._move_copy("Move", "move_to", dest_url)

    def copy_to(self, dest_url: str) -> Outcome[None]:
        """Copy to a destination path.

        Args:
            dest_url: Absolute or server-relative URL of the destination.
        """
        return self._move_copy("Copy", "copy_to", dest_url)

    def move_by_path(self, dest_url: str, keep_both: bool = False) -> Outcome[None]:
        """Move by path; also works across site collections.

        Args:
            dest_url: Absolute or server-relative URL of the destination.
            keep_both: Keep both when an item with the same name exists at the destination.
        """
        return self._move_copy_by_path("Move", "move_by_path", dest_url, keep_both)

    def copy_by_path(self, dest_url: str, keep_both: bool = False) -> Outcome[None]:
        """Copy by path; also works across site collections.

        Args:
            dest_url: Absolute or server-relative URL of the destination.
            keep_both: Keep both when an item with the same name exists at the destination.
        """
        return self._move_copy_by_path("Copy", "copy_by_path", dest_url, keep_both)


def _none(_: Any) -> None:
    return None
