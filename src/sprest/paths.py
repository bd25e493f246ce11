from __future__ import annotations

from dataclasses import dataclass, replace

from .utils import combine


@dataclass(frozen=True)
class PathBuilder:
    """A base URL plus an ordered, append-only sequence of path segments.

    Every operation returns a new builder; existing builders are never
    changed, so a parent handle stays valid after children are derived.
    """

    base_url: str
    segments: tuple[str, ...] = ()

    def append(self, segment: str | None) -> PathBuilder:
        if not segment:
            return self
        return replace(self, segments=(*self.segments, segment))

    def concat(self, suffix: str) -> PathBuilder:
        """Glue ``suffix`` onto the last segment, e.g. ``folders`` + ``('A')``."""
        if not suffix:
            return self
        if not self.segments:
            return replace(self, base_url=self.base_url + suffix)
        return replace(self, segments=(*self.segments[:-1], self.segments[-1] + suffix))

    def to_url(self) -> str:
        return combine(self.base_url, *self.segments)
