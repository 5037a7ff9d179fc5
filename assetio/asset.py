from __future__ import annotations

from dataclasses import dataclass, field

from .source import SharedSource


@dataclass(frozen=True)
class Asset:
    """A resolved asset: a named window into a shared source.

    Holding an Asset keeps its source (and any memory mapping behind it)
    alive, even after the Library that produced it is closed.
    """

    name: str
    offset: int
    size: int
    source: SharedSource = field(repr=False)

    @property
    def data(self) -> memoryview:
        """Zero-copy view of the asset bytes."""
        return self.source.view(self.offset, self.size)

    def tobytes(self) -> bytes:
        return self.data.tobytes()

    def __len__(self) -> int:
        return self.size
