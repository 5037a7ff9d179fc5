from __future__ import annotations

import mmap
import os
from typing import Optional, Union

from .errors import CorruptArchiveError


Buffer = Union[bytes, bytearray, memoryview, mmap.mmap]


class SharedSource:
    """Read-only byte buffer shared by a Library and the Assets it hands out.

    Ownership is plain Python reference counting: a Library and every Asset
    resolved from it hold a reference to the same SharedSource, and every
    memoryview returned by ``view`` pins the underlying buffer. The mapping
    is released when the last of them goes away, never earlier.
    """

    __slots__ = ("origin", "_buf", "_view", "__weakref__")

    def __init__(self, buf: Buffer, origin: Optional[str] = None):
        self.origin = origin
        self._buf = buf
        self._view = memoryview(buf).cast("B") if not isinstance(buf, memoryview) else buf.cast("B")

    def __len__(self) -> int:
        return len(self._view)

    def __repr__(self) -> str:
        return f"SharedSource(origin={self.origin!r}, size={len(self)})"

    @property
    def is_mapped(self) -> bool:
        return isinstance(self._buf, mmap.mmap)

    def view(self, offset: int = 0, size: Optional[int] = None) -> memoryview:
        """Zero-copy window of ``size`` bytes starting at ``offset``."""
        if size is None:
            size = len(self) - offset
        if offset < 0 or size < 0 or offset + size > len(self):
            raise CorruptArchiveError(
                f"Window [{offset}, {offset + size}) out of range for source of {len(self)} bytes"
            )
        return self._view[offset : offset + size]


def map_file(path: Union[str, "os.PathLike[str]"]) -> SharedSource:
    """Memory-map a whole file read-only.

    The file descriptor is closed before returning; the mapping stays valid on
    its own. Zero-length files cannot be mapped and come back as an empty
    in-memory source.
    """
    with open(path, "rb") as f:
        size = os.fstat(f.fileno()).st_size
        if size == 0:
            return SharedSource(b"", origin=os.fspath(path))
        mm = mmap.mmap(f.fileno(), 0, access=mmap.ACCESS_READ)
    return SharedSource(mm, origin=os.fspath(path))
