from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import BinaryIO

from .constants import ARCHIVE_MAGIC
from .errors import TruncatedInputError


# All fields are little-endian u64
#  FileHeader:       magic_number
#  AssetTableHeader: num_assets
#  AssetTableEntry:  id, offset, size
_FILE_HDR_STRUCT = struct.Struct("<Q")
_TABLE_HDR_STRUCT = struct.Struct("<Q")
_TABLE_ENTRY_STRUCT = struct.Struct("<QQQ")


def read_exact(f: BinaryIO, n: int) -> bytes:
    b = f.read(n)
    if len(b) != n:
        raise TruncatedInputError(f"Unexpected EOF: needed {n} bytes, got {len(b)}")
    return b


def _unpack_from(st: struct.Struct, buf, offset: int, what: str):
    if offset < 0 or len(buf) - offset < st.size:
        avail = max(0, len(buf) - offset)
        raise TruncatedInputError(f"{what} truncated: needed {st.size} bytes, got {avail}")
    return st.unpack_from(buf, offset)


@dataclass
class FileHeader:
    magic_number: int = ARCHIVE_MAGIC

    @classmethod
    def serialized_size(cls) -> int:
        return _FILE_HDR_STRUCT.size

    def pack(self) -> bytes:
        return _FILE_HDR_STRUCT.pack(self.magic_number)

    @classmethod
    def unpack(cls, buf, offset: int = 0) -> "FileHeader":
        (magic,) = _unpack_from(_FILE_HDR_STRUCT, buf, offset, "File header")
        return cls(magic_number=magic)

    def write(self, f: BinaryIO) -> None:
        f.write(self.pack())

    @classmethod
    def read(cls, f: BinaryIO) -> "FileHeader":
        return cls.unpack(read_exact(f, cls.serialized_size()))


@dataclass
class AssetTableHeader:
    num_assets: int

    @classmethod
    def serialized_size(cls) -> int:
        return _TABLE_HDR_STRUCT.size

    def pack(self) -> bytes:
        return _TABLE_HDR_STRUCT.pack(self.num_assets)

    @classmethod
    def unpack(cls, buf, offset: int = 0) -> "AssetTableHeader":
        (num_assets,) = _unpack_from(_TABLE_HDR_STRUCT, buf, offset, "Asset table header")
        return cls(num_assets=num_assets)

    def write(self, f: BinaryIO) -> None:
        f.write(self.pack())

    @classmethod
    def read(cls, f: BinaryIO) -> "AssetTableHeader":
        return cls.unpack(read_exact(f, cls.serialized_size()))


@dataclass
class AssetTableEntry:
    id: int
    offset: int
    size: int

    @classmethod
    def serialized_size(cls) -> int:
        return _TABLE_ENTRY_STRUCT.size

    @property
    def end(self) -> int:
        return self.offset + self.size

    def pack(self) -> bytes:
        return _TABLE_ENTRY_STRUCT.pack(self.id, self.offset, self.size)

    @classmethod
    def unpack(cls, buf, offset: int = 0) -> "AssetTableEntry":
        aid, off, size = _unpack_from(_TABLE_ENTRY_STRUCT, buf, offset, "Asset table entry")
        return cls(id=aid, offset=off, size=size)

    def write(self, f: BinaryIO) -> None:
        f.write(self.pack())

    @classmethod
    def read(cls, f: BinaryIO) -> "AssetTableEntry":
        return cls.unpack(read_exact(f, cls.serialized_size()))


def table_end(num_assets: int) -> int:
    """Byte offset just past the last table entry for ``num_assets`` entries."""
    return (
        FileHeader.serialized_size()
        + AssetTableHeader.serialized_size()
        + num_assets * AssetTableEntry.serialized_size()
    )
