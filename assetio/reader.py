from __future__ import annotations

import os
from typing import Dict, List, Optional, Union

from .asset import Asset
from .constants import ARCHIVE_MAGIC
from .errors import (
    AssetioError,
    AssetNotFoundError,
    CorruptArchiveError,
    InvalidFormatError,
    TruncatedInputError,
)
from .hashutil import AssetId, asset_id, format_id
from .records import AssetTableEntry, AssetTableHeader, FileHeader, table_end
from .resolver import AssetResolver
from .source import Buffer, SharedSource, map_file


def parse_table(source: SharedSource) -> Dict[int, AssetTableEntry]:
    """
    Validates an archive image and decodes its asset table.

    1.  The file header must carry ``ARCHIVE_MAGIC``.
    2.  The declared entry count must fit in the bytes that follow; this is
        checked up front so a hostile count cannot drive a long loop.
    3.  Entries are decoded in stream order; a later duplicate id replaces
        an earlier one.
    4.  Every entry must lie inside the source, so slicing it can never read
        out of bounds.
    """
    buf = source.view()
    total = len(buf)
    header = FileHeader.unpack(buf, 0)
    if header.magic_number != ARCHIVE_MAGIC:
        raise InvalidFormatError(
            f"Bad magic number {header.magic_number:#x} (expected {ARCHIVE_MAGIC:#x})"
        )
    pos = FileHeader.serialized_size()
    table_hdr = AssetTableHeader.unpack(buf, pos)
    pos += AssetTableHeader.serialized_size()
    end = table_end(table_hdr.num_assets)
    if end > total:
        raise TruncatedInputError(
            f"Asset table truncated: {table_hdr.num_assets} entries need {end} bytes, archive has {total}"
        )

    table: Dict[int, AssetTableEntry] = {}
    entry_size = AssetTableEntry.serialized_size()
    for _ in range(table_hdr.num_assets):
        entry = AssetTableEntry.unpack(buf, pos)
        pos += entry_size
        if entry.end > total:
            raise CorruptArchiveError(
                f"Asset {format_id(entry.id)} spans [{entry.offset}, {entry.end}) past end of archive ({total} bytes)"
            )
        table[entry.id] = entry
    return table


class Library(AssetResolver):
    """A packed asset library, memory-mapped and indexed by asset id.

    Asset bytes are served as memoryviews straight out of the mapping. Assets
    returned by ``load`` share the mapping and keep it alive after ``close``.
    """

    def __init__(self, path: Optional[Union[str, "os.PathLike[str]"]] = None):
        self.path = os.fspath(path) if path is not None else None
        self.source: Optional[SharedSource] = None
        self.table: Dict[int, AssetTableEntry] = {}

    @classmethod
    def from_buffer(cls, data: Buffer, origin: Optional[str] = None) -> "Library":
        lib = cls()
        lib._attach(SharedSource(data, origin=origin or "<memory>"))
        return lib

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def __repr__(self) -> str:
        state = f"{len(self.table)} assets" if self.source is not None else "closed"
        return f"Library({self.path!r}, {state})"

    def open(self):
        if self.source is not None:
            return
        if self.path is None:
            raise RuntimeError("Library has no path to open")
        self._attach(map_file(self.path))

    def close(self):
        # Outstanding Assets hold their own reference to the source
        self.source = None
        self.table = {}

    @property
    def is_open(self) -> bool:
        return self.source is not None

    def num_assets(self) -> int:
        return len(self.table)

    def __len__(self) -> int:
        return len(self.table)

    def __contains__(self, key: object) -> bool:
        if isinstance(key, str):
            key = asset_id(key)
        return key in self.table

    def ids(self) -> List[AssetId]:
        return [AssetId(aid) for aid in self.table]

    def entries(self) -> List[AssetTableEntry]:
        return list(self.table.values())

    def find(self, aid: int) -> Optional[memoryview]:
        """Zero-copy view of the asset stored under ``aid``, or None."""
        src = self._require_open()
        entry = self.table.get(aid)
        if entry is None:
            return None
        return src.view(entry.offset, entry.size)

    def find_by_name(self, name: str) -> Optional[memoryview]:
        return self.find(asset_id(name))

    def load(self, name: str) -> Asset:
        src = self._require_open()
        entry = self.table.get(asset_id(name))
        if entry is None:
            raise AssetNotFoundError(f"Asset not found in library: {name}")
        return Asset(name=name, offset=entry.offset, size=entry.size, source=src)

    def payload_bytes(self) -> int:
        return sum(e.size for e in self.table.values())

    # internals
    def _attach(self, source: SharedSource) -> None:
        try:
            table = parse_table(source)
        except AssetioError:
            self.close()
            raise
        self.source = source
        self.table = table

    def _require_open(self) -> SharedSource:
        if self.source is None:
            raise RuntimeError("Library not open")
        return self.source
