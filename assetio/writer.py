from __future__ import annotations

import os
from dataclasses import dataclass
from typing import BinaryIO, Dict, List, Optional, Union

from .alignutil import align_up, padding_for
from .constants import ASSET_ALIGN_SIZE
from .errors import IdCollisionError, SourceChangedError
from .hashutil import asset_id, format_id
from .records import AssetTableEntry, AssetTableHeader, FileHeader, table_end


_COPY_CHUNK = 1024 * 1024
_ZEROS = b"\x00" * ASSET_ALIGN_SIZE


@dataclass
class AssetDescription:
    """Builder input: a logical name plus exactly one byte source.

    ``data`` holds the bytes in memory; ``path`` points at a loose file that
    is only opened while the archive is being written.
    """

    name: str
    path: Optional[str] = None
    data: Optional[bytes] = None

    def __post_init__(self):
        if (self.path is None) == (self.data is None):
            raise ValueError(f"Asset {self.name!r} needs exactly one of path or data")
        if self.path is not None:
            self.path = os.fspath(self.path)

    def source_size(self) -> int:
        if self.data is not None:
            return len(self.data)
        return os.path.getsize(self.path)


def _write_padding(f: BinaryIO, n: int) -> None:
    while n > 0:
        step = min(n, len(_ZEROS))
        f.write(_ZEROS[:step])
        n -= step


class ArchiveBuilder:
    """Collects asset descriptions and lays them out as one library file.

    Names are unique keys: inserting a second description under an existing
    name replaces the first (last insert wins) but keeps the original slot in
    the build order.
    """

    def __init__(self):
        self.assets: Dict[str, AssetDescription] = {}

    def __len__(self) -> int:
        return len(self.assets)

    def num_assets(self) -> int:
        return len(self.assets)

    def names(self) -> List[str]:
        return list(self.assets)

    def insert(self, desc: AssetDescription) -> None:
        self.assets[desc.name] = desc

    def add_file(self, name: str, path: Union[str, "os.PathLike[str]"]) -> None:
        self.insert(AssetDescription(name=name, path=os.fspath(path)))

    def add_bytes(self, name: str, data: bytes) -> None:
        self.insert(AssetDescription(name=name, data=bytes(data)))

    def collisions(self) -> List[List[str]]:
        """Groups of distinct names that hash to the same asset id."""
        by_id: Dict[int, List[str]] = {}
        for name in self.assets:
            by_id.setdefault(asset_id(name), []).append(name)
        return [names for names in by_id.values() if len(names) > 1]

    def plan(self) -> List[AssetTableEntry]:
        """
        Computes the table entries for the current set of assets.

        Layout:
        1.  Asset data starts after the file header, the table header and
            one entry per asset, rounded up to ``ASSET_ALIGN_SIZE``.
        2.  Assets are placed in build order; each one advances the running
            offset by its size rounded up to ``ASSET_ALIGN_SIZE``, so every
            payload starts on an aligned boundary.
        """
        offset = align_up(table_end(len(self.assets)), ASSET_ALIGN_SIZE)
        entries: List[AssetTableEntry] = []
        for desc in self.assets.values():
            size = desc.source_size()
            entries.append(AssetTableEntry(id=asset_id(desc.name), offset=offset, size=size))
            offset += align_up(size, ASSET_ALIGN_SIZE)
        return entries

    def build(self, output: BinaryIO, *, strict: bool = False) -> List[AssetTableEntry]:
        """Write the complete archive to ``output`` and return its table entries.

        With ``strict=True`` the build refuses to run when two names share an
        id, since the reader could only ever return one of them.
        """
        if strict:
            groups = self.collisions()
            if groups:
                first = groups[0]
                raise IdCollisionError(
                    f"{len(groups)} id collision(s); e.g. {first!r} all hash to {format_id(asset_id(first[0]))}"
                )
        entries = self.plan()
        base = table_end(len(entries))

        FileHeader().write(output)
        AssetTableHeader(num_assets=len(entries)).write(output)
        for entry in entries:
            entry.write(output)
        _write_padding(output, padding_for(base, ASSET_ALIGN_SIZE))

        for desc, entry in zip(self.assets.values(), entries):
            written = self._write_payload(output, desc, entry.size)
            _write_padding(output, padding_for(written, ASSET_ALIGN_SIZE))
        return entries

    def build_to_path(self, out_path: Union[str, "os.PathLike[str]"], *, strict: bool = False) -> List[AssetTableEntry]:
        with open(out_path, "wb") as f:
            return self.build(f, strict=strict)

    # internals
    def _write_payload(self, output: BinaryIO, desc: AssetDescription, expected: int) -> int:
        if desc.data is not None:
            output.write(desc.data)
            return len(desc.data)
        written = 0
        with open(desc.path, "rb") as src:
            while True:
                buf = src.read(min(_COPY_CHUNK, expected - written + 1))
                if not buf:
                    break
                written += len(buf)
                if written > expected:
                    break
                output.write(buf)
        if written != expected:
            raise SourceChangedError(
                f"Source for {desc.name!r} changed during build: planned {expected} bytes, found {written}"
            )
        return written
