from __future__ import annotations

import hashlib
from typing import NewType

AssetId = NewType("AssetId", int)  # unsigned 64-bit


def asset_id(name: str) -> AssetId:
    """Derive the 64-bit identifier for a logical asset name.

    Uses the first 8 bytes of a BLAKE2b digest of the UTF-8 name so the value
    is stable across processes and machines (the builtin ``hash()`` is salted
    per process). Truncation to 64 bits means this is only a lookup key:
    distinct names collide with probability around n**2 / 2**65 for n names,
    so do not rely on it for uniqueness or security. Use
    ``ArchiveBuilder.collisions()`` to check a build.
    """
    # surrogateescape keeps undecodable filesystem names hashable and stable
    digest = hashlib.blake2b(name.encode("utf-8", "surrogateescape"), digest_size=8).digest()
    return AssetId(int.from_bytes(digest, "little"))


def format_id(aid: int) -> str:
    return f"{aid:#018x}"
