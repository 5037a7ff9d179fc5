"""
assetio: packed asset libraries

This package writes and reads the assetio library format, a single file that
bundles many named blobs behind a fixed-size table of contents:

- 8-byte magic, 8-byte entry count, then 24-byte {id, offset, size} entries
- Asset payloads start on 64-byte boundaries and are zero padded
- Assets are looked up by a 64-bit id hashed from their logical name
- Archives are memory-mapped on open; asset bytes are handed out as
  zero-copy memoryviews that keep the mapping alive

Loose files and packed libraries share one resolver interface, and
AssetManager memoizes lookups on top of either.
"""

__version__ = "0.1"

__all__ = [
    "constants",
    "writer",
    "reader",
    "resolver",
    "manager",
]

# Programmatic API: assetio.writer.ArchiveBuilder builds, assetio.reader.Library
# reads, and assetio.manager.AssetManager caches resolved assets. The CLI
# functions in assetio.cli (cmd_pack/cmd_dump) take normal parameters.
