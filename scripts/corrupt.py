from __future__ import annotations

import argparse
import os
import sys
from typing import Optional

from assetio.errors import AssetioError
from assetio.records import AssetTableEntry, AssetTableHeader, FileHeader, read_exact, table_end


def _flip_byte(path: str, offset: int, xor_val: int = 0xFF) -> None:
    if offset < 0:
        raise ValueError("Offset must be non-negative")
    with open(path, "r+b") as f:
        f.seek(offset)
        b = f.read(1)
        if not b:
            raise ValueError("Offset beyond end of file")
        f.seek(offset)
        f.write(bytes([b[0] ^ (xor_val & 0xFF)]))
        f.flush()
        os.fsync(f.fileno())


def _entry_offset(index: int) -> int:
    return table_end(index)


def cmd_by_offset(args: argparse.Namespace) -> None:
    _flip_byte(args.archive, args.offset, xor_val=args.xor)
    print(f"Flipped 1 byte at offset {args.offset}")


def cmd_magic(args: argparse.Namespace) -> None:
    _flip_byte(args.archive, 0, xor_val=args.xor)
    print("Flipped 1 byte in the magic number")


def cmd_truncate(args: argparse.Namespace) -> None:
    size = os.path.getsize(args.archive)
    if args.size is not None:
        new_size = args.size
    else:
        # Cut the table in half so decoding runs out mid-table
        with open(args.archive, "rb") as f:
            f.seek(FileHeader.serialized_size())
            n = AssetTableHeader.read(f).num_assets
        if n == 0:
            raise ValueError("Archive has no table entries to cut into")
        new_size = _entry_offset(n // 2) + AssetTableEntry.serialized_size() // 2
    if new_size < 0 or new_size > size:
        raise ValueError(f"Size must be within 0..{size}")
    os.truncate(args.archive, new_size)
    print(f"Truncated archive to {new_size} bytes")


def cmd_entry_size(args: argparse.Namespace) -> None:
    """Grow one table entry's size so it runs past the end of the archive."""
    size = os.path.getsize(args.archive)
    pos = _entry_offset(args.index)
    with open(args.archive, "r+b") as f:
        f.seek(FileHeader.serialized_size())
        n = AssetTableHeader.read(f).num_assets
        if args.index < 0 or args.index >= n:
            raise ValueError(f"Entry index out of range (0..{n - 1})")
        f.seek(pos)
        entry = AssetTableEntry.unpack(read_exact(f, AssetTableEntry.serialized_size()))
        entry.size = size - entry.offset + args.overrun
        f.seek(pos)
        entry.write(f)
        f.flush()
        os.fsync(f.fileno())
    print(f"Entry {args.index} now spans [{entry.offset}, {entry.end}) in a {size} byte archive")


def main(argv: Optional[list[str]] = None) -> None:
    ap = argparse.ArgumentParser(prog="assetio.corrupt", description="Corrupt assetio libraries for testing")
    sub = ap.add_subparsers(dest="cmd", required=True)

    p_off = sub.add_parser("by-offset", help="Flip one byte at an absolute archive offset")
    p_off.add_argument("archive", help="Path to library")
    p_off.add_argument("--offset", type=int, required=True, help="Absolute byte offset in archive")
    p_off.add_argument("--xor", type=lambda x: int(x, 0), default=0xFF, help="XOR mask to apply (default 0xFF)")
    p_off.set_defaults(func=cmd_by_offset)

    p_magic = sub.add_parser("magic", help="Flip a byte of the magic number")
    p_magic.add_argument("archive", help="Path to library")
    p_magic.add_argument("--xor", type=lambda x: int(x, 0), default=0xFF, help="XOR mask to apply (default 0xFF)")
    p_magic.set_defaults(func=cmd_magic)

    p_trunc = sub.add_parser("truncate", help="Truncate the archive (default: mid-table)")
    p_trunc.add_argument("archive", help="Path to library")
    p_trunc.add_argument("--size", type=int, default=None, help="New file size in bytes")
    p_trunc.set_defaults(func=cmd_truncate)

    p_entry = sub.add_parser("entry-size", help="Make a table entry run past the end of the archive")
    p_entry.add_argument("archive", help="Path to library")
    p_entry.add_argument("--index", type=int, default=0, help="Entry index in table order (default 0)")
    p_entry.add_argument("--overrun", type=int, default=1, help="Bytes past the end (default 1)")
    p_entry.set_defaults(func=cmd_entry_size)

    args = ap.parse_args(argv)
    try:
        args.func(args)
    except (AssetioError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
