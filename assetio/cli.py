from __future__ import annotations

import os
import sys
import argparse

from typing import List, Optional, Tuple

from assetio.writer import ArchiveBuilder
from assetio.reader import Library
from assetio.records import table_end
from assetio.pathutil import display_name, norm_name
from assetio.hashutil import format_id
from assetio.errors import (
    AssetioError,
    AssetNotFoundError,
    CorruptArchiveError,
    InvalidFormatError,
    TruncatedInputError,
)


def _iter_files(directory: str, *, exclude: Optional[str] = None) -> List[Tuple[str, str]]:
    """Walk ``directory`` and return (full path, relative path) pairs in sorted order.

    ``exclude`` names one file to leave out, so an output library written
    inside the walked tree is not packed into itself.
    """
    skip = os.path.abspath(exclude) if exclude else None
    found: List[Tuple[str, str]] = []
    for root, dirnames, filenames in os.walk(directory):
        dirnames.sort()
        for fn in sorted(filenames):
            full = os.path.join(root, fn)
            if not os.path.isfile(full) or os.path.abspath(full) == skip:
                continue
            found.append((full, os.path.relpath(full, start=directory)))
    return found


def cmd_pack(directory: str, output: str, *, relative: bool = False, quiet: bool = False, strict: bool = False) -> bool:
    """Pack every file under a directory into a new library.

    Args:
        directory: Directory to walk recursively.
        output: Path of the library file to write.
        relative: Key assets by their path relative to ``directory`` instead
            of the path as walked.
        quiet: Only print the final summary.
        strict: Refuse to build when two names hash to the same id.
    """
    if not os.path.isdir(directory):
        raise FileNotFoundError(f"Not a directory: {directory}")
    builder = ArchiveBuilder()
    for full, rel in _iter_files(directory, exclude=output):
        name = norm_name(rel if relative else full)
        if not quiet:
            print(f"Found Asset: {display_name(name)}")
        builder.add_file(name, full)

    for names in builder.collisions():
        shown = ", ".join(display_name(n) for n in names)
        print(f"Warning: asset id collision between {shown}; only the last is reachable", file=sys.stderr)

    entries = builder.build_to_path(output, strict=strict)
    print(f"Successfully wrote asset library to {display_name(output)} ({len(entries)} assets)")
    return True


def cmd_dump(archive: str) -> bool:
    """Print the id and size of every asset in a library.

    Args:
        archive: Path to a library file.
    """
    with Library(archive) as lib:
        for entry in lib.entries():
            print(f"Found Asset: [Id: {format_id(entry.id)}, Size: {entry.size}]")
    return True


def cmd_info(archive: str) -> bool:
    """Show library layout totals."""
    with Library(archive) as lib:
        total = len(lib.source)
        n = lib.num_assets()
        payload = lib.payload_bytes()
        print(f"Library: {archive}")
        print(f"  Size: {total} bytes")
        print(f"  Assets: {n}")
        print(f"  Table bytes: {table_end(n)}")
        print(f"  Payload bytes: {payload}")
        print(f"  Padding bytes: {total - table_end(n) - payload}")
    return True


def cmd_cat(archive: str, name: str, *, output: Optional[str] = None) -> bool:
    """Write one asset's bytes to stdout or to ``output``."""
    with Library(archive) as lib:
        asset = lib.load(name)
        if output:
            with open(output, "wb") as f:
                f.write(asset.data)
        else:
            sys.stdout.buffer.write(asset.data)
            sys.stdout.flush()
    return True


def main(argv: List[str] | None = None):
    ap = argparse.ArgumentParser(
        prog="assetio",
        description="Pack and inspect assetio libraries",
    )
    sub = ap.add_subparsers(dest="cmd", required=True)

    ap_pack = sub.add_parser("pack", help="Pack a directory into a library")
    ap_pack.add_argument("directory", help="Directory to pack")
    ap_pack.add_argument("output", help="Output library path")
    ap_pack.add_argument("--relative", action="store_true", help="Key assets by path relative to the directory")
    ap_pack.add_argument("--strict", action="store_true", help="Fail instead of warning on asset id collisions")
    ap_pack.add_argument("--quiet", help="limit outputs to summaries only", action="store_true")

    ap_dump = sub.add_parser("dump", help="List asset ids and sizes")
    ap_dump.add_argument("archive", help="Library path")

    ap_info = sub.add_parser("info", help="Show library information")
    ap_info.add_argument("archive", help="Library path")

    ap_cat = sub.add_parser("cat", help="Write one asset's bytes")
    ap_cat.add_argument("archive", help="Library path")
    ap_cat.add_argument("name", help="Logical asset name")
    ap_cat.add_argument("--output", "-o", help="Write to this file instead of stdout")

    args = ap.parse_args(argv)
    try:
        if args.cmd == "pack":
            cmd_pack(args.directory, args.output, relative=args.relative, quiet=args.quiet, strict=args.strict)
        elif args.cmd == "dump":
            cmd_dump(args.archive)
        elif args.cmd == "info":
            cmd_info(args.archive)
        elif args.cmd == "cat":
            cmd_cat(args.archive, args.name, output=args.output)
        else:
            raise RuntimeError("Unknown command")
    except AssetNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except (InvalidFormatError, TruncatedInputError, CorruptArchiveError) as e:
        print(f"Error: not a valid asset library: {e}", file=sys.stderr)
        sys.exit(2)
    except (AssetioError, OSError, RuntimeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
