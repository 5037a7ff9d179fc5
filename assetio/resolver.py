from __future__ import annotations

import abc
import os
from pathlib import Path
from typing import Optional, Union

from .asset import Asset
from .errors import AssetNotFoundError
from .source import map_file


class AssetResolver(abc.ABC):
    """Turns a logical name into an Asset.

    Implementations either map loose files (FileResolver) or look names up in
    an open library (assetio.reader.Library). AssetManager caches over any of
    them.
    """

    @abc.abstractmethod
    def load(self, name: str) -> Asset:
        """Resolve ``name`` or raise AssetNotFoundError."""


class FileResolver(AssetResolver):
    """Resolves names to whole loose files, each mapped as its own source."""

    def __init__(self, root: Optional[Union[str, "os.PathLike[str]"]] = None):
        self.root = Path(root) if root is not None else None

    def __repr__(self) -> str:
        return f"FileResolver(root={self.root!r})"

    def path_for(self, name: str) -> Path:
        return self.root / name if self.root is not None else Path(name)

    def load(self, name: str) -> Asset:
        path = self.path_for(name)
        try:
            source = map_file(path)
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as exc:
            raise AssetNotFoundError(f"No such asset file: {path}") from exc
        return Asset(name=name, offset=0, size=len(source), source=source)
