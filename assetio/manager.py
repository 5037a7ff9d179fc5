from __future__ import annotations

from typing import Dict, List, Optional

from .asset import Asset
from .errors import AssetNotFoundError
from .resolver import AssetResolver


class AssetManager:
    """Memoizes resolved assets by name on top of any AssetResolver.

    Each distinct name reaches the resolver at most once while it resolves
    successfully; later loads return the cached Asset itself. Misses are not
    cached. Entries are never evicted.

    Not thread-safe: guard shared instances with a lock or give each thread
    its own manager.
    """

    def __init__(self, resolver: AssetResolver):
        self.resolver = resolver
        self._cache: Dict[str, Asset] = {}

    def __repr__(self) -> str:
        return f"AssetManager({self.resolver!r}, cached={len(self._cache)})"

    def __contains__(self, name: object) -> bool:
        return name in self._cache

    def __len__(self) -> int:
        return len(self._cache)

    def cached_names(self) -> List[str]:
        return list(self._cache)

    def load(self, name: str) -> Optional[Asset]:
        asset = self._cache.get(name)
        if asset is not None:
            return asset
        try:
            asset = self.resolver.load(name)
        except AssetNotFoundError:
            return None
        self._cache[name] = asset
        return asset
