class AssetioError(Exception):
    """Base class for assetio-specific errors."""


# Decoding
class TruncatedInputError(AssetioError):
    pass


class InvalidFormatError(AssetioError):
    pass


class CorruptArchiveError(AssetioError):
    pass


# Resolution
class AssetNotFoundError(AssetioError, KeyError):
    def __str__(self) -> str:
        # KeyError quotes its argument; keep plain messages
        return str(self.args[0]) if self.args else ""


# Building
class SourceChangedError(AssetioError):
    pass


class IdCollisionError(AssetioError):
    pass
