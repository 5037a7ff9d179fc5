# Magic number stored as a little-endian u64 at offset 0
ARCHIVE_MAGIC = 0xDEADBEEF

# Every asset payload (and the end of the table region) starts on this boundary
ASSET_ALIGN_SIZE = 64
