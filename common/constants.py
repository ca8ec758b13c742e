"""Project-wide constants (part size, fingerprint format, placeholder ids)."""

PART_SIZE_BYTES: int = 100 * 1024  # 100 KiB per transfer part

UNASSIGNED_FILE_ID: int = 0

EMPTY_SESSION_ID: str = "00000000-0000-0000-0000-000000000000"

HASH_ALGORITHM: str = "md5"
