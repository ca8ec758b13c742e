"""Client-level transfer options."""

from dataclasses import dataclass

from common.constants import PART_SIZE_BYTES


@dataclass(frozen=True)
class TransferSettings:
    """
    Options shared by every transfer driven by one client.

    Attributes:
        use_compression: Negotiate deflate compression for all transfers
        verify_download_hash: Check the service fingerprint after each download
        part_size: Maximum bytes per part, for both upload and download
    """
    use_compression: bool = True
    verify_download_hash: bool = False
    part_size: int = PART_SIZE_BYTES

    def __post_init__(self):
        if self.part_size <= 0:
            raise ValueError(f"part_size must be positive, got {self.part_size}")
