"""Raw deflate codec used for on-the-wire compression."""

import zlib

from common.exceptions import CorruptPayloadError

# Negative window bits select a raw deflate stream without zlib header/trailer.
_WBITS = -zlib.MAX_WBITS


def compress(data: bytes) -> bytes:
    """Compress a complete payload into one raw deflate stream."""
    compressor = zlib.compressobj(zlib.Z_DEFAULT_COMPRESSION, zlib.DEFLATED, _WBITS)
    return compressor.compress(data) + compressor.flush()


def decompress(data: bytes) -> bytes:
    """
    Inflate one raw deflate stream.

    Raises:
        CorruptPayloadError: If ``data`` is not a valid deflate stream
    """
    decompressor = zlib.decompressobj(_WBITS)
    try:
        return decompressor.decompress(data) + decompressor.flush()
    except zlib.error as e:
        raise CorruptPayloadError(f"Cannot inflate compressed part: {e}") from e
