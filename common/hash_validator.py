"""Provides content fingerprint calculation and comparison helpers."""

import hashlib
from typing import Optional

from common.constants import HASH_ALGORITHM
from common.exceptions import InvalidArgumentError


def compute_hash(body: Optional[bytes]) -> str:
    """
    Compute the content fingerprint for a payload.

    Args:
        body: Uncompressed payload bytes

    Returns:
        Lowercase hexadecimal digest

    Raises:
        InvalidArgumentError: If body is None or empty
    """
    if body is None:
        raise InvalidArgumentError("body", "Cannot compute hash: body is missing")
    if len(body) == 0:
        raise InvalidArgumentError("body", "Cannot compute hash: body is empty")
    return hashlib.new(HASH_ALGORITHM, body).hexdigest()


def hashes_match(expected: Optional[str], actual: Optional[str]) -> bool:
    """
    Compare two fingerprints ignoring letter case.

    Args:
        expected: Fingerprint reported by the service
        actual: Fingerprint computed locally

    Returns:
        True if both are present and equal ignoring case
    """
    if expected is None or actual is None:
        return False
    return expected.casefold() == actual.casefold()


def verify_hash(body: Optional[bytes], expected: str) -> bool:
    """
    Verify that a payload matches an expected fingerprint.

    Args:
        body: Payload bytes (must be non-empty)
        expected: Expected fingerprint in any letter case

    Returns:
        True if the fingerprint matches, False otherwise
    """
    return hashes_match(expected, compute_hash(body))


class IncrementalHashCalculator:
    """
    Calculate the fingerprint incrementally while parts arrive.

    Usage:
        calculator = IncrementalHashCalculator()
        calculator.update(part1)
        calculator.update(part2)
        final_hash = calculator.finalize()
    """

    def __init__(self):
        self._hasher = hashlib.new(HASH_ALGORITHM)
        self._size = 0
        self._finalized = False

    def update(self, data: bytes) -> None:
        """Add bytes to the running fingerprint."""
        if self._finalized:
            raise ValueError("Cannot update after finalization")
        self._hasher.update(data)
        self._size += len(data)

    def finalize(self) -> str:
        """
        Finalize the calculation and return the fingerprint.

        Raises:
            InvalidArgumentError: If no bytes were fed
        """
        if self._size == 0:
            raise InvalidArgumentError("body", "Cannot compute hash: body is empty")
        self._finalized = True
        return self._hasher.hexdigest()
