"""
Rolling fingerprint engine for content-defined chunking.

This module holds the pieces every chunker in the package shares:

- the 256-entry polynomial lookup table
- 64-bit left rotation
- the fixed-size rolling window that owns the live fingerprint
- the boundary predicate applied to that fingerprint

The eviction step in ``RollingWindow.slide`` XORs the outgoing byte's table
value without undoing the rotations applied since that byte entered the
window. The fingerprint is therefore a mixing function of the whole stream
rather than a strict Rabin fingerprint of the last ``window_size`` bytes.
Chunk boundaries depend on this exact behaviour, so it is kept as is.
"""

import logging
from functools import lru_cache
from typing import Tuple

from rabin_cdc.core.base import InvalidArgumentError

logger = logging.getLogger(__name__)

MASK64 = 0xFFFFFFFFFFFFFFFF

POLY = 0x3
WINDOW_SIZE = 48
CHUNK_MASK = 0x1FFF


def rotl64(value: int, shift: int = 1) -> int:
    """Rotate a 64-bit unsigned value left by ``shift`` bits."""
    shift %= 64
    value &= MASK64
    if shift == 0:
        return value
    return ((value << shift) | (value >> (64 - shift))) & MASK64


def build_lookup_table(polynomial: int = POLY) -> Tuple[int, ...]:
    """
    Build the 256-entry lookup table for a polynomial.

    Each byte value is shifted right eight times, XORing in the polynomial
    whenever the bit shifted out is set.

    Args:
        polynomial: Polynomial coefficients

    Returns:
        Immutable tuple indexed by byte value
    """
    return _build_table(int(polynomial))


@lru_cache(maxsize=None)
def _build_table(polynomial: int) -> Tuple[int, ...]:
    table = []
    for i in range(256):
        value = i
        for _ in range(8):
            if value & 1:
                value = (value >> 1) ^ polynomial
            else:
                value >>= 1
        table.append(value & MASK64)

    logger.debug(f"Built lookup table for polynomial {hex(polynomial)}")
    return tuple(table)


LOOKUP_TABLE = build_lookup_table(POLY)


def is_boundary(fingerprint: int, mask: int = CHUNK_MASK) -> bool:
    """Check if the fingerprint's masked bits are all zero."""
    return (fingerprint & mask) == 0


class RollingWindow:
    """
    Fixed-size circular byte window with an incrementally updated fingerprint.

    A window is created fresh for every scan. The first ``window_size`` bytes
    are taken in with ``absorb``; every byte after that goes through ``slide``,
    which evicts the byte under the write cursor.

    Example:
        ```python
        window = RollingWindow()
        for byte in data[:48]:
            window.absorb(byte)
        for byte in data[48:]:
            fingerprint = window.slide(byte)
        ```
    """

    def __init__(self, window_size: int = WINDOW_SIZE, table: Tuple[int, ...] = LOOKUP_TABLE):
        if window_size <= 0:
            raise InvalidArgumentError("window_size must be positive")
        if len(table) != 256:
            raise InvalidArgumentError("lookup table must have 256 entries")

        self.window_size = window_size
        self.table = table
        self.window = bytearray(window_size)
        self.window_pos = 0
        self.filled = 0
        self.fingerprint = 0

    @property
    def is_full(self) -> bool:
        return self.filled >= self.window_size

    def absorb(self, byte: int) -> int:
        """
        Take in one byte while the window is still filling.

        Args:
            byte: Incoming byte value (0-255)

        Returns:
            Updated fingerprint

        Raises:
            InvalidArgumentError: If the window is already full
        """
        if self.is_full:
            raise InvalidArgumentError("window is full; use slide() for further bytes")

        self.window[self.filled] = byte
        self.filled += 1
        self.fingerprint = rotl64(self.fingerprint, 1) ^ self.table[byte]
        return self.fingerprint

    def slide(self, byte: int) -> int:
        """
        Evict the byte under the cursor and take in a new one.

        Args:
            byte: Incoming byte value (0-255)

        Returns:
            Updated fingerprint
        """
        outgoing = self.window[self.window_pos]
        self.window[self.window_pos] = byte
        self.window_pos = (self.window_pos + 1) % self.window_size

        fingerprint = rotl64(self.fingerprint, 1)
        fingerprint ^= self.table[outgoing]
        fingerprint ^= self.table[byte]
        self.fingerprint = fingerprint
        return fingerprint

    def is_boundary(self, mask: int = CHUNK_MASK) -> bool:
        return is_boundary(self.fingerprint, mask)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(window_size={self.window_size}, "
            f"filled={self.filled}, fingerprint={hex(self.fingerprint)})"
        )
