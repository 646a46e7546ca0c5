"""
Per-chunk identity hash.

A compact, order-sensitive fold used to compare chunks and label them in
reports. It is not collision resistant and plays no part in boundary
decisions.
"""

from rabin_cdc.core.base import BytesLike
from rabin_cdc.core.fingerprint import MASK64, POLY, rotl64


def identity_hash(data: BytesLike, multiplier: int = POLY) -> int:
    """
    Fold a chunk into a 64-bit identity hash.

    Each byte is taken as a signed 8-bit value sign-extended to 64 bits, so
    bytes 0x80-0xFF set all of the upper bits when XORed in.

    Args:
        data: Chunk bytes
        multiplier: Wraparound multiplier applied after every byte

    Returns:
        Unsigned 64-bit hash
    """
    value = 0
    for byte in bytes(data):
        if byte & 0x80:
            byte |= 0xFFFFFFFFFFFFFF00
        value = rotl64(value, 1) ^ byte
        value = (value * multiplier) & MASK64
    return value


def format_hash(value: int) -> str:
    return f"0x{value:016X}"
