"""
Utility modules for checking chunking results.
"""

from rabin_cdc.utils.validation import ChunkValidator, ValidationError

__all__ = ["ChunkValidator", "ValidationError"]
