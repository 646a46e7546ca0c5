"""
Chunking strategies built on the core fingerprint engine.
"""

from rabin_cdc.strategies.rabin_chunker import RabinChunker

__all__ = ["RabinChunker"]
