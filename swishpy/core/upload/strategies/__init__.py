"""Upload strategies module."""
from .chunking import plan, is_last, BaseChunkingStrategy, FixedSizeChunkingStrategy

__all__ = [
    'plan',
    'is_last',
    'BaseChunkingStrategy',
    'FixedSizeChunkingStrategy',
]
