"""
Chunking strategies for file uploads.

Implements Strategy Pattern for different chunking algorithms.
Open for extension (new strategies), closed for modification.
"""
from abc import ABC, abstractmethod
from typing import List

from ..models import Chunk
from ...api.config import CHUNK_SIZE


def plan(total_size: int, chunk_length: int) -> List[Chunk]:
    """
    Split a byte length into ordered fixed-size chunks.

    The result has ceil(total_size / chunk_length) chunks, except for an
    empty file which still gets one zero-size chunk so that the service
    receives a last-chunk marker. Only the last chunk is final.

    Args:
        total_size: File size in bytes
        chunk_length: Maximum chunk size in bytes

    Returns:
        Chunks in ascending index order

    Example:
        >>> plan(100, 40)
        [Chunk(index=0, offset=0, size=40), Chunk(index=1, offset=40, size=40), Chunk(index=2, offset=80, size=20)]
    """
    if chunk_length <= 0:
        raise ValueError("Chunk length must be positive")
    if total_size < 0:
        raise ValueError("Total size cannot be negative")

    if total_size == 0:
        return [Chunk(index=0, offset=0, size=0)]

    count = -(-total_size // chunk_length)
    chunks = []
    for index in range(count):
        offset = index * chunk_length
        size = min(chunk_length, total_size - offset)
        chunks.append(Chunk(index=index, offset=offset, size=size))
    return chunks


def is_last(chunk: Chunk, chunks: List[Chunk]) -> bool:
    """Returns True if chunk carries the last-chunk marker."""
    return chunk.index == len(chunks) - 1


class BaseChunkingStrategy(ABC):
    """Abstract base class for chunking strategies."""

    @abstractmethod
    def calculate_chunks(self, file_size: int) -> List[Chunk]:
        """Calculate chunk boundaries."""
        pass


class FixedSizeChunkingStrategy(BaseChunkingStrategy):
    """
    Fixed-size chunking used by SwissTransfer.

    Every chunk is chunk_size bytes except the remainder chunk.
    """

    DEFAULT_CHUNK_SIZE = CHUNK_SIZE

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE):
        """
        Initialize with chunk size.

        Args:
            chunk_size: Size of each chunk in bytes
        """
        if chunk_size <= 0:
            raise ValueError("Chunk size must be positive")
        self.chunk_size = chunk_size

    def calculate_chunks(self, file_size: int) -> List[Chunk]:
        """
        Calculate fixed-size chunks.

        Args:
            file_size: Total file size in bytes

        Returns:
            List of chunks
        """
        return plan(file_size, self.chunk_size)
