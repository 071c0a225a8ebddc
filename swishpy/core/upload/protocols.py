"""
Protocol definitions for upload module.

Defines interfaces (protocols) for dependency injection and strategy pattern.
"""
from typing import Protocol, List, Sequence

from .models import Chunk, Container, LocalFile, TransferParameters


class ChunkingStrategy(Protocol):
    """
    Protocol for file chunking strategies.

    Allows different chunking algorithms to be plugged in.
    """

    def calculate_chunks(self, file_size: int) -> List[Chunk]:
        """
        Calculate chunks for a file.

        Args:
            file_size: Total file size in bytes

        Returns:
            Chunks in ascending index order, the last one final
        """
        ...


class FileReaderProtocol(Protocol):
    """Protocol for chunk reading from one open file."""

    async def open_file(self, local_file: LocalFile) -> None:
        ...

    async def read_chunk(self, chunk: Chunk) -> bytes:
        """
        Read exactly chunk.size bytes at chunk.offset.

        Raises:
            FileError: On read failure or short read
        """
        ...

    async def close_file(self) -> None:
        ...


class ChunkUploaderProtocol(Protocol):
    """Protocol for chunk upload operations."""

    async def upload_chunk(
        self,
        container: Container,
        file_uuid: str,
        chunk: Chunk,
        data: bytes,
        is_last: bool
    ) -> None:
        """
        Upload a single chunk.

        Raises:
            InvalidResponseError: If the service rejects the chunk
        """
        ...


class ContainerNegotiatorProtocol(Protocol):
    """Protocol for container creation."""

    async def negotiate(
        self,
        files: Sequence[LocalFile],
        params: TransferParameters
    ) -> Container:
        ...

