"""
Chunk upload service.

Handles uploading individual chunks to the container's upload host.
"""
import time
import logging

from ..models import Chunk, Container
from ...api.transport import AsyncTransport
from ...api.errors import error_for_status


class ChunkUploader:
    """
    Sends chunk bytes to SwissTransfer.

    Responsibilities:
    - Build the chunk URL with the last-chunk flag
    - POST the bytes with the transport retry policy
    - Raise on a final error status
    """

    def __init__(self, transport: AsyncTransport):
        """
        Initialize chunk uploader.

        Args:
            transport: Shared transport
        """
        self._transport = transport
        self._logger = logging.getLogger('swishpy.upload.chunk')

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

        The data is held in memory, so retries resend the same bytes
        without touching the source file.

        Args:
            container: Target container
            file_uuid: UUID of the file within the container
            chunk: Chunk being sent
            data: Exactly chunk.size bytes
            is_last: Whether this is the file's final chunk

        Raises:
            ValueError: If data does not match the chunk size
            InvalidResponseError: If the service rejects the chunk
            TransportError: On connection failure
        """
        if len(data) != chunk.size:
            raise ValueError(
                f"Chunk {chunk.index} holds {len(data)} bytes, expected {chunk.size}"
            )

        url = container.chunk_url(file_uuid, chunk.index, is_last)
        headers = {'Content-Length': str(chunk.size)}
        chunk_size_kb = chunk.size / 1024

        upload_start = time.time()
        self._logger.debug(
            f"Uploading chunk {chunk.index} at offset {chunk.offset} "
            f"({chunk_size_kb:.1f} KB{', last' if is_last else ''})"
        )

        response = await self._transport.post(url, body=data, headers=headers)

        error = error_for_status(response.status, url, response.body)
        if error is not None:
            self._logger.error(f"Chunk {chunk.index} rejected with status {response.status}")
            raise error

        upload_time = time.time() - upload_start
        speed_kbps = (chunk_size_kb / upload_time) if upload_time > 0 else 0
        self._logger.debug(
            f"Chunk {chunk.index} uploaded in {upload_time:.2f}s ({speed_kbps:.1f} KB/s)"
        )
