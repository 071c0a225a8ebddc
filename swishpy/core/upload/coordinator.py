"""
Upload coordinator.

Orchestrates the upload process using injected dependencies:
container negotiation, ordered chunk upload with the last-chunk
marker, and finalization into a share link.
"""
import asyncio
import time
from typing import Any, List, Optional, Sequence

from .protocols import (
    ChunkingStrategy,
    ChunkUploaderProtocol,
    ContainerNegotiatorProtocol,
    FileReaderProtocol,
)
from .models import Chunk, Container, LocalFile, TransferParameters, UploadResult
from .strategies import FixedSizeChunkingStrategy, is_last
from .services import AsyncFileReader, ChunkUploader, ContainerNegotiator
from ..api.transport import AsyncTransport
from ..api.errors import error_for_status
from ..exceptions import InvalidArgumentError, InvalidResponseError
from ..logging import get_logger, format_size
from ..progress import TransferProgress, ProgressCallback

logger = get_logger('swishpy.upload.coordinator')


class UploadCoordinator:
    """
    Coordinates the file upload process.

    Uses dependency injection for all components, making it:
    - Testable (mock dependencies)
    - Extensible (swap strategies)
    - Maintainable (single responsibility)

    Per file, chunks are read and sent in index order and only the last
    one carries the final flag, which makes the service assemble the
    file. With max_parallel_chunks > 1 the non-final chunks of a file
    are sent concurrently; the final chunk still goes last, after every
    other chunk has been acknowledged.
    """

    def __init__(
        self,
        transport: AsyncTransport,
        chunking_strategy: Optional[ChunkingStrategy] = None,
        file_reader: Optional[FileReaderProtocol] = None,
        chunk_uploader: Optional[ChunkUploaderProtocol] = None,
        negotiator: Optional[ContainerNegotiatorProtocol] = None,
        max_parallel_chunks: Optional[int] = None,
        progress_callback: ProgressCallback = None
    ):
        """
        Initialize upload coordinator.

        Args:
            transport: HTTP transport
            chunking_strategy: Strategy for chunking files
            file_reader: File reader implementation
            chunk_uploader: Chunk uploader implementation
            negotiator: Container negotiator implementation
            max_parallel_chunks: Concurrent non-final chunk uploads per file
            progress_callback: Optional callback for progress updates
        """
        config = transport.config
        self._transport = transport
        self._chunking = chunking_strategy or FixedSizeChunkingStrategy(config.chunk_size)
        self._file_reader = file_reader or AsyncFileReader()
        self._uploader = chunk_uploader or ChunkUploader(transport)
        self._negotiator = negotiator or ContainerNegotiator(transport)
        self._max_parallel = max(1, max_parallel_chunks or config.max_parallel_chunks)
        self._progress_callback = progress_callback

    async def send(
        self,
        files: Sequence[LocalFile],
        params: Optional[TransferParameters] = None
    ) -> UploadResult:
        """
        Negotiate a container, upload every file and finalize.

        Args:
            files: Files to upload, in order
            params: Transfer parameters (defaults if not provided)

        Returns:
            UploadResult with the share link
        """
        params = params or TransferParameters()
        container = await self._negotiator.negotiate(files, params)
        link = await self.upload(container, files, lang=params.lang)
        return UploadResult(link=link, container=container, files=tuple(files))

    async def upload(
        self,
        container: Container,
        files: Sequence[LocalFile],
        lang: Optional[str] = None
    ) -> str:
        """
        Upload every file into container, then finalize it.

        Args:
            container: Negotiated container
            files: Files in the order used for negotiation
            lang: Language sent on finalization

        Returns:
            Public share link

        Raises:
            InvalidArgumentError: If files and container UUIDs do not match
            FileError: On local read failure
            InvalidResponseError: If a chunk or the finalization is rejected
        """
        if len(files) != len(container.file_uuids):
            raise InvalidArgumentError(
                f"Container holds {len(container.file_uuids)} file UUIDs for {len(files)} files"
            )

        plans = [self._chunking.calculate_chunks(f.size) for f in files]
        total_bytes = sum(f.size for f in files)
        progress = TransferProgress(
            total_bytes=total_bytes,
            total_items=sum(len(p) for p in plans),
            label=container.container_uuid
        )
        logger.info(
            f"Uploading {len(files)} file(s) ({format_size(total_bytes)}) "
            f"to container {container.container_uuid}"
        )

        start = time.time()
        for local_file, file_uuid, chunks in zip(files, container.file_uuids, plans):
            await self._upload_file(container, local_file, file_uuid, chunks, progress)

        elapsed = time.time() - start
        logger.info(f"All chunks uploaded in {elapsed:.2f}s, finalizing")
        return await self.finalize(container, lang or self._transport.config.lang)

    async def _upload_file(
        self,
        container: Container,
        local_file: LocalFile,
        file_uuid: str,
        chunks: List[Chunk],
        progress: TransferProgress
    ) -> None:
        logger.info(
            f"Uploading {local_file.name} ({format_size(local_file.size)}, {len(chunks)} chunk(s))"
        )
        await self._file_reader.open_file(local_file)
        try:
            if self._max_parallel > 1 and len(chunks) > 2:
                await self._upload_chunks_parallel(container, file_uuid, chunks, progress)
            else:
                for chunk in chunks:
                    data = await self._file_reader.read_chunk(chunk)
                    await self._post_chunk(
                        container, file_uuid, chunk, data, is_last(chunk, chunks), progress
                    )
        finally:
            await self._file_reader.close_file()

    async def _upload_chunks_parallel(
        self,
        container: Container,
        file_uuid: str,
        chunks: List[Chunk],
        progress: TransferProgress
    ) -> None:
        """Send non-final chunks with bounded concurrency, then the final one."""
        active: set = set()
        try:
            for chunk in chunks[:-1]:
                # Reads stay sequential on the single file handle
                data = await self._file_reader.read_chunk(chunk)
                active.add(asyncio.create_task(
                    self._post_chunk(container, file_uuid, chunk, data, False, progress)
                ))
                if len(active) >= self._max_parallel:
                    done, active = await asyncio.wait(active, return_when=asyncio.FIRST_COMPLETED)
                    errors = [task.exception() for task in done if not task.cancelled()]
                    errors = [e for e in errors if e is not None]
                    if errors:
                        raise errors[0]

            if active:
                await asyncio.gather(*active)
                active = set()
        except BaseException:
            for task in active:
                task.cancel()
            await asyncio.gather(*active, return_exceptions=True)
            raise

        final = chunks[-1]
        data = await self._file_reader.read_chunk(final)
        await self._post_chunk(container, file_uuid, final, data, True, progress)

    async def _post_chunk(
        self,
        container: Container,
        file_uuid: str,
        chunk: Chunk,
        data: bytes,
        last: bool,
        progress: TransferProgress
    ) -> None:
        await self._uploader.upload_chunk(container, file_uuid, chunk, data, last)
        progress.advance(chunk.size)
        progress.complete_item()
        if self._progress_callback:
            self._progress_callback(progress)

    async def finalize(self, container: Container, lang: str) -> str:
        """
        Mark the container complete and build its share link.

        Args:
            container: Container whose chunks are all uploaded
            lang: Language code

        Returns:
            Public share link

        Raises:
            InvalidResponseError: On error status or missing linkUUID
        """
        url = f"{self._transport.config.api_url}/uploadComplete"
        response = await self._transport.post(
            url,
            json_body={'UUID': container.container_uuid, 'lang': lang}
        )
        error = error_for_status(response.status, url, response.body)
        if error is not None:
            raise error

        link_uuid = self._extract_link_uuid(response.json())
        link = self._transport.config.share_link(link_uuid)
        logger.info(f"Upload complete: {link}")
        return link

    def _extract_link_uuid(self, data: Any) -> str:
        """Extract linkUUID from the first element of the completion response."""
        try:
            link_uuid = data[0]['linkUUID']
        except (KeyError, IndexError, TypeError) as e:
            raise InvalidResponseError(f"Completion response missing linkUUID: {e}") from e
        if not link_uuid:
            raise InvalidResponseError("Completion response has an empty linkUUID")
        return link_uuid
