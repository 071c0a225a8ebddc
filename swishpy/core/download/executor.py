"""
Download executor.

Streams one remote file to disk. A partially written file never
survives a failed download; the body is written to a
'.part' sibling and moved into place once complete.
"""
import os
from pathlib import Path, PurePosixPath
from typing import Optional, Union

import aiofiles

from .models import RemoteFile, RemoteManifest
from ..api.errors import error_for_download_status
from ..api.transport import AsyncTransport
from ..exceptions import FileError, InvalidResponseError
from ..logging import get_logger, format_size
from ..progress import TransferProgress, ProgressCallback

logger = get_logger('swishpy.download.executor')


class DownloadExecutor:
    """
    Downloads files listed in a manifest.

    Example:
        >>> executor = DownloadExecutor(transport)
        >>> path = await executor.download(manifest, manifest.files[0], "downloads")
    """

    def __init__(self, transport: AsyncTransport, read_chunk_size: int = 131072):
        self._transport = transport
        self._read_chunk_size = read_chunk_size

    async def download(
        self,
        manifest: RemoteManifest,
        remote_file: RemoteFile,
        dest_dir: Union[str, Path] = ".",
        token: Optional[str] = None,
        progress: Optional[TransferProgress] = None,
        progress_callback: ProgressCallback = None
    ) -> Path:
        """
        Download remote_file into dest_dir under its remote name.

        Args:
            manifest: Manifest the file belongs to
            remote_file: File to download
            dest_dir: Destination directory (created if missing)
            token: Download token, used only for protected links
            progress: Shared progress counter to advance
            progress_callback: Called with the progress after every chunk

        Returns:
            Path of the written file

        Raises:
            DownloadNumberExceededError: If the download quota is used up
            NotFoundError: If the file is gone
            InvalidResponseError: On other error statuses or an unusable file name
            TransportError: On connection failure
            FileError: If the destination cannot be written
        """
        url = manifest.file_url(remote_file, token)
        dest_dir = Path(dest_dir)
        dest = dest_dir / self.safe_name(remote_file.name)
        part = dest.with_name(dest.name + '.part')
        try:
            dest_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FileError(f"Cannot create directory {dest_dir}: {e}", path=str(dest_dir)) from e

        logger.info(f"Downloading {remote_file.name} ({format_size(remote_file.size)}) to {dest}")

        created = False
        try:
            async with self._transport.stream(url) as response:
                error = error_for_download_status(response.status, url, remote_file.name)
                if error is not None:
                    raise error

                try:
                    async with aiofiles.open(part, 'wb') as f:
                        created = True
                        async for chunk in response.iter_chunks(self._read_chunk_size):
                            await f.write(chunk)
                            if progress is not None:
                                progress.advance(len(chunk))
                                if progress_callback:
                                    progress_callback(progress)
                    os.replace(part, dest)
                except OSError as e:
                    raise FileError(f"Cannot write {dest}: {e}", path=str(dest)) from e
        except BaseException:
            if created:
                self._remove_partial(part)
            raise

        if progress is not None:
            progress.complete_item()
            if progress_callback:
                progress_callback(progress)
        logger.info(f"Downloaded {remote_file.name}")
        return dest

    @staticmethod
    def safe_name(name: str) -> str:
        """
        Reduce a remote file name to a single path component.

        Raises:
            InvalidResponseError: If nothing usable is left
        """
        safe = PurePosixPath(name.replace('\\', '/')).name
        if safe in ('', '.', '..'):
            raise InvalidResponseError(f"Unusable file name from server: {name!r}")
        return safe

    @staticmethod
    def _remove_partial(path: Path) -> None:
        try:
            path.unlink()
            logger.debug(f"Removed partial file {path}")
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error(f"Could not remove partial file {path}: {e}")
