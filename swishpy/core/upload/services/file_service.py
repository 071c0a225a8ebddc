"""
File validation and reading services.

Single Responsibility: Each class handles one specific task.
"""
from pathlib import Path
from typing import List, Optional, Union
import logging
import aiofiles

from ..models import Chunk, LocalFile
from ...exceptions import FileError


class FileValidator:
    """
    Validates and enumerates files before upload.

    Responsibilities:
    - Check file existence
    - Expand a directory into its regular files
    - Get file sizes
    """

    def validate(self, file_path: Union[str, Path]) -> LocalFile:
        """
        Validate a single file for upload.

        Args:
            file_path: Path to the file

        Returns:
            LocalFile snapshot of the file

        Raises:
            FileError: If the file doesn't exist or is not a regular file
        """
        path = Path(file_path)

        if not path.exists():
            raise FileError(f"File not found: {path}", str(path))

        return LocalFile.from_path(path)

    def collect(self, path: Union[str, Path]) -> List[LocalFile]:
        """
        Turn a path into the list of files to upload.

        A file yields itself; a directory yields the regular files it
        directly contains, sorted by name. Subdirectories are skipped.

        Args:
            path: File or directory

        Returns:
            Files in upload order

        Raises:
            FileError: If the path is missing or the directory has no files
        """
        path = Path(path)

        if not path.exists():
            raise FileError(f"Path not found: {path}", str(path))

        if not path.is_dir():
            return [self.validate(path)]

        try:
            entries = sorted(path.iterdir(), key=lambda p: p.name)
        except OSError as e:
            raise FileError(f"Cannot list {path}: {e}", str(path)) from e

        files = [LocalFile.from_path(entry) for entry in entries if entry.is_file()]
        if not files:
            raise FileError(f"No files to upload in {path}", str(path))
        return files


class AsyncFileReader:
    """
    Asynchronous file reader for chunk-based reading.

    Uses aiofiles for non-blocking I/O operations and keeps one file
    handle open for all chunks of a file.
    """

    def __init__(self):
        """Initialize file reader."""
        self._logger = logging.getLogger('swishpy.upload.file')
        self._file_handle = None
        self._current_file: Optional[LocalFile] = None

    async def open_file(self, local_file: LocalFile) -> None:
        """
        Open file for reading. Call this before reading chunks.

        Args:
            local_file: File to open

        Raises:
            FileError: If the file cannot be opened
        """
        if self._file_handle is not None and self._current_file == local_file:
            return

        if self._file_handle is not None:
            await self.close_file()

        try:
            self._file_handle = await aiofiles.open(local_file.path, 'rb')
        except OSError as e:
            raise FileError(f"Cannot open {local_file.path}: {e}", str(local_file.path)) from e
        self._current_file = local_file

    async def close_file(self) -> None:
        """Close the currently open file."""
        if self._file_handle is not None:
            await self._file_handle.close()
            self._file_handle = None
            self._current_file = None

    async def read_chunk(self, chunk: Chunk) -> bytes:
        """
        Read exactly chunk.size bytes at chunk.offset.

        A chunk cannot be padded, so a short read (file truncated since it
        was listed) is fatal.

        Args:
            chunk: Chunk to read

        Returns:
            Chunk data

        Raises:
            FileError: If no file is open, reading fails, or fewer bytes are read
        """
        if self._file_handle is None:
            raise FileError("No file open for reading")

        path = str(self._current_file.path)
        if chunk.size == 0:
            return b''

        try:
            await self._file_handle.seek(chunk.offset)
            data = await self._file_handle.read(chunk.size)
        except OSError as e:
            self._logger.error(f"Failed to read chunk {chunk.index} of {path}: {e}")
            raise FileError(f"Failed to read chunk {chunk.index} of {path}: {e}", path) from e

        if len(data) != chunk.size:
            raise FileError(
                f"Short read on {path}: expected {chunk.size} bytes at offset "
                f"{chunk.offset}, got {len(data)} (file changed during upload?)",
                path
            )

        self._logger.debug(f"Read chunk {chunk.index}: {chunk.offset}-{chunk.end} ({len(data)} bytes)")
        return data
