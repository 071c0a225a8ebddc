"""
Data models for upload module.

Uses dataclasses for immutable, type-safe data structures.
"""
from dataclasses import dataclass, field
from typing import Tuple, Optional, Union
from pathlib import Path

from ...exceptions import InvalidArgumentError, FileError


ALLOWED_DURATIONS = (1, 7, 15, 30)
MIN_DOWNLOADS = 1
MAX_DOWNLOADS = 250
DEFAULT_LANG = 'en_GB'


@dataclass(frozen=True)
class Chunk:
    """
    A contiguous byte range of a file, uploaded as one request.

    Attributes:
        index: Ordinal of the chunk in its file
        offset: Start position in bytes
        size: Length in bytes
    """
    index: int
    offset: int
    size: int

    @property
    def end(self) -> int:
        """Returns the position after the last byte."""
        return self.offset + self.size


@dataclass(frozen=True)
class LocalFile:
    """
    Read-only view of a local file to upload.

    Attributes:
        path: Path to the file
        name: Name sent to the service
        size: Size in bytes; the upload must read exactly this many bytes
    """
    path: Path
    name: str
    size: int

    @classmethod
    def from_path(cls, path: Union[str, Path], name: Optional[str] = None) -> 'LocalFile':
        """
        Build from a filesystem path.

        Raises:
            FileError: If the path is missing or not a regular file
        """
        path = Path(path)
        try:
            stat = path.stat()
        except OSError as e:
            raise FileError(f"Cannot stat {path}: {e}", str(path)) from e
        if not path.is_file():
            raise FileError(f"Not a regular file: {path}", str(path))
        return cls(path=path, name=name or path.name, size=stat.st_size)

    def __str__(self) -> str:
        return f"Name: {self.name}, Size: {self.size}"


@dataclass(frozen=True)
class TransferParameters:
    """
    User intent for a new transfer.

    Attributes:
        duration: Days the transfer stays online (1, 7, 15 or 30)
        password: Optional password protecting the download
        message: Message shown on the download page
        number_of_downloads: Allowed downloads (1..250)
        lang: Language of service e-mails and pages
        author_email: Sender e-mail, empty for link transfers
        recipient_emails: Recipients (reserved; link transfers send none)

    Example:
        >>> params = TransferParameters(duration=7, password="s3cret")
        >>> params.number_of_downloads
        250
    """
    duration: int = 30
    password: Optional[str] = None
    message: str = ''
    number_of_downloads: int = MAX_DOWNLOADS
    lang: str = DEFAULT_LANG
    author_email: str = ''
    recipient_emails: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        """Validate ranges."""
        if self.duration not in ALLOWED_DURATIONS:
            raise InvalidArgumentError(
                f"Duration must be one of {', '.join(map(str, ALLOWED_DURATIONS))} days, "
                f"got {self.duration}"
            )
        if not MIN_DOWNLOADS <= self.number_of_downloads <= MAX_DOWNLOADS:
            raise InvalidArgumentError(
                f"Number of downloads must be between {MIN_DOWNLOADS} and {MAX_DOWNLOADS}, "
                f"got {self.number_of_downloads}"
            )
        if not isinstance(self.recipient_emails, tuple):
            object.__setattr__(self, 'recipient_emails', tuple(self.recipient_emails))

    @property
    def is_protected(self) -> bool:
        return bool(self.password)


@dataclass(frozen=True)
class Container:
    """
    Remote container assigned by the service for one upload session.

    Attributes:
        upload_host: Host receiving the chunks
        container_uuid: Container UUID
        file_uuids: One UUID per submitted file, in submission order
    """
    upload_host: str
    container_uuid: str
    file_uuids: Tuple[str, ...]

    def chunk_url(self, file_uuid: str, chunk_index: int, is_last: bool) -> str:
        """Build the upload URL of one chunk."""
        return (
            f"https://{self.upload_host}/api/uploadChunk/"
            f"{self.container_uuid}/{file_uuid}/{chunk_index}/{1 if is_last else 0}"
        )


@dataclass(frozen=True)
class UploadResult:
    """
    Result of a successful upload.

    Attributes:
        link: Public share URL
        container: Container the files were uploaded to
        files: Uploaded files
    """
    link: str
    container: Container
    files: Tuple[LocalFile, ...] = ()

    @property
    def total_bytes(self) -> int:
        return sum(f.size for f in self.files)
