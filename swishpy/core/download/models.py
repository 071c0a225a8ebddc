"""
Data models for download module.

A manifest is rebuilt on every link resolution and never persisted.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Union
from urllib.parse import quote

from ..exceptions import InvalidResponseError
from ..upload.models import LocalFile


@dataclass(frozen=True)
class RemoteFile:
    """
    A file behind a share link.

    Attributes:
        uuid: File UUID
        name: File name
        size: Size in bytes
        mime_type: MIME type reported by the service
        created_date: Upload date (as sent by the service)
        expired_date: Expiry date (as sent by the service)
        download_counter: Downloads so far
        virus_scan: Virus-scan state of the file, if reported
    """
    uuid: str
    name: str
    size: int
    mime_type: str = ''
    created_date: str = ''
    expired_date: str = ''
    download_counter: int = 0
    virus_scan: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RemoteFile':
        """
        Create from an entry of container.files.

        Raises:
            InvalidResponseError: If UUID, fileName or fileSizeInBytes is missing
        """
        try:
            return cls(
                uuid=data['UUID'],
                name=data['fileName'],
                size=int(data['fileSizeInBytes']),
                mime_type=data.get('mimeType') or '',
                created_date=data.get('createdDate') or '',
                expired_date=data.get('expiredDate') or '',
                download_counter=int(data.get('downloadCounter') or 0),
                virus_scan=data.get('eVirus'),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidResponseError(f"Malformed file entry in link response: {e}") from e

    def __str__(self) -> str:
        return (
            f"Name: {self.name}, Size: {self.size}, Created: {self.created_date}, "
            f"Expires: {self.expired_date}, Mime: {self.mime_type}"
        )


@dataclass(frozen=True)
class RemoteManifest:
    """
    Parsed result of a link resolution.

    Attributes:
        download_host: Host serving the files
        link_uuid: Link UUID
        container_uuid: Container UUID
        needs_password: Whether downloads need a token
        files: Files of the container
    """
    download_host: str
    link_uuid: str
    container_uuid: str
    needs_password: bool
    files: Tuple[RemoteFile, ...]

    @property
    def download_base_url(self) -> str:
        return f"https://{self.download_host}/api/download/{self.link_uuid}"

    @property
    def total_bytes(self) -> int:
        return sum(f.size for f in self.files)

    def file_url(self, remote_file: RemoteFile, token: Optional[str] = None) -> str:
        """URL of one file; the token is appended only for protected links."""
        url = f"{self.download_base_url}/{remote_file.uuid}"
        if self.needs_password and token:
            url += f"?token={quote(token, safe='')}"
        return url

    @classmethod
    def from_response(cls, payload: Any) -> 'RemoteManifest':
        """
        Build from the JSON body of a link resolution.

        Raises:
            InvalidResponseError: If a required field is missing
        """
        try:
            data = payload['data']
            container = data['container']
            files = tuple(RemoteFile.from_dict(f) for f in container['files'])
            return cls(
                download_host=data['downloadHost'],
                link_uuid=data['linkUUID'],
                container_uuid=container['UUID'],
                needs_password=_as_flag(container.get('needPassword')),
                files=files,
            )
        except (KeyError, TypeError) as e:
            raise InvalidResponseError(f"Link response missing field: {e}") from e


def _as_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'yes')
    return bool(value)


TransferFile = Union[LocalFile, RemoteFile]


def describe_file(transfer_file: TransferFile) -> str:
    """One-line description of a local or remote file."""
    if isinstance(transfer_file, RemoteFile):
        return f"{transfer_file.name} ({transfer_file.size} bytes, {transfer_file.mime_type or 'unknown type'})"
    if isinstance(transfer_file, LocalFile):
        return f"{transfer_file.name} ({transfer_file.size} bytes, {transfer_file.path})"
    raise TypeError(f"Not a transfer file: {transfer_file!r}")
