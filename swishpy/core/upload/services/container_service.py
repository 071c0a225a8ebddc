"""
Container negotiation service.

Creates the remote container that will receive the files of one upload.
"""
import json
import logging
from typing import Any, Dict, Sequence

from ..models import Container, LocalFile, TransferParameters
from ...api.transport import AsyncTransport
from ...api.errors import error_for_status
from ...exceptions import InvalidArgumentError, InvalidResponseError

# The service expects this literal while its CAPTCHA is disabled for API clients
RECAPTCHA_PLACEHOLDER = 'nope'


class ContainerNegotiator:
    """
    Negotiates a container for a set of local files.

    Example:
        >>> negotiator = ContainerNegotiator(transport)
        >>> container = await negotiator.negotiate(files, TransferParameters())
        >>> container.file_uuids
        ('5b1f...',)
    """

    def __init__(self, transport: AsyncTransport):
        self._transport = transport
        self._logger = logging.getLogger('swishpy.upload.container')

    @property
    def url(self) -> str:
        return f"{self._transport.config.api_url}/containers"

    def build_payload(
        self,
        files: Sequence[LocalFile],
        params: TransferParameters
    ) -> Dict[str, Any]:
        """
        Build the container creation payload.

        The file list is sent as a JSON *string* inside the JSON body, and
        the recipient list as the string "[]": link transfers have no
        recipients.
        """
        file_list = [{'name': f.name, 'size': f.size} for f in files]
        return {
            'duration': params.duration,
            'authorEmail': params.author_email,
            'password': params.password or '',
            'message': params.message,
            'sizeOfUpload': sum(f.size for f in files),
            'numberOfDownload': params.number_of_downloads,
            'numberOfFile': len(files),
            'lang': params.lang,
            'recaptcha': RECAPTCHA_PLACEHOLDER,
            'files': json.dumps(file_list),
            'recipientsEmails': '[]',
        }

    async def negotiate(
        self,
        files: Sequence[LocalFile],
        params: TransferParameters
    ) -> Container:
        """
        Create a container for files.

        Args:
            files: Files to upload, in upload order
            params: Transfer parameters

        Returns:
            Container with one file UUID per file, positionally matched

        Raises:
            InvalidArgumentError: If files is empty
            InvalidResponseError: On error status or missing fields
            DecodeError: On malformed JSON
        """
        if not files:
            raise InvalidArgumentError("At least one file is required")

        payload = self.build_payload(files, params)
        self._logger.info(
            f"Creating container for {len(files)} file(s), {payload['sizeOfUpload']} bytes"
        )

        response = await self._transport.post(self.url, json_body=payload)
        error = error_for_status(response.status, self.url, response.body)
        if error is not None:
            raise error

        container = self.parse_container(response.json(), len(files))
        self._logger.info(
            f"Container {container.container_uuid} created on {container.upload_host}"
        )
        return container

    @staticmethod
    def parse_container(data: Any, expected_files: int) -> Container:
        """
        Extract the container coordinates from a creation response.

        Raises:
            InvalidResponseError: If a field is missing or the UUID count is wrong
        """
        try:
            upload_host = data['uploadHost']
            container_uuid = data['container']['UUID']
            file_uuids = tuple(data['filesUUID'])
        except (KeyError, TypeError) as e:
            raise InvalidResponseError(f"Container response missing field: {e}") from e

        if not upload_host or not container_uuid:
            raise InvalidResponseError("Container response has an empty host or UUID")

        if len(file_uuids) != expected_files:
            raise InvalidResponseError(
                f"Service returned {len(file_uuids)} file UUIDs for {expected_files} files"
            )

        return Container(
            upload_host=upload_host,
            container_uuid=container_uuid,
            file_uuids=file_uuids
        )
