"""Download token exchange for password-protected links."""
import json

from ..api.errors import error_for_status
from ..api.transport import AsyncTransport
from ..exceptions import InvalidResponseError
from ..logging import get_logger

logger = get_logger('swishpy.download.token')


class TokenExchanger:
    """
    Trades a password for a single-file download token.

    Tokens are fetched per file and never cached.
    """

    def __init__(self, transport: AsyncTransport):
        self._transport = transport

    @property
    def url(self) -> str:
        return f"{self._transport.config.api_url}/generateDownloadToken"

    async def exchange(self, password: str, container_uuid: str, file_uuid: str) -> str:
        """
        Request a download token.

        Args:
            password: Link password
            container_uuid: Container UUID from the manifest
            file_uuid: File UUID to download

        Returns:
            Token to append to the file URL

        Raises:
            InvalidResponseError: If the service rejects the request
        """
        response = await self._transport.post(
            self.url,
            json_body={
                'password': password,
                'containerUUID': container_uuid,
                'fileUUID': file_uuid,
            }
        )
        error = error_for_status(response.status, self.url, response.body)
        if error is not None:
            raise error

        token = self.parse_token(response.body)
        logger.debug(f"Got download token for file {file_uuid}")
        return token

    @staticmethod
    def parse_token(body: bytes) -> str:
        """
        Extract the token from a response body.

        The service sometimes answers with a JSON string ("abc") and
        sometimes with the bare token, so a JSON string is unwrapped and
        anything else is used as raw text.
        """
        text = body.decode('utf-8', errors='replace').strip()
        try:
            decoded = json.loads(text)
        except ValueError:
            decoded = None
        token = decoded if isinstance(decoded, str) else text
        if not token:
            raise InvalidResponseError("Empty download token")
        return token
