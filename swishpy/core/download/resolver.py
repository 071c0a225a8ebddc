"""
Link resolution.

Turns a share link into a RemoteManifest, handling the password gate
and waiting for the service's virus scan to finish.
"""
import asyncio
import base64
import json
from enum import Enum
from typing import Any, Optional

from .models import RemoteManifest
from ..api.config import ScanPollConfig
from ..api.errors import error_for_status
from ..api.transport import AsyncTransport
from ..exceptions import InvalidPasswordError, PasswordRequiredError, ScanTimeoutError
from ..links import extract_link_id
from ..logging import get_logger

logger = get_logger('swishpy.download.resolver')


class LinkState(Enum):
    """State of a link as reported by the message field."""
    READY = 'ready'
    NEEDS_PASSWORD = 'needs_password'
    WRONG_PASSWORD = 'wrong_password'
    SCAN_PENDING = 'scan_pending'


def encode_password(password: str) -> str:
    """Base64 form of the password used in the Authorization header."""
    return base64.b64encode(password.encode('utf-8')).decode('ascii')


class LinkResolver:
    """
    Resolves share links into manifests.

    The service signals gates through a message string rather than a
    status code. Known messages are normalized (lowercase, separators
    folded to underscores) and looked up in the sets below; anything
    else counts as ready.

    Example:
        >>> resolver = LinkResolver(transport)
        >>> manifest = await resolver.resolve("https://www.swisstransfer.com/d/<uuid>")
        >>> [f.name for f in manifest.files]
    """

    PASSWORD_REQUIRED_MESSAGES = frozenset({
        'need_password', 'needs_password', 'password_required', 'password_needed',
    })
    WRONG_PASSWORD_MESSAGES = frozenset({
        'wrong_password', 'invalid_password', 'bad_password', 'incorrect_password',
    })
    SCAN_PENDING_MESSAGES = frozenset({
        'virus_check_in_progress', 'virus_scan_in_progress', 'virus_scan_pending',
        'scan_pending', 'scan_in_progress', 'not_virus_checked',
    })

    def __init__(
        self,
        transport: AsyncTransport,
        poll_config: Optional[ScanPollConfig] = None
    ):
        self._transport = transport
        self._poll = poll_config or transport.config.scan_poll

    def link_url(self, link_id: str) -> str:
        return f"{self._transport.config.api_url}/links/{link_id}"

    async def resolve(self, share_link: str, password: Optional[str] = None) -> RemoteManifest:
        """
        Resolve a share link.

        Args:
            share_link: Share URL (its final path segment is the link id)
            password: Optional password

        Returns:
            RemoteManifest of the link

        Raises:
            PasswordRequiredError: Link is protected and no valid password given
            InvalidPasswordError: Password rejected
            ScanTimeoutError: Virus scan still pending after the poll timeout
            NotFoundError: Link unknown or expired
            InvalidResponseError: Other error status or missing fields
            DecodeError: Malformed JSON on success
        """
        link_id = extract_link_id(share_link)
        url = self.link_url(link_id)
        headers = [('Authorization', encode_password(password))] if password else None

        attempt = 0
        waited = 0.0
        while True:
            response = await self._transport.get(url, headers=headers)
            payload = self._try_json(response.body)
            state = self.classify(payload)

            if state is LinkState.NEEDS_PASSWORD:
                raise PasswordRequiredError()
            if state is LinkState.WRONG_PASSWORD:
                raise InvalidPasswordError()
            if state is LinkState.SCAN_PENDING:
                delay = self._poll.calculate_delay(attempt)
                if waited + delay > self._poll.timeout:
                    raise ScanTimeoutError(link_id, waited)
                logger.info(f"Virus scan pending for {link_id}, checking again in {delay:.0f}s")
                await asyncio.sleep(delay)
                waited += delay
                attempt += 1
                continue

            error = error_for_status(response.status, url, response.body, read=True)
            if error is not None:
                raise error

            manifest = RemoteManifest.from_response(response.json())
            logger.info(
                f"Link {link_id} resolved: {len(manifest.files)} file(s), "
                f"{'protected' if manifest.needs_password else 'public'}"
            )
            return manifest

    @classmethod
    def classify(cls, payload: Any) -> LinkState:
        """Map a decoded response body to a LinkState."""
        message = cls._normalize(cls._extract_message(payload))
        if message in cls.PASSWORD_REQUIRED_MESSAGES:
            return LinkState.NEEDS_PASSWORD
        if message in cls.WRONG_PASSWORD_MESSAGES:
            return LinkState.WRONG_PASSWORD
        if message in cls.SCAN_PENDING_MESSAGES:
            return LinkState.SCAN_PENDING
        return LinkState.READY

    @staticmethod
    def _extract_message(payload: Any) -> Optional[str]:
        if not isinstance(payload, dict):
            return None
        data = payload.get('data')
        if isinstance(data, dict) and isinstance(data.get('message'), str):
            return data['message']
        if isinstance(payload.get('message'), str):
            return payload['message']
        return None

    @staticmethod
    def _normalize(message: Optional[str]) -> str:
        if not message:
            return ''
        return message.strip().lower().replace(' ', '_').replace('-', '_')

    @staticmethod
    def _try_json(body: bytes) -> Any:
        try:
            return json.loads(body)
        except (ValueError, UnicodeDecodeError):
            return None
