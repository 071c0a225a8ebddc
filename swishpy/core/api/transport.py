"""
Async HTTP transport for the SwissTransfer API.

Executes single requests with the baseline identification headers,
applies the retry policy to POST requests and exposes streamed GETs
for file downloads.
"""
import json
import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence, Tuple, Union

import aiohttp

from .config import APIConfig
from .retry import RetryStrategy, NoRetryStrategy, ExponentialBackoffStrategy
from ..exceptions import DecodeError, TransportError
from ..logging import get_logger

HeaderList = List[Tuple[str, str]]
HeaderOverlay = Optional[Union[Dict[str, str], Sequence[Tuple[str, str]]]]

JSON_HEADERS: HeaderList = [
    ('Content-Type', 'application/json'),
    ('Accept', 'application/json'),
]

_REDACTED_FIELDS = ('password',)


@dataclass(frozen=True)
class TransportResponse:
    """
    Status and body of a completed request.

    Attributes:
        status: HTTP status code
        body: Raw response body
        url: Requested URL
    """
    status: int
    body: bytes
    url: str = ''

    @property
    def ok(self) -> bool:
        """True for statuses below 400."""
        return self.status < 400

    @property
    def text(self) -> str:
        return self.body.decode('utf-8', errors='replace')

    def json(self) -> Any:
        """
        Decode the body as JSON.

        Raises:
            DecodeError: If the body is not valid JSON
        """
        try:
            return json.loads(self.body)
        except (ValueError, UnicodeDecodeError) as e:
            raise DecodeError(
                f"Malformed JSON from {self.url}: {e}",
                status_code=self.status,
                body=self.text[:300]
            ) from e


class StreamResponse:
    """Streamed response body, valid inside AsyncTransport.stream()."""

    DEFAULT_CHUNK_SIZE = 131072

    def __init__(self, response: aiohttp.ClientResponse):
        self._response = response

    @property
    def status(self) -> int:
        return self._response.status

    async def iter_chunks(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> AsyncIterator[bytes]:
        """Yield body chunks as they arrive."""
        try:
            async for chunk in self._response.content.iter_chunked(chunk_size):
                yield chunk
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportError(f"Connection lost while reading {self._response.url}: {e}") from e


class AsyncTransport:
    """
    Asynchronous HTTP transport.

    Features:
    - Baseline identification headers on every request
    - Per-call header overlay (no shared header state)
    - Retry with exponential backoff for POST requests answered >= 400
    - Configurable proxy, SSL, timeouts
    - Connection pooling

    Example:
        >>> async with AsyncTransport(APIConfig.default()) as transport:
        ...     response = await transport.get("https://www.swisstransfer.com/api/links/x")
        ...     print(response.status)
    """

    def __init__(
        self,
        config: Optional[APIConfig] = None,
        session: Optional[aiohttp.ClientSession] = None
    ):
        """
        Initialize transport.

        Args:
            config: Client configuration (uses defaults if not provided)
            session: Optional shared session (closed by its owner, not here)
        """
        self._config = config or APIConfig.default()
        self._session = session
        self._owns_session = session is None
        self._logger = get_logger('swishpy.api')
        if self._config.log_level is not None:
            self._logger.setLevel(self._config.log_level)

    @property
    def config(self) -> APIConfig:
        """Get current configuration."""
        return self._config

    async def __aenter__(self) -> 'AsyncTransport':
        """Async context manager entry."""
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure session is created and open."""
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(**self._config.get_connector_kwargs())
            self._session = aiohttp.ClientSession(
                connector=connector,
                **self._config.get_session_kwargs()
            )
            self._owns_session = True
        return self._session

    async def close(self):
        """Close session if we own it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
        if self._owns_session:
            self._session = None

    def build_headers(
        self,
        headers: HeaderOverlay = None,
        json_body: bool = False
    ) -> HeaderList:
        """
        Merge headers: baseline first, JSON headers, then the call overlay.

        Duplicate names are kept; the result is a list of pairs.
        """
        merged: HeaderList = list(self._config.baseline_headers())
        if json_body:
            merged.extend(JSON_HEADERS)
        if headers:
            items = headers.items() if isinstance(headers, dict) else headers
            merged.extend((name, value) for name, value in items)
        return merged

    def _default_strategy(self, method: str) -> RetryStrategy:
        if method.upper() == 'POST':
            return ExponentialBackoffStrategy(self._config.retry)
        return NoRetryStrategy()

    @property
    def _proxy(self) -> Optional[str]:
        return self._config.proxy.to_aiohttp_proxy() if self._config.proxy else None

    async def request(
        self,
        method: str,
        url: str,
        headers: HeaderOverlay = None,
        body: Optional[bytes] = None,
        json_body: Any = None,
        retry: Optional[RetryStrategy] = None
    ) -> TransportResponse:
        """
        Execute a request and return its status and body.

        Error statuses are returned, not raised; POST requests are retried
        while the status is >= 400 and the strategy allows it, and the
        last response is returned once retries are exhausted.

        Args:
            method: HTTP method
            url: Absolute URL
            headers: Call-specific headers appended after the baseline
            body: Raw request body
            json_body: Object serialized as the JSON request body
            retry: Retry strategy (POST: exponential backoff, others: none)

        Returns:
            TransportResponse

        Raises:
            TransportError: On connection-level failure
        """
        is_json = json_body is not None
        data = json.dumps(json_body).encode('utf-8') if is_json else body
        merged = self.build_headers(headers, json_body=is_json)
        strategy = retry or self._default_strategy(method)

        if is_json:
            self._logger.debug(f"{method} {url} body: {self._redact(json_body)}")
        else:
            size = len(data) if data is not None else 0
            self._logger.debug(f"{method} {url} ({size} bytes)")

        retry_count = 0
        waited = 0.0
        while True:
            response = await self._send(method, url, merged, data)
            self._logger.debug(f"Response {response.status} from {url}: {response.text[:300]}")

            if not strategy.should_retry(response.status, retry_count):
                return response

            delay = strategy.delay(retry_count)
            if waited + delay > strategy.max_total_delay:
                self._logger.warning(
                    f"Giving up on {url} after {retry_count + 1} attempts "
                    f"({waited:.1f}s spent waiting)"
                )
                return response

            self._logger.warning(
                f"Request to {url} failed with status {response.status}, "
                f"retrying ({retry_count + 1})"
            )
            await strategy.wait_async(retry_count)
            waited += delay
            retry_count += 1

    async def _send(
        self,
        method: str,
        url: str,
        headers: HeaderList,
        data: Optional[bytes]
    ) -> TransportResponse:
        session = await self._ensure_session()
        try:
            async with session.request(
                method,
                url,
                data=data,
                headers=headers,
                proxy=self._proxy
            ) as response:
                payload = await response.read()
                return TransportResponse(response.status, payload, url)
        except asyncio.TimeoutError as e:
            self._logger.error(f"Timeout on {method} {url}")
            raise TransportError(f"Timeout on {method} {url}") from e
        except aiohttp.ClientError as e:
            self._logger.error(f"Network error on {method} {url}: {e}")
            raise TransportError(f"Network error on {method} {url}: {e}") from e

    async def get(self, url: str, headers: HeaderOverlay = None) -> TransportResponse:
        """GET request (never retried)."""
        return await self.request('GET', url, headers=headers)

    async def post(
        self,
        url: str,
        body: Optional[bytes] = None,
        json_body: Any = None,
        headers: HeaderOverlay = None
    ) -> TransportResponse:
        """POST request with the retry policy."""
        return await self.request('POST', url, headers=headers, body=body, json_body=json_body)

    @asynccontextmanager
    async def stream(
        self,
        url: str,
        headers: HeaderOverlay = None
    ) -> AsyncIterator[StreamResponse]:
        """
        Open a streamed GET.

        Example:
            >>> async with transport.stream(url) as response:
            ...     async for chunk in response.iter_chunks():
            ...         sink.write(chunk)

        Raises:
            TransportError: On connection-level failure
        """
        session = await self._ensure_session()
        self._logger.debug(f"GET {url} (streamed)")
        try:
            async with session.get(
                url,
                headers=self.build_headers(headers),
                proxy=self._proxy
            ) as response:
                yield StreamResponse(response)
        except asyncio.TimeoutError as e:
            raise TransportError(f"Timeout on GET {url}") from e
        except aiohttp.ClientError as e:
            raise TransportError(f"Network error on GET {url}: {e}") from e

    @staticmethod
    def _redact(payload: Any) -> str:
        if isinstance(payload, dict):
            payload = {
                key: ('***' if key in _REDACTED_FIELDS and value else value)
                for key, value in payload.items()
            }
        text = json.dumps(payload)
        return text if len(text) <= 300 else text[:300] + '...'
