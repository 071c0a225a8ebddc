"""Pytest fixtures for swishpy tests."""
import json
from contextlib import asynccontextmanager
from typing import Any, List, Optional

import pytest

from swishpy.core.api import APIConfig, RetryConfig, ScanPollConfig
from swishpy.core.api.transport import TransportResponse
from swishpy.core.exceptions import TransportError


LINK_UUID = '3215702a-bed4-4cec-9eb6-d731048a2312'
CONTAINER_UUID = 'c0ffee00-1111-2222-3333-444455556666'
FILE_UUID = 'f11e0000-aaaa-bbbb-cccc-ddddeeeeffff'


def json_response(payload: Any, status: int = 200) -> TransportResponse:
    """Canned response with a JSON body."""
    return TransportResponse(status, json.dumps(payload).encode('utf-8'))


class FakeStream:
    """Stand-in for StreamResponse."""

    def __init__(self, status: int, body: bytes, fail_after: Optional[int] = None):
        self.status = status
        self._body = body
        self._fail_after = fail_after

    async def iter_chunks(self, chunk_size: int = 4):
        for i, offset in enumerate(range(0, len(self._body), chunk_size)):
            if self._fail_after is not None and i >= self._fail_after:
                raise TransportError("Connection lost")
            yield self._body[offset:offset + chunk_size]


class FakeTransport:
    """
    In-memory transport recording every call.

    Routes are matched in registration order on method and URL
    substring. A route with several responses hands them out in turn
    and repeats the last one. Unrouted requests get an empty 200.
    """

    def __init__(self, config: Optional[APIConfig] = None):
        self.config = config or APIConfig(
            retry=RetryConfig(base_delay=0),
            scan_poll=ScanPollConfig(initial_delay=0.01, max_delay=0.01, timeout=1)
        )
        self.calls: List[dict] = []
        self._routes: List[list] = []

    def add(self, method: str, url_part: str, *responses) -> 'FakeTransport':
        self._routes.append([method.upper(), url_part, list(responses)])
        return self

    def _lookup(self, method: str, url: str):
        for route_method, url_part, responses in self._routes:
            if route_method == method and url_part in url:
                if len(responses) > 1:
                    return responses.pop(0)
                return responses[0]
        return TransportResponse(200, b'', url)

    async def request(self, method, url, headers=None, body=None, json_body=None, retry=None):
        self.calls.append({
            'method': method.upper(),
            'url': url,
            'headers': list(headers.items()) if isinstance(headers, dict) else list(headers or []),
            'body': body,
            'json': json_body,
        })
        response = self._lookup(method.upper(), url)
        if isinstance(response, BaseException):
            raise response
        return response

    async def get(self, url, headers=None):
        return await self.request('GET', url, headers=headers)

    async def post(self, url, body=None, json_body=None, headers=None):
        return await self.request('POST', url, headers=headers, body=body, json_body=json_body)

    @asynccontextmanager
    async def stream(self, url, headers=None):
        self.calls.append({'method': 'STREAM', 'url': url, 'headers': list(headers or [])})
        response = self._lookup('STREAM', url)
        if isinstance(response, BaseException):
            raise response
        yield response

    async def close(self):
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        pass

    def calls_to(self, url_part: str, method: Optional[str] = None) -> List[dict]:
        return [
            c for c in self.calls
            if url_part in c['url'] and (method is None or c['method'] == method)
        ]


@pytest.fixture
def fake_transport():
    """Fake transport with instant retries and scan polling."""
    return FakeTransport()


@pytest.fixture
def link_payload():
    """Returns a resolved link response for a public transfer."""
    return {
        'data': {
            'downloadHost': 'dl.swisstransfer.com',
            'linkUUID': LINK_UUID,
            'container': {
                'UUID': CONTAINER_UUID,
                'needPassword': 0,
                'files': [
                    {
                        'UUID': FILE_UUID,
                        'fileName': 'hello.txt',
                        'fileSizeInBytes': 11,
                        'mimeType': 'text/plain',
                        'createdDate': '2024-01-01 10:00:00',
                        'expiredDate': '2024-01-31 10:00:00',
                        'downloadCounter': 2,
                        'eVirus': 'CLEAN',
                    }
                ],
            },
        }
    }


@pytest.fixture
def protected_link_payload(link_payload):
    """Returns a resolved link response for a password protected transfer."""
    link_payload['data']['container']['needPassword'] = 1
    return link_payload


@pytest.fixture
def share_link():
    return f"https://www.swisstransfer.com/d/{LINK_UUID}"


@pytest.fixture
def make_file(tmp_path):
    """Factory writing a file of given content under tmp_path."""
    def _make(name: str, content: bytes):
        path = tmp_path / name
        path.write_bytes(content)
        return path
    return _make


@pytest.fixture
def respond():
    """Builder for canned JSON responses."""
    return json_response


@pytest.fixture
def make_stream():
    """Builder for canned streamed responses."""
    return FakeStream
