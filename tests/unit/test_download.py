"""Tests for token exchange, file download and the download coordinator."""
import asyncio

import pytest
from unittest.mock import AsyncMock

from swishpy.core.api.transport import TransportResponse
from swishpy.core.progress import TransferProgress
from swishpy.core.download import (
    DownloadCoordinator,
    DownloadExecutor,
    RemoteManifest,
    TokenExchanger,
)
from swishpy.core.exceptions import (
    DownloadNumberExceededError,
    FileError,
    InvalidResponseError,
    NotFoundError,
    PasswordRequiredError,
    TransportError,
)


class TestTokenExchanger:
    """Test suite for TokenExchanger."""

    @pytest.mark.asyncio
    async def test_exchange(self, fake_transport, respond):
        """Test request body and JSON-quoted token."""
        fake_transport.add('POST', '/generateDownloadToken', respond("tok-123"))

        token = await TokenExchanger(fake_transport).exchange("pw", "cont", "file")

        call = fake_transport.calls[0]
        assert call['url'] == "https://www.swisstransfer.com/api/generateDownloadToken"
        assert call['json'] == {'password': 'pw', 'containerUUID': 'cont', 'fileUUID': 'file'}
        assert token == "tok-123"

    @pytest.mark.parametrize("body,token", [
        (b'"abc"', "abc"),
        (b'abc', "abc"),
        (b'  abc\n', "abc"),
        (b'{"token": "abc"}', '{"token": "abc"}'),
    ])
    def test_parse_token(self, body, token):
        assert TokenExchanger.parse_token(body) == token

    def test_parse_empty_token(self):
        with pytest.raises(InvalidResponseError):
            TokenExchanger.parse_token(b'""')

    @pytest.mark.asyncio
    async def test_rejected(self, fake_transport):
        """Test error status raises InvalidResponseError."""
        fake_transport.add('POST', '/generateDownloadToken', TransportResponse(401, b'nope'))

        with pytest.raises(InvalidResponseError):
            await TokenExchanger(fake_transport).exchange("pw", "cont", "file")


class TestDownloadExecutor:
    """Test suite for DownloadExecutor."""

    @pytest.fixture
    def manifest(self, link_payload):
        return RemoteManifest.from_response(link_payload)

    @pytest.fixture
    def protected_manifest(self, protected_link_payload):
        return RemoteManifest.from_response(protected_link_payload)

    @pytest.mark.asyncio
    async def test_download(self, fake_transport, make_stream, manifest, tmp_path):
        """Test the file is streamed to dest_dir under its remote name."""
        fake_transport.add('STREAM', '/api/download/', make_stream(200, b"hello world"))

        path = await DownloadExecutor(fake_transport).download(manifest, manifest.files[0], tmp_path)

        assert path == tmp_path / "hello.txt"
        assert path.read_bytes() == b"hello world"
        assert fake_transport.calls[0]['url'] == (
            "https://dl.swisstransfer.com/api/download/"
            "3215702a-bed4-4cec-9eb6-d731048a2312/f11e0000-aaaa-bbbb-cccc-ddddeeeeffff"
        )

    @pytest.mark.asyncio
    async def test_token_only_when_protected(self, fake_transport, make_stream, manifest, protected_manifest, tmp_path):
        """Test the token query is appended for protected links only."""
        fake_transport.add('STREAM', '/api/download/', make_stream(200, b"x"))
        executor = DownloadExecutor(fake_transport)

        await executor.download(manifest, manifest.files[0], tmp_path / "a", token="t")
        await executor.download(protected_manifest, protected_manifest.files[0], tmp_path / "b", token="t")

        assert '?' not in fake_transport.calls[0]['url']
        assert fake_transport.calls[1]['url'].endswith("?token=t")

    @pytest.mark.asyncio
    async def test_quota_exceeded(self, fake_transport, make_stream, manifest, tmp_path):
        """Test 500 raises DownloadNumberExceededError and leaves no file."""
        fake_transport.add('STREAM', '/api/download/', make_stream(500, b""))

        with pytest.raises(DownloadNumberExceededError) as exc_info:
            await DownloadExecutor(fake_transport).download(manifest, manifest.files[0], tmp_path)

        assert exc_info.value.file_name == "hello.txt"
        assert not (tmp_path / "hello.txt").exists()

    @pytest.mark.asyncio
    async def test_not_found(self, fake_transport, make_stream, manifest, tmp_path):
        """Test 404 raises NotFoundError."""
        fake_transport.add('STREAM', '/api/download/', make_stream(404, b""))

        with pytest.raises(NotFoundError):
            await DownloadExecutor(fake_transport).download(manifest, manifest.files[0], tmp_path)

    @pytest.mark.asyncio
    async def test_connection_lost_removes_partial(self, fake_transport, make_stream, manifest, tmp_path):
        """Test a broken stream deletes the partial file."""
        fake_transport.add('STREAM', '/api/download/', make_stream(200, b"hello world", fail_after=1))
        executor = DownloadExecutor(fake_transport, read_chunk_size=4)

        with pytest.raises(TransportError):
            await executor.download(manifest, manifest.files[0], tmp_path)

        assert not (tmp_path / "hello.txt").exists()
        assert not (tmp_path / "hello.txt.part").exists()

    @pytest.mark.asyncio
    async def test_failed_download_keeps_existing_file(self, fake_transport, make_stream, manifest, tmp_path):
        """Test a broken stream leaves a same-named local file untouched."""
        existing = tmp_path / "hello.txt"
        existing.write_bytes(b"user data")
        fake_transport.add('STREAM', '/api/download/', make_stream(200, b"hello world", fail_after=1))
        executor = DownloadExecutor(fake_transport, read_chunk_size=4)

        with pytest.raises(TransportError):
            await executor.download(manifest, manifest.files[0], tmp_path)

        assert existing.read_bytes() == b"user data"
        assert not (tmp_path / "hello.txt.part").exists()

    @pytest.mark.asyncio
    async def test_successful_download_replaces_existing_file(self, fake_transport, make_stream, manifest, tmp_path):
        """Test a complete download overwrites a same-named file."""
        (tmp_path / "hello.txt").write_bytes(b"old")
        fake_transport.add('STREAM', '/api/download/', make_stream(200, b"hello world"))

        path = await DownloadExecutor(fake_transport).download(manifest, manifest.files[0], tmp_path)

        assert path.read_bytes() == b"hello world"
        assert not (tmp_path / "hello.txt.part").exists()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("remote_name", ["../escaped.txt", "/tmp/escaped.txt", "a/b/escaped.txt", "..\\escaped.txt"])
    async def test_remote_name_stays_in_destination(self, fake_transport, make_stream, link_payload, tmp_path, remote_name):
        """Test remote names with directories are written inside dest_dir."""
        link_payload['data']['container']['files'][0]['fileName'] = remote_name
        manifest = RemoteManifest.from_response(link_payload)
        fake_transport.add('STREAM', '/api/download/', make_stream(200, b"x"))
        dest = tmp_path / "dl"

        path = await DownloadExecutor(fake_transport).download(manifest, manifest.files[0], dest)

        assert path == dest / "escaped.txt"
        assert path.read_bytes() == b"x"
        assert not (tmp_path / "escaped.txt").exists()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("remote_name", ["", ".", "..", "a/.."])
    async def test_unusable_remote_name(self, fake_transport, make_stream, link_payload, tmp_path, remote_name):
        """Test names that reduce to nothing raise before any request."""
        link_payload['data']['container']['files'][0]['fileName'] = remote_name
        manifest = RemoteManifest.from_response(link_payload)

        with pytest.raises(InvalidResponseError):
            await DownloadExecutor(fake_transport).download(manifest, manifest.files[0], tmp_path)

        assert fake_transport.calls == []

    @pytest.mark.asyncio
    async def test_cancel_removes_partial(self, fake_transport, manifest, tmp_path):
        """Test cancellation deletes the partial file."""
        started = asyncio.Event()

        class SlowStream:
            status = 200

            async def iter_chunks(self, chunk_size):
                yield b"part"
                started.set()
                await asyncio.sleep(10)
                yield b"never"

        fake_transport.add('STREAM', '/api/download/', SlowStream())
        task = asyncio.ensure_future(
            DownloadExecutor(fake_transport).download(manifest, manifest.files[0], tmp_path)
        )
        await started.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        assert not (tmp_path / "hello.txt").exists()

    @pytest.mark.asyncio
    async def test_destination_not_writable(self, fake_transport, make_stream, manifest, tmp_path):
        """Test a destination that is a file raises FileError."""
        blocker = tmp_path / "blocker"
        blocker.write_bytes(b"")
        fake_transport.add('STREAM', '/api/download/', make_stream(200, b"x"))

        with pytest.raises(FileError):
            await DownloadExecutor(fake_transport).download(manifest, manifest.files[0], blocker)

    @pytest.mark.asyncio
    async def test_progress(self, fake_transport, make_stream, manifest, tmp_path):
        """Test the progress counter advances with the stream."""
        fake_transport.add('STREAM', '/api/download/', make_stream(200, b"hello world"))
        progress = TransferProgress(total_bytes=11, total_items=1)
        seen = []

        await DownloadExecutor(fake_transport, read_chunk_size=4).download(
            manifest, manifest.files[0], tmp_path,
            progress=progress, progress_callback=lambda p: seen.append(p.transferred_bytes)
        )

        assert seen == [4, 8, 11, 11]
        assert progress.is_complete


class TestDownloadCoordinator:
    """Test suite for DownloadCoordinator."""

    @pytest.mark.asyncio
    async def test_public_download(self, fake_transport, respond, make_stream, link_payload, share_link, tmp_path):
        """Test resolve then download without token exchange."""
        fake_transport.add('GET', '/links/', respond(link_payload))
        fake_transport.add('STREAM', '/api/download/', make_stream(200, b"hello world"))

        paths = await DownloadCoordinator(fake_transport).download(share_link, dest_dir=tmp_path)

        assert paths == [tmp_path / "hello.txt"]
        assert fake_transport.calls_to('/generateDownloadToken') == []

    @pytest.mark.asyncio
    async def test_protected_download(self, fake_transport, respond, make_stream, protected_link_payload, share_link, tmp_path):
        """Test a fresh token is fetched for each file."""
        second = dict(protected_link_payload['data']['container']['files'][0], UUID='file-2', fileName='b.txt')
        protected_link_payload['data']['container']['files'].append(second)
        fake_transport.add('GET', '/links/', respond(protected_link_payload))
        fake_transport.add('POST', '/generateDownloadToken', respond("t1"), respond("t2"))
        fake_transport.add('STREAM', '/api/download/', make_stream(200, b"x"))

        paths = await DownloadCoordinator(fake_transport).download(share_link, "pw", tmp_path)

        assert [p.name for p in paths] == ["hello.txt", "b.txt"]
        tokens = fake_transport.calls_to('/generateDownloadToken')
        assert [c['json']['fileUUID'] for c in tokens] == [
            'f11e0000-aaaa-bbbb-cccc-ddddeeeeffff', 'file-2'
        ]
        downloads = fake_transport.calls_to('/api/download/')
        assert downloads[0]['url'].endswith('?token=t1')
        assert downloads[1]['url'].endswith('?token=t2')

    @pytest.mark.asyncio
    async def test_protected_manifest_without_password(self, fake_transport, protected_link_payload, tmp_path):
        """Test downloading a protected manifest without password fails early."""
        manifest = RemoteManifest.from_response(protected_link_payload)

        with pytest.raises(PasswordRequiredError):
            await DownloadCoordinator(fake_transport).download_manifest(manifest, None, tmp_path)

    @pytest.mark.asyncio
    async def test_injected_components(self, fake_transport, link_payload, tmp_path):
        """Test injected resolver and executor are used."""
        manifest = RemoteManifest.from_response(link_payload)
        resolver = AsyncMock()
        resolver.resolve.return_value = manifest
        executor = AsyncMock()
        executor.download.return_value = tmp_path / "hello.txt"

        coordinator = DownloadCoordinator(fake_transport, resolver=resolver, executor=executor)
        paths = await coordinator.download("https://www.swisstransfer.com/d/x", dest_dir=tmp_path)

        resolver.resolve.assert_awaited_once_with("https://www.swisstransfer.com/d/x", None)
        executor.download.assert_awaited_once()
        assert paths == [tmp_path / "hello.txt"]
