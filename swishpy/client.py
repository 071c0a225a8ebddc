"""
SwishClient - High-level async client for SwissTransfer.

Example:
    >>> async with SwishClient() as swish:
    ...     result = await swish.upload("report.pdf")
    ...     print(result.link)
"""
from pathlib import Path
from typing import List, Optional, Sequence, Union

from .core.api import (
    APIConfig,
    AsyncTransport,
    ProxyConfig,
    RetryConfig,
    SSLConfig,
    TimeoutConfig,
)
from .core.download import DownloadCoordinator, RemoteManifest
from .core.logging import get_logger
from .core.progress import ProgressCallback
from .core.upload import FileValidator, LocalFile, TransferParameters, UploadCoordinator, UploadResult

PathLike = Union[str, Path]


class SwishClient:
    """
    High-level async client for SwissTransfer.

    One client holds one HTTP session; use it as an async context
    manager or call close() when done.

    Example:
        >>> async with SwishClient() as swish:
        ...     manifest = await swish.resolve(link)
        ...     paths = await swish.download(link, dest="downloads")

    With custom configuration:
        >>> config = SwishClient.create_config(proxy="http://proxy:8080")
        >>> async with SwishClient(config) as swish:
        ...     await swish.upload(["a.txt", "b.txt"])
    """

    def __init__(
        self,
        config: Optional[APIConfig] = None,
        transport: Optional[AsyncTransport] = None
    ):
        """
        Initialize client.

        Args:
            config: API configuration (uses defaults if not provided)
            transport: Pre-built transport, mainly for tests
        """
        self._config = config or (transport.config if transport else APIConfig.default())
        self._transport = transport or AsyncTransport(self._config)
        self._validator = FileValidator()
        self._logger = get_logger('swishpy.client')

    @property
    def config(self) -> APIConfig:
        return self._config

    @staticmethod
    def create_config(
        proxy: Optional[str] = None,
        proxy_user: Optional[str] = None,
        proxy_pass: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: int = 3,
        verify_ssl: bool = True,
        max_parallel_chunks: int = 1
    ) -> APIConfig:
        """
        Create API configuration with common options.

        Args:
            proxy: Proxy URL (e.g., "http://proxy:8080")
            proxy_user: Proxy username
            proxy_pass: Proxy password
            timeout: Total request timeout in seconds (None for no limit)
            max_retries: Extra attempts for rejected POST requests
            verify_ssl: Whether to verify SSL certificates
            max_parallel_chunks: Concurrent chunk uploads per file

        Returns:
            APIConfig instance
        """
        proxy_config = None
        if proxy:
            proxy_config = ProxyConfig(
                url=proxy,
                username=proxy_user,
                password=proxy_pass
            )

        return APIConfig(
            proxy=proxy_config,
            timeout=TimeoutConfig(total=timeout),
            retry=RetryConfig(max_retries=max_retries),
            ssl=SSLConfig(verify=verify_ssl),
            max_parallel_chunks=max_parallel_chunks
        )

    async def __aenter__(self) -> 'SwishClient':
        await self._transport.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Close the client and release the HTTP session."""
        await self._transport.close()

    # =========================================================================
    # Upload
    # =========================================================================

    def collect_files(self, paths: Union[PathLike, Sequence[PathLike]]) -> List[LocalFile]:
        """Expand paths (files or directories) into the files to upload."""
        if isinstance(paths, (str, Path)):
            paths = [paths]
        files: List[LocalFile] = []
        for path in paths:
            files.extend(self._validator.collect(path))
        return files

    async def upload(
        self,
        paths: Union[PathLike, Sequence[PathLike]],
        params: Optional[TransferParameters] = None,
        progress_callback: ProgressCallback = None
    ) -> UploadResult:
        """
        Upload files and return the share link.

        Args:
            paths: File, directory, or list of them
            params: Transfer parameters (defaults if not provided)
            progress_callback: Called with a TransferProgress after every chunk

        Returns:
            UploadResult with the share link

        Example:
            >>> params = TransferParameters(duration=7, password="hunter2")
            >>> result = await swish.upload("photos/", params)
        """
        return await self.upload_files(self.collect_files(paths), params, progress_callback)

    async def upload_files(
        self,
        files: Sequence[LocalFile],
        params: Optional[TransferParameters] = None,
        progress_callback: ProgressCallback = None
    ) -> UploadResult:
        """Upload files already collected with collect_files()."""
        coordinator = UploadCoordinator(
            self._transport,
            progress_callback=progress_callback
        )
        result = await coordinator.send(list(files), params)
        self._logger.info(f"Uploaded {len(files)} file(s): {result.link}")
        return result

    # =========================================================================
    # Download
    # =========================================================================

    async def resolve(self, link: str, password: Optional[str] = None) -> RemoteManifest:
        """Resolve a share link into its manifest without downloading."""
        return await DownloadCoordinator(self._transport).resolve(link, password)

    async def download(
        self,
        link: str,
        password: Optional[str] = None,
        dest: PathLike = ".",
        progress_callback: ProgressCallback = None
    ) -> List[Path]:
        """
        Download every file behind a share link.

        Args:
            link: Share link
            password: Link password, if protected
            dest: Destination directory
            progress_callback: Called with a TransferProgress after every chunk

        Returns:
            Paths of the downloaded files
        """
        coordinator = DownloadCoordinator(self._transport, progress_callback=progress_callback)
        return await coordinator.download(link, password, dest)

    async def download_manifest(
        self,
        manifest: RemoteManifest,
        password: Optional[str] = None,
        dest: PathLike = ".",
        progress_callback: ProgressCallback = None
    ) -> List[Path]:
        """Download the files of a manifest returned by resolve()."""
        coordinator = DownloadCoordinator(self._transport, progress_callback=progress_callback)
        return await coordinator.download_manifest(manifest, password, dest)
