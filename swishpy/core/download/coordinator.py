"""
Download coordinator.

Resolves a share link, then downloads every file of its container,
fetching a fresh token per file when the link is protected.
"""
from pathlib import Path
from typing import List, Optional, Union

from .executor import DownloadExecutor
from .models import RemoteManifest
from .resolver import LinkResolver
from .token import TokenExchanger
from ..api.transport import AsyncTransport
from ..exceptions import PasswordRequiredError
from ..logging import get_logger, format_size
from ..progress import TransferProgress, ProgressCallback

logger = get_logger('swishpy.download.coordinator')


class DownloadCoordinator:
    """
    Coordinates link resolution, token exchange and file downloads.

    Components are injectable for testing.
    """

    def __init__(
        self,
        transport: AsyncTransport,
        resolver: Optional[LinkResolver] = None,
        token_exchanger: Optional[TokenExchanger] = None,
        executor: Optional[DownloadExecutor] = None,
        progress_callback: ProgressCallback = None
    ):
        self._transport = transport
        self._resolver = resolver or LinkResolver(transport)
        self._tokens = token_exchanger or TokenExchanger(transport)
        self._executor = executor or DownloadExecutor(transport)
        self._progress_callback = progress_callback

    async def resolve(self, link: str, password: Optional[str] = None) -> RemoteManifest:
        """Resolve link into its manifest."""
        return await self._resolver.resolve(link, password)

    async def download(
        self,
        link: str,
        password: Optional[str] = None,
        dest_dir: Union[str, Path] = "."
    ) -> List[Path]:
        """
        Download every file behind link into dest_dir.

        Args:
            link: Share link
            password: Link password, if protected
            dest_dir: Destination directory

        Returns:
            Paths of the downloaded files, in manifest order
        """
        manifest = await self.resolve(link, password)
        return await self.download_manifest(manifest, password, dest_dir)

    async def download_manifest(
        self,
        manifest: RemoteManifest,
        password: Optional[str] = None,
        dest_dir: Union[str, Path] = "."
    ) -> List[Path]:
        """Download every file of an already resolved manifest."""
        if manifest.needs_password and not password:
            raise PasswordRequiredError()

        progress = TransferProgress(
            total_bytes=manifest.total_bytes,
            total_items=len(manifest.files),
            label=manifest.link_uuid
        )
        logger.info(
            f"Downloading {len(manifest.files)} file(s) ({format_size(manifest.total_bytes)}) "
            f"from link {manifest.link_uuid}"
        )

        paths = []
        for remote_file in manifest.files:
            token = None
            if manifest.needs_password:
                token = await self._tokens.exchange(
                    password, manifest.container_uuid, remote_file.uuid
                )
            path = await self._executor.download(
                manifest,
                remote_file,
                dest_dir,
                token=token,
                progress=progress,
                progress_callback=self._progress_callback
            )
            paths.append(path)
        return paths
