"""
Download module for SwissTransfer.

Resolves share links into manifests and streams their files to disk.
"""
from .coordinator import DownloadCoordinator
from .executor import DownloadExecutor
from .models import RemoteFile, RemoteManifest, TransferFile, describe_file
from .resolver import LinkResolver, LinkState, encode_password
from .token import TokenExchanger

__all__ = [
    # Main classes
    'DownloadCoordinator',
    'LinkResolver',
    'TokenExchanger',
    'DownloadExecutor',

    # Models
    'RemoteFile',
    'RemoteManifest',
    'TransferFile',
    'describe_file',

    # Helpers
    'LinkState',
    'encode_password',
]
