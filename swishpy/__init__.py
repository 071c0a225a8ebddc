"""
swishpy - Async Python client for SwissTransfer.

Usage:
    >>> from swishpy import SwishClient
    >>>
    >>> async with SwishClient() as swish:
    ...     result = await swish.upload("report.pdf")
    ...     print(result.link)
"""
import logging
from .client import SwishClient

# Configuration
from .core.api import (
    APIConfig,
    ProxyConfig,
    SSLConfig,
    TimeoutConfig,
    RetryConfig,
    ScanPollConfig,
    AsyncTransport,
)

# Transfers
from .core.upload import TransferParameters, UploadResult, LocalFile
from .core.download import RemoteFile, RemoteManifest
from .core.progress import TransferProgress
from .core.links import is_share_link, extract_link_id

# Errors
from .core.exceptions import (
    SwishException,
    TransportError,
    InvalidResponseError,
    DecodeError,
    NotFoundError,
    PasswordRequiredError,
    InvalidPasswordError,
    DownloadNumberExceededError,
    ScanTimeoutError,
    FileError,
    InvalidLinkError,
    InvalidArgumentError,
)
from .core.logging import configure_loggers

__version__ = '0.1.0'


def setup_logging(level=logging.INFO):
    """
    Configure logging for swishpy modules.

    This ensures that all swishpy loggers are properly configured
    to show log messages at the specified level.

    Args:
        level: Logging level (default: logging.INFO)
    """
    configure_loggers(level)


__all__ = [
    'SwishClient',
    'APIConfig',
    'ProxyConfig',
    'SSLConfig',
    'TimeoutConfig',
    'RetryConfig',
    'ScanPollConfig',
    'AsyncTransport',
    'TransferParameters',
    'UploadResult',
    'LocalFile',
    'RemoteFile',
    'RemoteManifest',
    'TransferProgress',
    'is_share_link',
    'extract_link_id',
    'SwishException',
    'TransportError',
    'InvalidResponseError',
    'DecodeError',
    'NotFoundError',
    'PasswordRequiredError',
    'InvalidPasswordError',
    'DownloadNumberExceededError',
    'ScanTimeoutError',
    'FileError',
    'InvalidLinkError',
    'InvalidArgumentError',
    'setup_logging',
]
