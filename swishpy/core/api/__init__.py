"""SwissTransfer API module: configuration, transport, retry and status translation."""
from .config import (
    APIConfig,
    ProxyConfig,
    SSLConfig,
    TimeoutConfig,
    RetryConfig,
    ScanPollConfig,
    SERVICE_DOMAIN,
    CHUNK_SIZE,
)
from .transport import AsyncTransport, TransportResponse, StreamResponse
from .retry import RetryStrategy, NoRetryStrategy, ExponentialBackoffStrategy
from .errors import APIStatusCodes, error_for_status, error_for_download_status

__all__ = [
    # Transport
    'AsyncTransport',
    'TransportResponse',
    'StreamResponse',

    # Configuration
    'APIConfig',
    'ProxyConfig',
    'SSLConfig',
    'TimeoutConfig',
    'RetryConfig',
    'ScanPollConfig',
    'SERVICE_DOMAIN',
    'CHUNK_SIZE',

    # Retry
    'RetryStrategy',
    'NoRetryStrategy',
    'ExponentialBackoffStrategy',

    # Errors
    'APIStatusCodes',
    'error_for_status',
    'error_for_download_status',
]
