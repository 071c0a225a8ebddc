"""SwissTransfer status translation."""
from .api_errors import APIStatusCodes, error_for_status, error_for_download_status

__all__ = [
    'APIStatusCodes',
    'error_for_status',
    'error_for_download_status',
]
