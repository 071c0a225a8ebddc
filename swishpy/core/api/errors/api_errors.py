"""Translation of SwissTransfer HTTP statuses into swishpy exceptions."""
from typing import Dict, Optional

from ...exceptions import (
    SwishException,
    NotFoundError,
    InvalidResponseError,
    DownloadNumberExceededError,
)


class APIStatusCodes:
    """HTTP statuses the service is known to answer with."""

    STATUS_MESSAGES: Dict[int, str] = {
        400: 'Bad request: the service rejected the payload',
        401: 'Unauthorized: password missing or wrong',
        403: 'Forbidden: access to this transfer is denied',
        404: 'Not found: the transfer does not exist or has expired',
        429: 'Too many requests: slow down and retry later',
        500: 'Internal server error',
        502: 'Bad gateway',
        503: 'Service unavailable',
    }

    @classmethod
    def get_message(cls, status: int) -> str:
        """Gets error message for a status code."""
        return cls.STATUS_MESSAGES.get(status, f"Unexpected status: {status}")

    @staticmethod
    def is_success(status: int) -> bool:
        return 200 <= status < 300


def _truncate(body: Optional[bytes], limit: int = 300) -> Optional[str]:
    if not body:
        return None
    text = body.decode('utf-8', errors='replace')
    return text if len(text) <= limit else text[:limit] + '...'


def error_for_status(
    status: int,
    url: str,
    body: Optional[bytes] = None,
    read: bool = False
) -> Optional[SwishException]:
    """
    Map a response status to the exception the caller should raise.

    Args:
        status: HTTP status code
        url: Requested URL (for the error message)
        body: Response body (kept, truncated, for diagnostics)
        read: True for reads (GET), where 404 means NotFoundError

    Returns:
        None for 2xx statuses, otherwise the exception to raise
    """
    if APIStatusCodes.is_success(status):
        return None
    if read and status == 404:
        return NotFoundError(url)
    return InvalidResponseError(
        f"{APIStatusCodes.get_message(status)} ({url})",
        status_code=status,
        body=_truncate(body)
    )


def error_for_download_status(
    status: int,
    url: str,
    file_name: str
) -> Optional[SwishException]:
    """
    Map the status of a file download response to an exception.

    The service does not publish a machine readable code for an exhausted
    download quota; it answers 500. Every 500 on a download is therefore
    reported as DownloadNumberExceededError. Correct the mapping here if the
    real error taxonomy becomes known.

    Args:
        status: HTTP status code of the download response
        url: Download URL
        file_name: Remote file name

    Returns:
        None for 2xx statuses, otherwise the exception to raise
    """
    if status == 500:
        return DownloadNumberExceededError(file_name)
    return error_for_status(status, url, read=True)
