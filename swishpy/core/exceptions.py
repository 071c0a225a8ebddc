"""
Custom exceptions for SwissTransfer operations.

This module defines exception classes raised by the transfer engine.
"""
from typing import Optional


class SwishException(Exception):
    """Base exception for all swishpy errors."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            status_code: HTTP status code (if available)
        """
        self.status_code = status_code
        super().__init__(message)


class TransportError(SwishException):
    """Connection-level failure (DNS, TLS, timeout, reset)."""
    pass


class InvalidResponseError(SwishException):
    """Unexpected status code or malformed response body."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None
    ) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            status_code: HTTP status code returned by the service
            body: Raw response body (truncated, for diagnostics)
        """
        self.body = body
        super().__init__(message, status_code)


class DecodeError(InvalidResponseError):
    """Response body is not valid JSON where a field is required."""
    pass


class NotFoundError(SwishException):
    """Resource not found (404). Share links usually expire."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Not found: {url}, maybe the link has expired", 404)


class PasswordRequiredError(SwishException):
    """The link is protected and no password was supplied."""

    def __init__(self) -> None:
        super().__init__(
            "A password is required to download this transfer, "
            "provide it with --password"
        )


class InvalidPasswordError(SwishException):
    """The supplied password was rejected."""

    def __init__(self) -> None:
        super().__init__("The password provided is incorrect")


class DownloadNumberExceededError(SwishException):
    """The download quota of the transfer is exhausted."""

    def __init__(self, file_name: str) -> None:
        self.file_name = file_name
        super().__init__(
            f"Download limit reached for '{file_name}'", 500
        )


class ScanTimeoutError(SwishException):
    """The virus scan did not complete within the configured timeout."""

    def __init__(self, link_id: str, waited: float) -> None:
        self.link_id = link_id
        self.waited = waited
        super().__init__(
            f"Virus scan for link {link_id} still pending after {waited:.0f}s"
        )


class FileError(SwishException):
    """Local filesystem failure while reading or writing a transfer."""

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        self.path = path
        super().__init__(message)


class InvalidLinkError(SwishException):
    """The given string is not a share link."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Invalid link: {url}")


class InvalidArgumentError(SwishException, ValueError):
    """Invalid transfer parameter or argument."""
    pass
