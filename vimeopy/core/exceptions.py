"""
Custom exceptions for Vimeo upload operations.

This module defines the exception classes raised by the upload and
picture sessions. Transport level errors live in core.api.errors.
"""
from typing import Optional


class VimeoException(Exception):
    """Base exception for all Vimeo-related errors."""

    def __init__(self, message: str, error_code: Optional[int] = None) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            error_code: HTTP status code (if available)
        """
        self.error_code = error_code
        super().__init__(message)


class CredentialError(VimeoException):
    """Exception raised when no bearer token is available."""
    pass


class TicketError(VimeoException):
    """Exception raised when an upload or picture ticket is unusable."""
    pass


class VerificationError(VimeoException):
    """
    Exception raised when the verification probe answer cannot be trusted.

    Covers a missing or unparsable Range header and offsets that would move
    the confirmed byte count backwards or past the end of the file.
    """

    def __init__(
        self,
        message: str,
        range_header: Optional[str] = None,
        error_code: Optional[int] = None
    ) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            range_header: Raw Range header received (if any)
            error_code: HTTP status of the probe response (if any)
        """
        self.range_header = range_header
        super().__init__(message, error_code)


class CompletionError(VimeoException):
    """Exception raised when the completion response has no usable Location."""

    def __init__(
        self,
        message: str,
        location: Optional[str] = None,
        error_code: Optional[int] = None
    ) -> None:
        self.location = location
        super().__init__(message, error_code)


class ActivationTimeoutError(VimeoException):
    """Exception raised when picture activation keeps failing past its deadline."""

    def __init__(
        self,
        message: str,
        attempts: int = 0,
        elapsed: float = 0.0
    ) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            attempts: Number of activation attempts made
            elapsed: Seconds spent retrying
        """
        self.attempts = attempts
        self.elapsed = elapsed
        super().__init__(message)


class UploadStalledError(VimeoException):
    """Exception raised when consecutive transfer attempts confirm no new bytes."""

    def __init__(self, message: str, bytes_confirmed: int = 0) -> None:
        self.bytes_confirmed = bytes_confirmed
        super().__init__(message)
