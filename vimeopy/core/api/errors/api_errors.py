"""Vimeo API transport errors."""
from http import HTTPStatus
from typing import Iterable, Optional, Tuple

from ...exceptions import VimeoException


def describe_status(code: int) -> str:
    """Gets a readable description for an HTTP status code."""
    try:
        return f"{code} {HTTPStatus(code).phrase}"
    except ValueError:
        return f"{code} Unknown status"


class NetworkError(VimeoException):
    """Exception raised on connection or IO failure while talking to Vimeo."""

    def __init__(self, message: str, method: str = '', url: str = ''):
        self.method = method
        self.url = url
        super().__init__(message)


class UnexpectedStatusError(VimeoException):
    """Exception raised when a response status is outside the expected set."""

    def __init__(
        self,
        method: str,
        url: str,
        status: int,
        expected: Iterable[int],
        body: Optional[bytes] = None
    ):
        self.method = method
        self.url = url
        self.status = status
        self.expected: Tuple[int, ...] = tuple(expected)
        self.body = body
        expected_str = ', '.join(str(code) for code in self.expected)
        message = (
            f"Received {describe_status(status)} from {method} {url}, "
            f"expected {expected_str}"
        )
        super().__init__(message, error_code=status)


class AuthenticationError(UnexpectedStatusError):
    """Exception raised when Vimeo rejects the bearer token (401/403)."""

    AUTH_STATUSES = (401, 403)
