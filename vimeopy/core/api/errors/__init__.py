"""Vimeo API errors and exceptions."""
from .api_errors import (
    NetworkError,
    UnexpectedStatusError,
    AuthenticationError,
    describe_status
)

__all__ = [
    'NetworkError',
    'UnexpectedStatusError',
    'AuthenticationError',
    'describe_status',
]
