"""Retry strategies using Strategy Pattern."""
from .retry_strategy import RetryStrategy, FixedDelayRetryStrategy

__all__ = [
    'RetryStrategy',
    'FixedDelayRetryStrategy',
]
