"""Vimeo API module: transport, client, configuration and errors."""
from .async_client import AsyncAPIClient, form_encode
from .transport import AsyncTransport, Transport, TransportResponse
from .errors import NetworkError, UnexpectedStatusError, AuthenticationError
from .config import (
    APIConfig,
    ProxyConfig,
    SSLConfig,
    TimeoutConfig,
    UploadSettings,
    ActivationRetryConfig
)
from .models import (
    UploadQuota,
    UserInfo,
    VideoEntry,
    VideoPage,
    UploadTicket,
    PictureTicket
)

__all__ = [
    # Client
    'AsyncAPIClient',
    'form_encode',

    # Transport
    'AsyncTransport',
    'Transport',
    'TransportResponse',

    # Configuration
    'APIConfig',
    'ProxyConfig',
    'SSLConfig',
    'TimeoutConfig',
    'UploadSettings',
    'ActivationRetryConfig',

    # Models
    'UploadQuota',
    'UserInfo',
    'VideoEntry',
    'VideoPage',
    'UploadTicket',
    'PictureTicket',

    # Errors
    'NetworkError',
    'UnexpectedStatusError',
    'AuthenticationError',
]
