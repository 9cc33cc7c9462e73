"""
vimeopy - Async Python client for resumable Vimeo uploads.

Usage:
    >>> from vimeopy import VimeoClient
    >>>
    >>> async with VimeoClient("token") as vimeo:
    ...     video_id = await vimeo.upload("clip.mp4", name="Clip")
    ...     await vimeo.attach_picture(video_id, "clip.jpg")
"""
import logging
from .client import VimeoClient

# Configuration
from .core.api import (
    APIConfig,
    ProxyConfig,
    SSLConfig,
    TimeoutConfig,
    UploadSettings,
    ActivationRetryConfig,
    AsyncAPIClient
)

# Credentials
from .core.credentials import (
    CredentialProvider,
    StaticCredential,
    TokenData,
    SQLiteTokenStore,
    MemoryTokenStore
)

from .core.upload import UploadResult, ProgressObserver
from .core.watch import FolderWatcher, WatchResult

__version__ = '1.0.0'


def setup_logging(level=logging.INFO):
    """
    Configure logging for vimeopy modules.

    This ensures that all vimeopy loggers are properly configured
    to show log messages at the specified level.

    Args:
        level: Logging level (default: logging.INFO)
    """
    loggers = [
        'vimeopy',
        'vimeopy.api',
        'vimeopy.transport',
        'vimeopy.client',
        'vimeopy.upload',
        'vimeopy.upload.session',
        'vimeopy.upload.chunk',
        'vimeopy.upload.file',
        'vimeopy.upload.picture',
        'vimeopy.upload.coordinator',
        'vimeopy.watch',
    ]

    for logger_name in loggers:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        # Ensure propagation is enabled
        logger.propagate = True


__all__ = [
    'VimeoClient',
    'APIConfig',
    'ProxyConfig',
    'SSLConfig',
    'TimeoutConfig',
    'UploadSettings',
    'ActivationRetryConfig',
    'AsyncAPIClient',
    'CredentialProvider',
    'StaticCredential',
    'TokenData',
    'SQLiteTokenStore',
    'MemoryTokenStore',
    'UploadResult',
    'ProgressObserver',
    'FolderWatcher',
    'WatchResult',
    'setup_logging',
]
