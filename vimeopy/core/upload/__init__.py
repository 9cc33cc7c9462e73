"""
Upload module for resumable Vimeo video uploads.

UploadCoordinator is the entry point; UploadSession runs the streaming
ticket protocol and PictureSession attaches thumbnails.
"""
from .coordinator import UploadCoordinator
from .session import UploadSession, extract_video_id
from .picture import PictureSession
from .models import (
    SessionState,
    UploadProgress,
    VerificationResult,
    UploadConfig,
    UploadResult,
    UploadTicket,
    PictureTicket,
)
from .protocols import ProgressObserver, FileReaderProtocol

__all__ = [
    # Main classes
    'UploadCoordinator',
    'UploadSession',
    'PictureSession',
    'extract_video_id',

    # Models
    'SessionState',
    'UploadProgress',
    'VerificationResult',
    'UploadConfig',
    'UploadResult',
    'UploadTicket',
    'PictureTicket',

    # Protocols
    'ProgressObserver',
    'FileReaderProtocol',
]
