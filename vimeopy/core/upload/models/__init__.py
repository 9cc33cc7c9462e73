"""Upload models."""
from .upload_models import (
    SessionState,
    UploadProgress,
    VerificationResult,
    UploadConfig,
    UploadResult,
    parse_range_header
)
from ...api.models import UploadTicket, PictureTicket

__all__ = [
    'SessionState',
    'UploadProgress',
    'VerificationResult',
    'UploadConfig',
    'UploadResult',
    'UploadTicket',
    'PictureTicket',
    'parse_range_header'
]
