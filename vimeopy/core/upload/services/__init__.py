"""Upload services module."""
from .file_service import FileValidator, AsyncFileReader
from .chunk_service import ChunkUploader

__all__ = [
    'FileValidator',
    'AsyncFileReader',
    'ChunkUploader',
]
