"""Folder watcher: uploads videos dropped into a folder."""
from .folder_watcher import FolderWatcher, WatchResult, VIDEO_EXTENSIONS

__all__ = [
    'FolderWatcher',
    'WatchResult',
    'VIDEO_EXTENSIONS',
]
