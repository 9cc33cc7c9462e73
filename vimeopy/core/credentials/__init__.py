"""
Credential management module.

Supplies the bearer token to the API client and optionally persists it
between runs.
"""
from .protocols import CredentialProvider, TokenStorage
from .models import TokenData, normalize_token
from .memory_store import StaticCredential, MemoryTokenStore
from .sqlite_store import SQLiteTokenStore

__all__ = [
    'CredentialProvider',
    'TokenStorage',
    'TokenData',
    'normalize_token',
    'StaticCredential',
    'MemoryTokenStore',
    'SQLiteTokenStore',
]
