"""
In-memory credential implementations.

Provides a fixed token provider and a non-persistent token store.
"""
from typing import Optional

from .protocols import TokenStorage
from .models import TokenData, normalize_token


class StaticCredential:
    """
    Credential provider wrapping a token given at construction.

    Example:
        >>> StaticCredential(' bearer abc ').get_token()
        'abc'
    """

    def __init__(self, token: str):
        self._token = normalize_token(token)

    def get_token(self) -> Optional[str]:
        return self._token or None


class MemoryTokenStore(TokenStorage):
    """
    In-memory token storage.

    Data is lost when the object is destroyed. Useful for tests and
    CI/CD environments.
    """

    def __init__(self, data: Optional[TokenData] = None):
        self._data: Optional[TokenData] = data

    def load(self) -> Optional[TokenData]:
        return self._data

    def save(self, data: TokenData) -> None:
        data.update_timestamp()
        self._data = data

    def delete(self) -> None:
        self._data = None

    def exists(self) -> bool:
        return self._data is not None

    def close(self) -> None:
        """Close storage (no-op for memory storage)."""
        pass

    def get_token(self) -> Optional[str]:
        """Makes the store usable as a CredentialProvider."""
        return self._data.token if self._data else None

    def __enter__(self) -> 'MemoryTokenStore':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
