"""
Credential protocols.

The upload core only ever consumes a token through CredentialProvider;
persistent storage is a separate concern handled by TokenStorage.
"""
from typing import Protocol, Optional, runtime_checkable
from .models import TokenData


@runtime_checkable
class CredentialProvider(Protocol):
    """
    Protocol for anything that can hand out a bearer token.
    """

    def get_token(self) -> Optional[str]:
        """
        Returns:
            The bearer token, or None if none is available
        """
        ...


@runtime_checkable
class TokenStorage(Protocol):
    """
    Protocol for token storage implementations.

    Implementations can use SQLite, memory, or any other backend.
    """

    def load(self) -> Optional[TokenData]:
        """
        Load token data from storage.

        Returns:
            TokenData if a token was saved, None otherwise
        """
        ...

    def save(self, data: TokenData) -> None:
        """
        Save token data to storage.

        Args:
            data: Token data to save
        """
        ...

    def delete(self) -> None:
        """
        Delete token data from storage.
        """
        ...

    def exists(self) -> bool:
        """
        Check if a token is saved.
        """
        ...

    def close(self) -> None:
        """
        Close storage and release resources.
        """
        ...
