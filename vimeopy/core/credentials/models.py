"""
Credential data models.
"""
from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class TokenData:
    """
    A saved Vimeo bearer token.

    Attributes:
        token: Bearer token, stored without the 'bearer ' prefix
        created_at: When the token was first saved
        updated_at: Last update timestamp
    """
    token: str
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        self.token = normalize_token(self.token)

    def is_valid(self) -> bool:
        """True if a non-empty token is present."""
        return bool(self.token)

    def update_timestamp(self) -> None:
        """Update the updated_at timestamp to now."""
        self.updated_at = datetime.now()


def normalize_token(token: str) -> str:
    """
    Strip whitespace and an optional 'bearer ' prefix from a token.

    >>> normalize_token('  bearer abc123 ')
    'abc123'
    """
    token = (token or '').strip()
    if token.lower().startswith('bearer '):
        token = token[len('bearer '):].strip()
    return token
