"""
SQLite token storage implementation.

Persists the bearer token between runs in a local SQLite database file.
"""
import sqlite3
import threading
from pathlib import Path
from datetime import datetime
from typing import Optional, Union
from contextlib import contextmanager

from .protocols import TokenStorage
from .models import TokenData


class SQLiteTokenStore(TokenStorage):
    """
    SQLite-based token storage.

    Thread-safe; holds at most one token.

    Example:
        >>> store = SQLiteTokenStore("token")
        >>> # Creates token.session file
        >>>
        >>> store.save(TokenData(token="abc123"))
        >>> store.get_token()
        'abc123'
    """

    EXTENSION = '.session'
    SCHEMA_VERSION = 1

    def __init__(
        self,
        store_name: Union[str, Path],
        base_path: Optional[Path] = None
    ):
        """
        Initialize SQLite token storage.

        Args:
            store_name: Store name (without extension) or full path
            base_path: Optional base directory for store files
        """
        self._lock = threading.Lock()
        self._conn: Optional[sqlite3.Connection] = None

        if isinstance(store_name, Path) or store_name.endswith(self.EXTENSION):
            self._path = Path(store_name)
        else:
            if base_path:
                self._path = base_path / f"{store_name}{self.EXTENSION}"
            else:
                self._path = Path(f"{store_name}{self.EXTENSION}")

        self._path.parent.mkdir(parents=True, exist_ok=True)

        self._init_db()

    @property
    def path(self) -> Path:
        """Get store file path."""
        return self._path

    @contextmanager
    def _get_connection(self):
        """Get thread-safe database connection."""
        with self._lock:
            if self._conn is None:
                self._conn = sqlite3.connect(
                    str(self._path),
                    check_same_thread=False
                )
                self._conn.row_factory = sqlite3.Row
            yield self._conn

    def _init_db(self) -> None:
        """Initialize database schema."""
        with self._get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute('''
                CREATE TABLE IF NOT EXISTS version (
                    version INTEGER PRIMARY KEY
                )
            ''')

            cursor.execute('''
                CREATE TABLE IF NOT EXISTS credential (
                    id INTEGER PRIMARY KEY,
                    token TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            ''')

            cursor.execute('SELECT version FROM version LIMIT 1')
            row = cursor.fetchone()
            if row is None:
                cursor.execute(
                    'INSERT INTO version (version) VALUES (?)',
                    (self.SCHEMA_VERSION,)
                )

            conn.commit()

    def load(self) -> Optional[TokenData]:
        """
        Load the saved token.

        Returns:
            TokenData if exists, None otherwise
        """
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute('''
                SELECT token, created_at, updated_at
                FROM credential
                LIMIT 1
            ''')

            row = cursor.fetchone()
            if row is None:
                return None

            return TokenData(
                token=row['token'],
                created_at=datetime.fromisoformat(row['created_at']),
                updated_at=datetime.fromisoformat(row['updated_at']),
            )

    def save(self, data: TokenData) -> None:
        """
        Replace the saved token.

        Args:
            data: Token data to save
        """
        data.update_timestamp()

        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute('DELETE FROM credential')
            cursor.execute('''
                INSERT INTO credential (token, created_at, updated_at)
                VALUES (?, ?, ?)
            ''', (
                data.token,
                data.created_at.isoformat(),
                data.updated_at.isoformat(),
            ))
            conn.commit()

    def delete(self) -> None:
        """Delete the saved token."""
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute('DELETE FROM credential')
            conn.commit()

    def exists(self) -> bool:
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute('SELECT COUNT(*) FROM credential')
            count = cursor.fetchone()[0]
            return count > 0

    def get_token(self) -> Optional[str]:
        """Makes the store usable as a CredentialProvider."""
        data = self.load()
        return data.token if data else None

    def close(self) -> None:
        """Close database connection."""
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def delete_file(self) -> None:
        """Delete the store file completely."""
        self.close()
        if self._path.exists():
            self._path.unlink()

    def __enter__(self) -> 'SQLiteTokenStore':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __del__(self):
        """Destructor - ensure connection is closed."""
        try:
            self.close()
        except Exception:
            pass
