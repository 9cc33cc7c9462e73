"""
Unit tests for credential management.

Tests TokenData, StaticCredential, MemoryTokenStore and SQLiteTokenStore.
"""
import pytest
import tempfile
from pathlib import Path
from datetime import datetime

from vimeopy.core.credentials import (
    CredentialProvider,
    TokenStorage,
    TokenData,
    normalize_token,
    StaticCredential,
    MemoryTokenStore,
    SQLiteTokenStore
)


class TestNormalizeToken:

    @pytest.mark.parametrize('raw, expected', [
        ('abc123', 'abc123'),
        ('  abc123\n', 'abc123'),
        ('bearer abc123', 'abc123'),
        ('Bearer   abc123 ', 'abc123'),
        ('', ''),
        (None, ''),
    ])
    def test_normalize(self, raw, expected):
        assert normalize_token(raw) == expected

    def test_case_preserved(self):
        """Tokens are opaque, their case is kept."""
        assert normalize_token('AbC') == 'AbC'


class TestTokenData:
    """Tests for TokenData model."""

    def test_create(self):
        data = TokenData(token=' bearer abc ')

        assert data.token == 'abc'
        assert data.is_valid()

    def test_empty_is_invalid(self):
        assert not TokenData(token='   ').is_valid()

    def test_update_timestamp(self):
        data = TokenData(token='abc', updated_at=datetime(2000, 1, 1))

        data.update_timestamp()

        assert data.updated_at.year > 2000


class TestStaticCredential:

    def test_get_token(self):
        assert StaticCredential('bearer xyz').get_token() == 'xyz'

    def test_empty_token(self):
        assert StaticCredential('  ').get_token() is None

    def test_is_provider(self):
        assert isinstance(StaticCredential('x'), CredentialProvider)


class TestMemoryTokenStore:
    """Tests for MemoryTokenStore."""

    def test_empty(self):
        store = MemoryTokenStore()

        assert not store.exists()
        assert store.load() is None
        assert store.get_token() is None

    def test_save_and_load(self):
        store = MemoryTokenStore()
        store.save(TokenData(token='abc'))

        assert store.exists()
        assert store.get_token() == 'abc'

    def test_delete(self):
        store = MemoryTokenStore(TokenData(token='abc'))
        store.delete()

        assert not store.exists()

    def test_protocols(self):
        store = MemoryTokenStore()

        assert isinstance(store, TokenStorage)
        assert isinstance(store, CredentialProvider)


class TestSQLiteTokenStore:
    """Tests for SQLiteTokenStore."""

    @pytest.fixture
    def temp_dir(self):
        with tempfile.TemporaryDirectory() as d:
            yield Path(d)

    def test_creates_file_with_extension(self, temp_dir):
        store = SQLiteTokenStore('token', temp_dir)

        assert store.path == temp_dir / 'token.session'
        assert store.path.exists()
        store.close()

    def test_full_path(self, temp_dir):
        store = SQLiteTokenStore(str(temp_dir / 'custom.session'))

        assert store.path == temp_dir / 'custom.session'
        store.close()

    def test_save_and_load(self, temp_dir):
        with SQLiteTokenStore('token', temp_dir) as store:
            assert not store.exists()
            store.save(TokenData(token='abc'))

            assert store.exists()
            assert store.load().token == 'abc'
            assert store.get_token() == 'abc'

    def test_save_replaces(self, temp_dir):
        with SQLiteTokenStore('token', temp_dir) as store:
            store.save(TokenData(token='first'))
            store.save(TokenData(token='second'))

            assert store.get_token() == 'second'

    def test_timestamps_survive_reload(self, temp_dir):
        created = datetime(2024, 1, 2, 3, 4, 5)
        with SQLiteTokenStore('token', temp_dir) as store:
            store.save(TokenData(token='abc', created_at=created, updated_at=created))

        with SQLiteTokenStore('token', temp_dir) as store:
            data = store.load()

        assert data.created_at == created
        assert data.updated_at > created

    def test_persists_across_instances(self, temp_dir):
        with SQLiteTokenStore('token', temp_dir) as store:
            store.save(TokenData(token='abc'))

        with SQLiteTokenStore('token', temp_dir) as store:
            assert store.get_token() == 'abc'

    def test_delete(self, temp_dir):
        with SQLiteTokenStore('token', temp_dir) as store:
            store.save(TokenData(token='abc'))
            store.delete()

            assert store.get_token() is None

    def test_delete_file(self, temp_dir):
        store = SQLiteTokenStore('token', temp_dir)
        store.delete_file()

        assert not (temp_dir / 'token.session').exists()

    def test_is_provider(self, temp_dir):
        with SQLiteTokenStore('token', temp_dir) as store:
            assert isinstance(store, CredentialProvider)
