"""Pytest fixtures for vimeopy tests."""
import json
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import parse_qsl, urlsplit

import pytest
from multidict import CIMultiDict

from vimeopy.core.api import AsyncAPIClient, APIConfig, TransportResponse
from vimeopy.core.api.errors import NetworkError
from vimeopy.core.api.transport import check_status

GATEWAY = 'https://api.vimeo.com'
TOKEN = 'test-token-123'
UPLOAD_LINK = 'https://upload.example.vimeo.com/upload?ticket_id=abc123'
COMPLETE_URI = '/users/42/uploads/abc123?video_file_id=7&signature=sig'
PICTURE_LINK = 'https://i.example.vimeo.com/video/555'


class FakeClock:
    """Monotonic clock advanced only by the fake sleep."""

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeVimeoServer:
    """
    In-memory Vimeo API implementing the Transport protocol.

    Knobs:
        transfer_limits: Per transfer attempt, bytes accepted before the
            connection drops (None accepts the whole body)
        verify_success_when_complete: Answer the probe with 200 instead of
            308 + Range once every byte is stored
        completion_location: Location header of the completion response
        activation_ready: Callable telling whether activation succeeds
        routes: (method, path) -> (status, json body) overrides
    """

    def __init__(self, video_id: str = '123456'):
        self.video_id = video_id
        self.stored = bytearray()
        self.total_size: Optional[int] = None
        self.transfer_limits: List[Optional[int]] = []
        self.transfer_status = 200
        self.verify_success_when_complete = False
        self.verify_missing_range = False
        self.completion_location: Optional[str] = f'/videos/{video_id}'
        self.activation_ready = lambda: True
        self.picture_bytes = bytearray()
        self.routes: Dict[Tuple[str, str], Tuple[int, Any]] = {}
        self.requests: List[Dict[str, Any]] = []
        self.transfer_offsets: List[int] = []
        self.closed = False

    # Helpers for assertions

    def calls(self, method: str, path_prefix: str = '') -> List[Dict[str, Any]]:
        return [
            r for r in self.requests
            if r['method'] == method and r['path'].startswith(path_prefix)
        ]

    @property
    def verify_requests(self) -> List[Dict[str, Any]]:
        return [
            r for r in self.calls('PUT')
            if r['headers'].get('Content-Range') == 'bytes */*'
        ]

    @property
    def transfer_requests(self) -> List[Dict[str, Any]]:
        return [
            r for r in self.calls('PUT')
            if r['url'] == UPLOAD_LINK and r['headers'].get('Content-Range') != 'bytes */*'
        ]

    # Transport protocol

    async def close(self) -> None:
        self.closed = True

    async def execute(self, method, url, headers=None, body=None, expected=(200,)):
        headers = dict(headers or {})
        split = urlsplit(url)
        path = split.path + (f'?{split.query}' if split.query else '')
        record = {
            'method': method,
            'url': url,
            'path': path,
            'headers': headers,
            'body': body if isinstance(body, (bytes, str, type(None))) else None,
        }
        self.requests.append(record)

        if headers.get('Authorization') != f'bearer {TOKEN}':
            response = self._json(401, {'error': 'Unauthorized'})
        elif url == UPLOAD_LINK and headers.get('Content-Range') == 'bytes */*':
            response = self._verify()
        elif url == UPLOAD_LINK:
            response = await self._transfer(headers, body)
        elif url == PICTURE_LINK:
            async for chunk in body:
                self.picture_bytes.extend(chunk)
            response = TransportResponse(200)
        else:
            response = self._route(method, path, record)
        return check_status(method, url, response, expected)

    # Handlers

    @staticmethod
    def _json(status: int, data: Any, headers: Optional[Dict[str, str]] = None) -> TransportResponse:
        return TransportResponse(
            status=status,
            headers=CIMultiDict(headers or {}),
            body=json.dumps(data).encode() if data is not None else b''
        )

    async def _transfer(self, headers, body) -> TransportResponse:
        content_range = headers.get('Content-Range')
        offset = int(content_range.split(' ')[1].split('-')[0]) if content_range else 0
        self.transfer_offsets.append(offset)
        self.total_size = int(headers['Content-Length'])
        del self.stored[offset:]

        attempt = len(self.transfer_offsets) - 1
        limit = self.transfer_limits[attempt] if attempt < len(self.transfer_limits) else None
        received = 0
        async for chunk in body:
            if limit is not None and received + len(chunk) > limit:
                self.stored.extend(chunk[:limit - received])
                raise NetworkError('Connection reset by peer', 'PUT', UPLOAD_LINK)
            self.stored.extend(chunk)
            received += len(chunk)
        return TransportResponse(self.transfer_status)

    def _verify(self) -> TransportResponse:
        stored = len(self.stored)
        if self.verify_success_when_complete and stored == self.total_size:
            return TransportResponse(200)
        if self.verify_missing_range or stored == 0:
            return TransportResponse(308)
        return TransportResponse(308, CIMultiDict({'Range': f'bytes=0-{stored - 1}'}))

    def _route(self, method: str, path: str, record: Dict[str, Any]) -> TransportResponse:
        if (method, path) in self.routes:
            status, data = self.routes[(method, path)]
            return self._json(status, data)

        body = record['body']
        form = dict(parse_qsl(body.decode() if isinstance(body, bytes) else (body or '')))
        pictures = f'/videos/{self.video_id}/pictures'

        if method == 'POST' and path == '/me/videos?type=streaming':
            return self._json(201, {
                'uri': '/users/42/tickets/abc123',
                'ticket_id': 'abc123',
                'upload_link_secure': UPLOAD_LINK,
                'complete_uri': COMPLETE_URI,
            })
        if method == 'DELETE' and path == COMPLETE_URI:
            headers = {}
            if self.completion_location is not None:
                headers['Location'] = self.completion_location
            return TransportResponse(201, CIMultiDict(headers))
        if method == 'PATCH' and path == f'/videos/{self.video_id}':
            return self._json(200, {'uri': f'/videos/{self.video_id}', **form})
        if method == 'POST' and path == pictures:
            if 'time' in form:
                return self._json(201, {'uri': f'{pictures}/556', 'active': True})
            return self._json(201, {
                'uri': f'{pictures}/555',
                'active': False,
                'link': PICTURE_LINK,
            })
        if method == 'PATCH' and path == f'{pictures}/555':
            if not self.activation_ready():
                return self._json(500, {'error': 'Picture not processed yet'})
            return self._json(200, {'uri': f'{pictures}/555', 'active': True})
        return self._json(404, {'error': f'No route for {method} {path}'})


@pytest.fixture
def fake_server():
    """In-memory Vimeo server."""
    return FakeVimeoServer()


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def api_config():
    """Config with a small buffer so tests exercise several writes."""
    config = APIConfig.default()
    config.upload.buffer_size = 64 * 1024
    return config


@pytest.fixture
def api_client(fake_server, api_config):
    """API client wired to the fake server."""
    return AsyncAPIClient(TOKEN, api_config, transport=fake_server)


@pytest.fixture
def make_file(tmp_path):
    """Create a file of a given size with a repeating byte pattern."""
    def _make(name: str = 'clip.mp4', size: int = 1024) -> Any:
        path = tmp_path / name
        pattern = bytes(range(256))
        path.write_bytes((pattern * (size // 256 + 1))[:size])
        return path
    return _make
