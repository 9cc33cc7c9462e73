"""
HTTP transport.

Performs exactly one request/response exchange per call. Retry policy
belongs to the callers.
"""
import asyncio
from dataclasses import dataclass, field
from typing import (
    Any, AsyncIterable, Collection, Dict, Mapping, Optional, Protocol, Union,
    runtime_checkable
)

import aiohttp
from multidict import CIMultiDict

from .config import APIConfig
from .errors import NetworkError, UnexpectedStatusError, AuthenticationError
from ..logging import get_logger

Body = Union[bytes, str, AsyncIterable[bytes], None]


@dataclass
class TransportResponse:
    """
    Result of a single HTTP exchange.

    Attributes:
        status: HTTP status code
        headers: Case-insensitive response headers
        body: Raw response body
    """
    status: int
    headers: CIMultiDict = field(default_factory=CIMultiDict)
    body: bytes = b''

    @property
    def ok(self) -> bool:
        """True for 2xx statuses."""
        return 200 <= self.status < 300

    def text(self, encoding: str = 'utf-8') -> str:
        """Decode body as text."""
        return self.body.decode(encoding, errors='replace')


@runtime_checkable
class Transport(Protocol):
    """
    Protocol for HTTP transports.

    Implementations must stream async iterable bodies instead of buffering
    them, and raise NetworkError / UnexpectedStatusError.
    """

    async def execute(
        self,
        method: str,
        url: str,
        headers: Optional[Mapping[str, str]] = None,
        body: Body = None,
        expected: Optional[Collection[int]] = (200,)
    ) -> TransportResponse:
        ...

    async def close(self) -> None:
        ...


def check_status(
    method: str,
    url: str,
    response: TransportResponse,
    expected: Optional[Collection[int]]
) -> TransportResponse:
    """
    Validate a response status against the expected set.

    Args:
        method: HTTP method (for diagnostics)
        url: Request URL (for diagnostics)
        response: Response to check
        expected: Accepted statuses, None accepts anything

    Raises:
        AuthenticationError: On 401/403 outside the expected set
        UnexpectedStatusError: On any other status outside the expected set
    """
    if expected is None or response.status in expected:
        return response
    if response.status in AuthenticationError.AUTH_STATUSES:
        raise AuthenticationError(method, url, response.status, expected, response.body)
    raise UnexpectedStatusError(method, url, response.status, expected, response.body)


class AsyncTransport:
    """
    aiohttp based transport.

    Features:
    - One pooled ClientSession, created lazily
    - Streams async iterable bodies chunk by chunk
    - Never follows redirects (a 308 must reach the caller)
    - No timeouts unless configured

    Example:
        >>> async with AsyncTransport() as transport:
        ...     resp = await transport.execute('GET', url, expected=(200,))
    """

    def __init__(
        self,
        config: Optional[APIConfig] = None,
        session: Optional[aiohttp.ClientSession] = None
    ):
        """
        Initialize transport.

        Args:
            config: API configuration (uses defaults if not provided)
            session: Optional externally owned session
        """
        self._config = config or APIConfig.default()
        self._session = session
        self._owns_session = session is None
        self._logger = get_logger('vimeopy.transport')

    async def __aenter__(self) -> 'AsyncTransport':
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure session is created and open."""
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(
                **self._config.get_connector_kwargs()
            )
            self._session = aiohttp.ClientSession(
                connector=connector,
                **self._config.get_session_kwargs()
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the session if this transport created it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def execute(
        self,
        method: str,
        url: str,
        headers: Optional[Mapping[str, str]] = None,
        body: Body = None,
        expected: Optional[Collection[int]] = (200,)
    ) -> TransportResponse:
        """
        Perform a single HTTP exchange.

        Args:
            method: HTTP method
            url: Absolute URL
            headers: Request headers
            body: bytes, str, or async iterable of bytes (streamed)
            expected: Accepted statuses, None accepts anything

        Returns:
            TransportResponse with status, headers and body

        Raises:
            NetworkError: On connection or IO failure
            UnexpectedStatusError: If the status is not expected
        """
        session = await self._ensure_session()
        request_kwargs: Dict[str, Any] = {
            'headers': dict(headers or {}),
            'allow_redirects': False,
        }
        if body is not None:
            request_kwargs['data'] = body
        if self._config.proxy:
            request_kwargs['proxy'] = self._config.proxy.to_aiohttp_proxy()

        self._logger.debug(f"{method} {url}")

        try:
            async with session.request(method, url, **request_kwargs) as response:
                payload = await response.read()
                result = TransportResponse(
                    status=response.status,
                    headers=CIMultiDict(response.headers),
                    body=payload
                )
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            self._logger.debug(f"{method} {url} failed: {e!r}")
            raise NetworkError(f"Network error on {method} {url}: {e}", method, url) from e

        self._logger.debug(f"{method} {url} -> {result.status}")
        return check_status(method, url, result, expected)
