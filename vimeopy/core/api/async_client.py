"""
Async Vimeo API client.

Adds the bearer token and the versioned Accept header to every call,
resolves API paths against the gateway and decodes JSON responses.
"""
import json
import logging
from typing import Any, Collection, Dict, Mapping, Optional, Union
from urllib.parse import urlencode

from .config import APIConfig
from .models import PictureTicket, UploadTicket, UserInfo, VideoEntry, VideoPage
from .transport import AsyncTransport, Body, Transport, TransportResponse
from ..credentials import CredentialProvider, StaticCredential
from ..exceptions import CredentialError, VimeoException

SUCCESS_CODES = tuple(range(200, 300))


def form_encode(fields: Mapping[str, Any], omit_empty: bool = False) -> str:
    """
    Encode fields as application/x-www-form-urlencoded.

    Args:
        fields: Ordered field mapping
        omit_empty: Drop fields whose value is None or ''

    >>> form_encode({'name': 'Trip', 'description': ''}, omit_empty=True)
    'name=Trip'
    """
    items = [
        (key, value) for key, value in fields.items()
        if not (omit_empty and (value is None or value == ''))
    ]
    return urlencode(items)


class AsyncAPIClient:
    """
    Asynchronous Vimeo API client.

    Features:
    - Full async/await support
    - Pluggable transport (AsyncTransport by default)
    - Token read once from a CredentialProvider, never mutated afterwards
    - Typed helpers for the endpoints the uploader uses

    Example:
        >>> async with AsyncAPIClient("my-token") as api:
        ...     page = await api.get_videos()
    """

    def __init__(
        self,
        credentials: Union[str, CredentialProvider],
        config: Optional[APIConfig] = None,
        transport: Optional[Transport] = None
    ):
        """
        Initialize async API client.

        Args:
            credentials: Bearer token or provider supplying it
            config: API configuration (uses defaults if not provided)
            transport: HTTP transport (AsyncTransport if not provided)

        Raises:
            CredentialError: If no token is available
        """
        self._config = config or APIConfig.default()
        provider = StaticCredential(credentials) if isinstance(credentials, str) else credentials
        token = provider.get_token()
        if not token:
            raise CredentialError("No Vimeo access token available")
        self._authorization = f"bearer {token}"

        self._owns_transport = transport is None
        self._transport: Transport = transport or AsyncTransport(self._config)

        from ..logging import get_logger
        self._logger = get_logger('vimeopy.api')
        # Only set level if root logger has no handlers
        root_logger = logging.getLogger()
        if not root_logger.handlers:
            self._logger.setLevel(self._config.log_level)

    @property
    def config(self) -> APIConfig:
        """Get current configuration."""
        return self._config

    @property
    def transport(self) -> Transport:
        return self._transport

    async def __aenter__(self) -> 'AsyncAPIClient':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Close client and release resources."""
        if self._owns_transport:
            await self._transport.close()

    def build_url(self, path_or_url: str) -> str:
        """Resolve an API path (/me/videos) against the gateway."""
        if path_or_url.startswith(('http://', 'https://')):
            return path_or_url
        gateway = self._config.gateway.rstrip('/')
        return f"{gateway}/{path_or_url.lstrip('/')}"

    def default_headers(self) -> Dict[str, str]:
        """Headers carried by every request."""
        return {
            'Authorization': self._authorization,
            'Accept': self._config.accept_header,
        }

    async def execute(
        self,
        method: str,
        path_or_url: str,
        headers: Optional[Mapping[str, str]] = None,
        body: Body = None,
        expected: Optional[Collection[int]] = (200,)
    ) -> TransportResponse:
        """
        Perform one authenticated exchange.

        Args:
            method: HTTP method
            path_or_url: API path or absolute URL (upload links)
            headers: Extra headers, override the defaults
            body: Request body, async iterables are streamed
            expected: Accepted statuses, None accepts anything

        Returns:
            TransportResponse
        """
        merged = self.default_headers()
        if headers:
            merged.update(headers)
        url = self.build_url(path_or_url)
        return await self._transport.execute(method, url, merged, body, expected)

    async def request(
        self,
        method: str,
        path: str,
        data: Optional[Union[Mapping[str, Any], str]] = None,
        headers: Optional[Mapping[str, str]] = None,
        expected: Optional[Collection[int]] = (200,)
    ) -> TransportResponse:
        """
        Perform a request with an optional form-encoded body.

        Args:
            method: HTTP method
            path: API path
            data: Form fields (mapping) or pre-encoded form string
            headers: Extra headers
            expected: Accepted statuses

        Returns:
            TransportResponse
        """
        body = None
        merged = dict(headers or {})
        if data:
            encoded = data if isinstance(data, str) else form_encode(data)
            body = encoded.encode('ascii')
            merged.setdefault('Content-Type', 'application/x-www-form-urlencoded')
        self._logger.debug(f"{method} {path} body={body!r}")
        return await self.execute(method, path, merged, body, expected)

    async def request_json(
        self,
        method: str,
        path: str,
        data: Optional[Union[Mapping[str, Any], str]] = None,
        headers: Optional[Mapping[str, str]] = None,
        expected: Optional[Collection[int]] = (200,)
    ) -> Any:
        """
        Perform a request and decode its JSON body.

        Raises:
            VimeoException: If the body is not valid JSON
        """
        response = await self.request(method, path, data, headers, expected)
        text = response.text()
        self._logger.debug(f"Response data: {text[:1000] if len(text) > 1000 else text}")
        try:
            return json.loads(text) if text else {}
        except json.JSONDecodeError as e:
            raise VimeoException(
                f"Invalid JSON from {method} {path}: {e}",
                error_code=response.status
            ) from e

    # Read-only queries

    async def get_videos(self) -> VideoPage:
        """Get the user's videos."""
        data = await self.request_json(
            'GET', '/me/videos?fields=uri,name,status,created_time,modified_time'
        )
        return VideoPage.from_dict(data)

    async def get_video(self, video_id: str) -> VideoEntry:
        """Get full details of a video."""
        data = await self.request_json('GET', f'/me/videos/{video_id}')
        return VideoEntry.from_dict(data)

    async def get_video_status(self, video_id: str) -> str:
        """Get the transcoding status of a video."""
        data = await self.request_json('GET', f'/me/videos/{video_id}?fields=status')
        return VideoEntry.from_dict(data).status

    async def get_user_info(self) -> UserInfo:
        """Get account information."""
        data = await self.request_json('GET', '/me')
        return UserInfo.from_dict(data)

    async def get_quota(self) -> UserInfo:
        """Get account information restricted to name and upload quota."""
        data = await self.request_json('GET', '/me?fields=name,upload_quota')
        return UserInfo.from_dict(data)

    # Video management

    async def delete_video(self, video_id: str) -> None:
        """Delete a video."""
        await self.request('DELETE', f'/videos/{video_id}', expected=(204,))

    async def set_video_metadata(
        self,
        video_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None
    ) -> None:
        """
        Set name and description of a video.

        Empty fields are left out of the PATCH body. Nothing is sent when
        both are empty.
        """
        body = form_encode({'name': name, 'description': description}, omit_empty=True)
        if not body:
            self._logger.debug(f"No metadata to set for video {video_id}")
            return
        await self.request('PATCH', f'/videos/{video_id}', body, expected=(200,))

    # Upload protocol endpoints

    async def create_upload_ticket(self) -> UploadTicket:
        """Request a streaming upload ticket."""
        data = await self.request_json(
            'POST',
            '/me/videos?type=streaming',
            headers={'type': 'streaming'},
            expected=(201,)
        )
        return UploadTicket.from_dict(data)

    async def complete_upload(self, ticket: UploadTicket) -> TransportResponse:
        """Finalize an upload; the response Location names the video."""
        return await self.request('DELETE', ticket.complete_uri, expected=SUCCESS_CODES)

    async def create_picture(self, video_id: str) -> PictureTicket:
        """Create a picture resource waiting for its image bytes."""
        data = await self.request_json(
            'POST', f'/videos/{video_id}/pictures', expected=(201,)
        )
        return PictureTicket.from_dict(data)

    async def activate_picture(self, picture_uri: str) -> None:
        """Mark an uploaded picture as the active thumbnail."""
        await self.request('PATCH', picture_uri, {'active': 'true'}, expected=(200,))

    async def set_picture_time(self, video_id: str, time_offset: Union[int, float]) -> None:
        """Use the frame at time_offset seconds as the active thumbnail."""
        await self.request(
            'POST',
            f'/videos/{video_id}/pictures',
            {'time': time_offset, 'active': 'true'},
            expected=(201,)
        )
