"""
VimeoClient - High-level async client for Vimeo uploads.

Example:
    >>> async with VimeoClient("my-token") as vimeo:
    ...     video_id = await vimeo.upload("trip.mp4", name="Trip")
    ...     await vimeo.attach_picture(video_id, "trip.jpg")
"""
from pathlib import Path
from typing import Optional, Union

from .core.api import (
    AsyncAPIClient,
    APIConfig,
    ProxyConfig,
    SSLConfig,
    Transport,
    UploadSettings,
    UserInfo,
    VideoEntry,
    VideoPage
)
from .core.credentials import CredentialProvider
from .core.upload import (
    UploadCoordinator,
    UploadConfig,
    UploadResult,
    PictureSession,
    PictureTicket
)
from .core.upload.protocols import ProgressSink


class VimeoClient:
    """
    High-level async client for Vimeo.

    The token is read once when the client starts and shared read-only by
    every upload started from it. Uploads may run concurrently:

        >>> async with VimeoClient(StaticCredential(token)) as vimeo:
        ...     ids = await asyncio.gather(vimeo.upload("a.mp4"), vimeo.upload("b.mp4"))

    With custom configuration:
        >>> config = VimeoClient.create_config(proxy="http://proxy:8080")
        >>> client = VimeoClient("token", config=config)
    """

    def __init__(
        self,
        credentials: Union[str, CredentialProvider],
        *,
        config: Optional[APIConfig] = None,
        transport: Optional[Transport] = None
    ):
        """
        Initialize Vimeo client.

        Args:
            credentials: Bearer token, or a provider such as SQLiteTokenStore
            config: Optional API configuration
            transport: Optional HTTP transport (tests inject a fake one)
        """
        from .core.logging import get_logger

        self._credentials = credentials
        self._config = config or APIConfig.default()
        self._transport = transport
        self._logger = get_logger('vimeopy.client')
        self._api: Optional[AsyncAPIClient] = None

    # =========================================================================
    # Configuration helpers
    # =========================================================================

    @staticmethod
    def create_config(
        proxy: Optional[str] = None,
        proxy_user: Optional[str] = None,
        proxy_pass: Optional[str] = None,
        verify_ssl: bool = True,
        user_agent: Optional[str] = None,
        content_type: Optional[str] = None,
        max_stalled_attempts: Optional[int] = None
    ) -> APIConfig:
        """
        Create API configuration with common options.

        Args:
            proxy: Proxy URL (e.g., "http://proxy:8080")
            proxy_user: Proxy username
            proxy_pass: Proxy password
            verify_ssl: Whether to verify SSL certificates
            user_agent: Custom user agent string
            content_type: Content-Type sent with video bytes
            max_stalled_attempts: Give up after this many passes without progress

        Returns:
            APIConfig instance
        """
        proxy_config = None
        if proxy:
            proxy_config = ProxyConfig(
                url=proxy,
                username=proxy_user,
                password=proxy_pass
            )

        upload = UploadSettings(max_stalled_attempts=max_stalled_attempts)
        if content_type:
            upload.content_type = content_type

        return APIConfig(
            proxy=proxy_config,
            ssl=SSLConfig(verify=verify_ssl),
            upload=upload,
            user_agent=user_agent or 'vimeopy/1.0.0'
        )

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def start(self) -> 'VimeoClient':
        """
        Create the API client.

        Raises:
            CredentialError: If no token is available
        """
        if self._api is None:
            self._api = AsyncAPIClient(self._credentials, self._config, self._transport)
            self._logger.debug("API client started")
        return self

    async def close(self) -> None:
        """Close client and release resources."""
        if self._api is not None:
            await self._api.close()
            self._api = None

    async def __aenter__(self) -> 'VimeoClient':
        return await self.start()

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    @property
    def api(self) -> AsyncAPIClient:
        """Low-level API client."""
        return self._ensure_started()

    def _ensure_started(self) -> AsyncAPIClient:
        if self._api is None:
            raise RuntimeError("Client not started. Use 'async with' or call start()")
        return self._api

    # =========================================================================
    # Uploads
    # =========================================================================

    async def upload_video(
        self,
        file_path: Union[str, Path],
        name: str = '',
        description: str = '',
        progress_callback: Optional[ProgressSink] = None
    ) -> UploadResult:
        """
        Upload a video and return the full result.

        Args:
            file_path: Local video file
            name: Title ('' leaves it unset)
            description: Description ('' leaves it unset)
            progress_callback: ProgressObserver or (sent, total) callable

        Returns:
            UploadResult
        """
        api = self._ensure_started()
        coordinator = UploadCoordinator(api, progress_callback=progress_callback)
        config = UploadConfig(
            file_path=Path(file_path),
            name=name,
            description=description,
            settings=self._config.upload
        )
        return await coordinator.upload(config)

    async def upload(
        self,
        file_path: Union[str, Path],
        name: str = '',
        description: str = '',
        progress_callback: Optional[ProgressSink] = None
    ) -> str:
        """
        Upload a video.

        Example:
            # Simple upload
            await vimeo.upload("clip.mp4")

            # With title and a progress callback
            await vimeo.upload("clip.mp4", name="Clip", progress_callback=print)

        Returns:
            The new video id
        """
        result = await self.upload_video(file_path, name, description, progress_callback)
        return result.video_id

    def _picture_session(self) -> PictureSession:
        return PictureSession(self._ensure_started(), self._config.activation)

    async def set_picture(
        self,
        video_id: str,
        image_path: Union[str, Path]
    ) -> PictureTicket:
        """Upload an image and make it the active thumbnail."""
        return await self._picture_session().attach(video_id, image_path)

    async def set_picture_time(self, video_id: str, time_offset: Union[int, float]) -> None:
        """Use the frame at time_offset seconds as the active thumbnail."""
        await self._picture_session().set_time(video_id, time_offset)

    async def attach_picture(
        self,
        video_id: str,
        image: Union[str, Path, int, float]
    ) -> None:
        """
        Attach a thumbnail to a video.

        Args:
            video_id: Target video
            image: Image path, or a time offset in seconds into the video
        """
        if isinstance(image, (int, float)) and not isinstance(image, bool):
            await self.set_picture_time(video_id, image)
        else:
            await self.set_picture(video_id, image)

    # =========================================================================
    # Queries and management
    # =========================================================================

    async def get_videos(self) -> VideoPage:
        return await self._ensure_started().get_videos()

    async def get_video(self, video_id: str) -> VideoEntry:
        return await self._ensure_started().get_video(video_id)

    async def get_video_status(self, video_id: str) -> str:
        return await self._ensure_started().get_video_status(video_id)

    async def get_user_info(self) -> UserInfo:
        return await self._ensure_started().get_user_info()

    async def get_quota(self) -> UserInfo:
        return await self._ensure_started().get_quota()

    async def delete_video(self, video_id: str) -> None:
        await self._ensure_started().delete_video(video_id)
        self._logger.info(f"Deleted video {video_id}")

    async def edit_video(
        self,
        video_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None
    ) -> None:
        """Set title and/or description; empty values are left untouched."""
        await self._ensure_started().set_video_metadata(video_id, name, description)

    def __repr__(self) -> str:
        state = "started" if self._api is not None else "stopped"
        return f"<VimeoClient gateway={self._config.gateway!r} {state}>"
