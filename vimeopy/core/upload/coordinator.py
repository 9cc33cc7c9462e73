"""
Upload coordinator.

Orchestrates the upload process using injected dependencies:
validate the file, run a resumable session, then set metadata.
"""
import logging
import time
from typing import Optional

from .models import UploadConfig, UploadResult
from .protocols import FileReaderProtocol, ProgressSink
from .services import FileValidator
from .session import UploadSession

logger = logging.getLogger('vimeopy.upload.coordinator')


class UploadCoordinator:
    """
    Coordinates the video upload process.

    Uses dependency injection for all components, making it:
    - Testable (fake transport or mocked API client)
    - Extensible (swap the file reader)
    """

    def __init__(
        self,
        api_client,
        file_reader: Optional[FileReaderProtocol] = None,
        progress_callback: Optional[ProgressSink] = None
    ):
        """
        Initialize upload coordinator.

        Args:
            api_client: AsyncAPIClient
            file_reader: File reader implementation
            progress_callback: Optional observer for transfer progress
        """
        self._api = api_client
        self._file_reader = file_reader
        self._validator = FileValidator()
        self._progress_callback = progress_callback

    def create_session(self, config: UploadConfig) -> UploadSession:
        return UploadSession(
            self._api,
            config.file_path,
            settings=config.settings,
            file_reader=self._file_reader,
            progress_callback=self._progress_callback
        )

    async def upload(self, config: UploadConfig) -> UploadResult:
        """
        Execute the complete upload process.

        Args:
            config: Upload configuration

        Returns:
            Upload result with the video id

        Raises:
            FileNotFoundError: If file doesn't exist
            VimeoException: If any protocol step fails
        """
        path, file_size = self._validator.validate(config.file_path)
        file_size_mb = file_size / (1024 * 1024)
        logger.info(f"Starting upload: {path.name} ({file_size_mb:.2f} MB)")
        start_time = time.time()

        session = self.create_session(config)
        video_id = await session.run()

        if config.has_metadata:
            logger.info(f"Setting metadata of video {video_id}")
            await self._api.set_video_metadata(video_id, config.name, config.description)

        elapsed = time.time() - start_time
        speed = (file_size_mb / elapsed) if elapsed > 0 else 0
        logger.info(
            f"Uploaded {path.name} as video {video_id} in {elapsed:.2f}s ({speed:.2f} MB/s)"
        )

        return UploadResult(
            video_id=video_id,
            file_size=file_size,
            attempts=session.attempts,
            verifications=session.verifications,
            elapsed=elapsed
        )
