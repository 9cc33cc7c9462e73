"""
Resumable upload session.

One session uploads one file through one streaming ticket:

    NOT_STARTED -> TICKET_ACQUIRED -> TRANSFERRING <-> VERIFYING -> COMPLETED

The resume offset is always the last byte count the server confirmed,
never the number of bytes written to the socket.
"""
import logging
import time
from pathlib import Path
from typing import Optional, Union
from urllib.parse import urlsplit

from .models import SessionState, UploadProgress, UploadTicket, VerificationResult
from .protocols import FileReaderProtocol, ProgressSink, as_progress_callback, as_resume_callback
from .services import FileValidator, ChunkUploader
from ..api.config import UploadSettings
from ..exceptions import CompletionError, UploadStalledError, VimeoException

logger = logging.getLogger('vimeopy.upload.session')


def extract_video_id(location: Optional[str]) -> str:
    """
    Extract the video id from a completion Location header.

    >>> extract_video_id('/videos/123456')
    '123456'

    Raises:
        CompletionError: If the header is absent or has no /videos/<id> path
    """
    if not location or not location.strip():
        raise CompletionError("Completion response has no Location header", location)

    segments = [s for s in urlsplit(location.strip()).path.split('/') if s]
    if len(segments) < 2 or segments[-2] != 'videos':
        raise CompletionError(f"Malformed Location header {location!r}", location)
    return segments[-1]


class UploadSession:
    """
    State machine driving a single resumable upload.

    Sessions share nothing mutable with each other; several may run
    concurrently on the same API client.
    """

    def __init__(
        self,
        api_client,
        file_path: Union[str, Path],
        settings: Optional[UploadSettings] = None,
        file_reader: Optional[FileReaderProtocol] = None,
        progress_callback: Optional[ProgressSink] = None
    ):
        """
        Initialize upload session.

        Args:
            api_client: AsyncAPIClient
            file_path: Video file to upload
            settings: Upload settings (defaults to the client's config)
            file_reader: Streaming reader override
            progress_callback: ProgressObserver or (sent, total) callable

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If path is not a regular file
        """
        self._api = api_client
        self.file_path, total_bytes = FileValidator().validate(file_path)
        if settings is None:
            config = getattr(api_client, 'config', None)
            settings = getattr(config, 'upload', None) or UploadSettings()
        self._settings = settings
        self._file_reader = file_reader
        self._progress_callback = as_progress_callback(progress_callback)
        self._resume_callback = as_resume_callback(progress_callback)

        self.state = SessionState.NOT_STARTED
        self.progress = UploadProgress(total_bytes)
        self.ticket: Optional[UploadTicket] = None
        self.video_id: Optional[str] = None
        self.attempts = 0
        self.verifications = 0
        self._uploader: Optional[ChunkUploader] = None

    @property
    def total_bytes(self) -> int:
        return self.progress.total_bytes

    @property
    def bytes_confirmed(self) -> int:
        return self.progress.bytes_confirmed

    def _require_ticket(self) -> ChunkUploader:
        if self._uploader is None:
            raise VimeoException("Upload session has no ticket yet")
        return self._uploader

    async def acquire_ticket(self) -> UploadTicket:
        """
        Request the streaming upload ticket.

        Raises:
            VimeoException: Any failure here ends the session
        """
        self.ticket = await self._api.create_upload_ticket()
        self._uploader = ChunkUploader(
            self._api, self.ticket, self._file_reader, self._settings
        )
        self.state = SessionState.TICKET_ACQUIRED
        logger.info(f"Upload ticket {self.ticket.ticket_id} acquired for {self.file_path.name}")
        return self.ticket

    async def transfer(self) -> bool:
        """Run one transfer pass from the confirmed offset."""
        uploader = self._require_ticket()
        self.state = SessionState.TRANSFERRING
        self.attempts += 1
        offset = self.progress.bytes_confirmed
        logger.debug(f"Transfer attempt {self.attempts} from offset {offset}")
        if self._resume_callback is not None:
            self._resume_callback(offset, self.total_bytes)
        return await uploader.transfer(
            self.file_path, offset, self.total_bytes, self._progress_callback
        )

    async def verify(self) -> VerificationResult:
        """
        Ask the server how much it holds and record it.

        Calling this twice without a transfer in between yields the same
        confirmed byte count.

        Raises:
            VerificationError: On an unusable answer or a backwards offset
        """
        uploader = self._require_ticket()
        self.state = SessionState.VERIFYING
        self.verifications += 1
        result = await uploader.verify(self.total_bytes)
        self.progress.confirm(result.bytes_confirmed)
        logger.info(
            f"Server confirmed {self.bytes_confirmed}/{self.total_bytes} bytes "
            f"({self.progress.percentage:.1f}%)"
        )
        return result

    async def complete(self) -> str:
        """
        Finalize the ticket and return the new video id.

        Raises:
            CompletionError: If the Location header is absent or malformed
        """
        if self.ticket is None:
            raise VimeoException("Upload session has no ticket yet")
        response = await self._api.complete_upload(self.ticket)
        try:
            self.video_id = extract_video_id(response.headers.get('Location'))
        except CompletionError as e:
            e.error_code = response.status
            raise
        self.state = SessionState.COMPLETED
        logger.info(f"Upload of {self.file_path.name} completed as video {self.video_id}")
        return self.video_id

    async def run(self) -> str:
        """
        Drive the session from ticket to completion.

        Returns:
            The video id

        Raises:
            UploadStalledError: If max_stalled_attempts consecutive passes
                confirm no new bytes
        """
        start_time = time.time()
        if self.ticket is None:
            await self.acquire_ticket()

        stalled = 0
        limit = self._settings.max_stalled_attempts
        while not self.progress.is_complete:
            before = self.bytes_confirmed
            await self.transfer()
            await self.verify()

            if self.bytes_confirmed > before:
                stalled = 0
                continue
            stalled += 1
            logger.warning(
                f"Transfer attempt {self.attempts} made no progress "
                f"({self.bytes_confirmed}/{self.total_bytes} bytes)"
            )
            if limit is not None and stalled >= limit:
                raise UploadStalledError(
                    f"No progress after {stalled} consecutive attempts "
                    f"at {self.bytes_confirmed}/{self.total_bytes} bytes",
                    self.bytes_confirmed
                )

        video_id = await self.complete()
        elapsed = time.time() - start_time
        logger.debug(
            f"Session finished in {elapsed:.2f}s: {self.attempts} attempts, "
            f"{self.verifications} verifications"
        )
        return video_id
