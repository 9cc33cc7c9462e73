"""
Chunk transfer service.

Streams video bytes to the ticket's upload link and asks the server how
many of them it actually stored.
"""
from pathlib import Path
from typing import Optional
import logging
import time

from ..models import UploadTicket, VerificationResult
from ..protocols import FileReaderProtocol, ProgressCallback
from .file_service import AsyncFileReader
from ...api.config import UploadSettings
from ...api.errors import AuthenticationError, NetworkError, UnexpectedStatusError
from ...exceptions import VerificationError

SUCCESS_CODES = tuple(range(200, 300))


class ChunkUploader:
    """
    Handles the byte transfer of one upload ticket.

    Responsibilities:
    - Stream the file from a resume offset to the upload link
    - Absorb transfer failures (the verification probe decides progress)
    - Issue the verification probe and interpret its answer
    """

    def __init__(
        self,
        api_client,
        ticket: UploadTicket,
        file_reader: Optional[FileReaderProtocol] = None,
        settings: Optional[UploadSettings] = None
    ):
        """
        Initialize chunk uploader.

        Args:
            api_client: AsyncAPIClient (or anything with its execute())
            ticket: Upload ticket of this session
            file_reader: Streaming reader (AsyncFileReader by default)
            settings: Upload settings
        """
        self._api = api_client
        self._ticket = ticket
        self._settings = settings or UploadSettings()
        self._reader = file_reader or AsyncFileReader(self._settings.buffer_size)
        self._logger = logging.getLogger('vimeopy.upload.chunk')

    @property
    def upload_link(self) -> str:
        """Returns the upload URL."""
        return self._ticket.upload_link

    def build_transfer_headers(self, offset: int, total_bytes: int) -> dict:
        """
        Headers of a transfer PUT.

        Content-Length always states the full file size; Content-Range is
        only sent when resuming.
        """
        headers = {
            'Content-Length': str(total_bytes),
            'Content-Type': self._settings.content_type,
        }
        if offset > 0:
            headers['Content-Range'] = f"bytes {offset}-{total_bytes}/{total_bytes}"
        return headers

    async def transfer(
        self,
        file_path: Path,
        offset: int,
        total_bytes: int,
        progress: Optional[ProgressCallback] = None
    ) -> bool:
        """
        Stream file_path[offset:] to the upload link.

        Failures are logged and swallowed; only the verification probe
        knows how much arrived.

        Args:
            file_path: Video file
            offset: Server-confirmed resume offset
            total_bytes: File size
            progress: Called per buffer with bytes sent in this attempt

        Returns:
            True if the PUT completed with a 2xx status

        Raises:
            AuthenticationError: If the token is rejected and
                fail_fast_on_auth is set
        """
        headers = self.build_transfer_headers(offset, total_bytes)
        stream = self._reader.iter_chunks(file_path, offset, progress, total_bytes)

        remaining_mb = (total_bytes - offset) / (1024 * 1024)
        self._logger.debug(f"Transferring {remaining_mb:.2f} MB from offset {offset}")
        transfer_start = time.time()

        try:
            await self._api.execute('PUT', self.upload_link, headers, stream, SUCCESS_CODES)
        except AuthenticationError as e:
            if self._settings.fail_fast_on_auth:
                self._logger.error(f"Upload rejected, credential not accepted: {e}")
                raise
            self._logger.warning(f"Transfer rejected from offset {offset}: {e}")
            return False
        except (NetworkError, UnexpectedStatusError, OSError) as e:
            elapsed = time.time() - transfer_start
            self._logger.warning(
                f"Transfer from offset {offset} interrupted after {elapsed:.2f}s: {e}"
            )
            return False
        finally:
            # File handle must be closed before verification
            await stream.aclose()

        elapsed = time.time() - transfer_start
        speed = (remaining_mb / elapsed) if elapsed > 0 else 0
        self._logger.debug(f"Transfer pass finished in {elapsed:.2f}s ({speed:.2f} MB/s)")
        return True

    async def verify(self, total_bytes: int) -> VerificationResult:
        """
        Ask the server how many bytes it holds.

        Sends a zero-length PUT with 'Content-Range: bytes */*'. A non-2xx
        answer with a Range header is the expected outcome; a 2xx answer
        means everything was received.

        Args:
            total_bytes: File size

        Returns:
            VerificationResult

        Raises:
            AuthenticationError: On 401/403
            VerificationError: If the answer carries no usable Range header
        """
        headers = {
            'Content-Length': '0',
            'Content-Range': 'bytes */*',
        }
        response = await self._api.execute('PUT', self.upload_link, headers, None, None)

        if response.ok:
            self._logger.debug(f"Verification answered {response.status}, upload complete")
            return VerificationResult.complete(total_bytes, response.status)

        if response.status in AuthenticationError.AUTH_STATUSES:
            raise AuthenticationError(
                'PUT', self.upload_link, response.status, (308,), response.body
            )

        range_header = response.headers.get('Range')
        if range_header is None:
            raise VerificationError(
                f"Verification answered {response.status} without a Range header",
                None,
                response.status
            )

        result = VerificationResult.from_range(range_header, response.status)
        self._logger.debug(
            f"Verification answered {response.status}, Range {range_header!r} "
            f"-> {result.bytes_confirmed} bytes"
        )
        return result
