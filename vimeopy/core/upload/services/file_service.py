"""
File validation and reading services.

Single Responsibility: Each class handles one specific task.
"""
from pathlib import Path
from typing import AsyncIterator, Optional, Tuple, Union
import logging
import aiofiles

from ..protocols import ProgressCallback

DEFAULT_BUFFER_SIZE = 1024 * 1024


class FileValidator:
    """
    Validates files before upload.

    Responsibilities:
    - Check file existence
    - Verify file is not a directory
    - Get file size
    """

    def validate(self, file_path: Union[str, Path]) -> Tuple[Path, int]:
        """
        Validate a file for upload.

        Args:
            file_path: Path to the file

        Returns:
            Tuple of (validated Path, file size in bytes)

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If path is not a regular file
        """
        path = Path(file_path) if isinstance(file_path, str) else file_path

        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        if not path.is_file():
            raise ValueError(f"Path is not a file: {path}")

        file_size = path.stat().st_size

        return path, file_size


class AsyncFileReader:
    """
    Asynchronous streaming file reader.

    Uses aiofiles for non-blocking I/O. The file is opened once per pass
    and closed when the generator finishes or is closed, including on error.
    """

    def __init__(self, buffer_size: int = DEFAULT_BUFFER_SIZE):
        """
        Initialize file reader.

        Args:
            buffer_size: Bytes read per buffer
        """
        if buffer_size <= 0:
            raise ValueError("Buffer size must be positive")
        self.buffer_size = buffer_size
        self._logger = logging.getLogger('vimeopy.upload.file')

    async def iter_chunks(
        self,
        file_path: Path,
        offset: int = 0,
        progress: Optional[ProgressCallback] = None,
        total_bytes: Optional[int] = None
    ) -> AsyncIterator[bytes]:
        """
        Stream a file from offset to EOF.

        The progress callback runs once the consumer has taken a buffer and
        asked for the next one, with the bytes handed out in this pass.

        Args:
            file_path: File to read
            offset: First byte to read
            progress: Optional (bytes_sent, total_bytes) callback
            total_bytes: Total reported to progress (defaults to file size)

        Yields:
            Buffers of at most buffer_size bytes
        """
        sent = 0
        async with aiofiles.open(file_path, 'rb') as f:
            if total_bytes is None:
                total_bytes = await f.seek(0, 2)
            await f.seek(offset)
            self._logger.debug(f"Streaming {file_path} from offset {offset}")
            while True:
                data = await f.read(self.buffer_size)
                if not data:
                    break
                yield data
                sent += len(data)
                if progress:
                    progress(sent, total_bytes)
        self._logger.debug(f"Streamed {sent} bytes of {file_path}")
