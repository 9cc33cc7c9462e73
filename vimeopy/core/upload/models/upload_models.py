"""
Data models for upload module.

Uses dataclasses for type-safe data structures.
"""
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from ...api.config import UploadSettings
from ...exceptions import VerificationError


class SessionState(Enum):
    """
    Upload session states.

    TRANSFERRING and VERIFYING alternate until every byte is confirmed.
    Failures are raised, never modeled as a state.
    """
    NOT_STARTED = 'not_started'
    TICKET_ACQUIRED = 'ticket_acquired'
    TRANSFERRING = 'transferring'
    VERIFYING = 'verifying'
    COMPLETED = 'completed'


@dataclass
class UploadProgress:
    """
    Server-confirmed upload progress.

    Attributes:
        total_bytes: Total file size
        bytes_confirmed: Offset the server reports as durably stored

    bytes_confirmed only changes through confirm(), i.e. after a
    verification exchange. Bytes written to the socket are not tracked here.
    """
    total_bytes: int
    bytes_confirmed: int = 0

    def confirm(self, offset: int) -> None:
        """
        Record a verified offset.

        Raises:
            VerificationError: If the offset goes backwards or past the end
        """
        if offset < self.bytes_confirmed:
            raise VerificationError(
                f"Server confirmed {offset} bytes after previously confirming "
                f"{self.bytes_confirmed}"
            )
        if offset > self.total_bytes:
            raise VerificationError(
                f"Server confirmed {offset} bytes of a {self.total_bytes} byte file"
            )
        self.bytes_confirmed = offset

    @property
    def remaining_bytes(self) -> int:
        return self.total_bytes - self.bytes_confirmed

    @property
    def percentage(self) -> float:
        """Returns confirmed progress as percentage."""
        if self.total_bytes == 0:
            return 100.0
        return (self.bytes_confirmed / self.total_bytes) * 100

    @property
    def is_complete(self) -> bool:
        """Returns True once the server holds every byte."""
        return self.bytes_confirmed == self.total_bytes


@dataclass(frozen=True)
class VerificationResult:
    """
    Outcome of a verification probe.

    A non-2xx answer carrying a Range header is a normal result here,
    not an error.

    Attributes:
        bytes_confirmed: Bytes the server holds
        status: HTTP status of the probe response
        range_header: Raw Range header (None for a 2xx answer)
    """
    bytes_confirmed: int
    status: int
    range_header: Optional[str] = None

    @classmethod
    def from_range(cls, range_header: str, status: int) -> 'VerificationResult':
        return cls(parse_range_header(range_header), status, range_header)

    @classmethod
    def complete(cls, total_bytes: int, status: int) -> 'VerificationResult':
        return cls(total_bytes, status, None)


def parse_range_header(value: Optional[str]) -> int:
    """
    Convert a Range header into the number of bytes stored.

    Accepts 'bytes=0-N' or '0-N' and returns N + 1.

    >>> parse_range_header('bytes=0-1048575')
    1048576

    Raises:
        VerificationError: If the header is missing or malformed
    """
    if not value or not value.strip():
        raise VerificationError("Verification response has no Range header", value)

    byte_range = value.strip()
    if '=' in byte_range:
        unit, _, byte_range = byte_range.partition('=')
        if unit.strip().lower() != 'bytes':
            raise VerificationError(f"Unsupported range unit in {value!r}", value)
    # Only the first range matters, the server stores a single prefix
    byte_range = byte_range.split(',', 1)[0].strip()

    if '-' not in byte_range:
        raise VerificationError(f"Malformed Range header {value!r}", value)

    start, _, end = byte_range.partition('-')
    try:
        int(start.strip() or '0')
        upper = int(end.strip())
    except ValueError:
        raise VerificationError(f"Malformed Range header {value!r}", value) from None

    if upper < 0:
        raise VerificationError(f"Malformed Range header {value!r}", value)
    return upper + 1


@dataclass
class UploadConfig:
    """
    Configuration for one video upload.

    Attributes:
        file_path: Path to the video file
        name: Title to set after completion ('' leaves it unset)
        description: Description to set after completion ('' leaves it unset)
        settings: Session settings (buffer size, content type, ...)
    """
    file_path: Path
    name: str = ''
    description: str = ''
    settings: Optional[UploadSettings] = None

    def __post_init__(self):
        """Validate and normalize config."""
        if isinstance(self.file_path, str):
            self.file_path = Path(self.file_path)
        self.name = self.name or ''
        self.description = self.description or ''

    @property
    def has_metadata(self) -> bool:
        return bool(self.name or self.description)


@dataclass(frozen=True)
class UploadResult:
    """
    Result of a successful upload.

    Attributes:
        video_id: Identifier assigned by Vimeo
        file_size: Size of the uploaded file
        attempts: Transfer passes needed
        verifications: Verification probes issued
        elapsed: Wall-clock seconds for the whole session
    """
    video_id: str
    file_size: int
    attempts: int = 1
    verifications: int = 1
    elapsed: float = 0.0

    @property
    def video_uri(self) -> str:
        return f"/videos/{self.video_id}"

    @property
    def link(self) -> str:
        """Public page of the video."""
        return f"https://vimeo.com/{self.video_id}"
