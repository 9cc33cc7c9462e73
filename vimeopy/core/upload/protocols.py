"""
Protocol definitions for upload module.

Defines interfaces (protocols) for dependency injection.
"""
from typing import AsyncIterator, Callable, Optional, Protocol, Union, runtime_checkable
from pathlib import Path


@runtime_checkable
class ProgressObserver(Protocol):
    """
    Protocol for upload progress observers.

    Called synchronously on the transferring coroutine, so implementations
    must return quickly.

    An observer may also define on_resume(offset, total_bytes), called at the
    start of every transfer attempt with the offset it resumes from.
    """

    def on_progress(self, bytes_sent: int, total_bytes: int) -> None:
        """
        Receive a progress tick.

        Args:
            bytes_sent: Bytes written so far in the current transfer attempt
            total_bytes: Total file size
        """
        ...


ProgressCallback = Callable[[int, int], None]
ProgressSink = Union[ProgressObserver, ProgressCallback]


def as_progress_callback(sink: Optional[ProgressSink]) -> Optional[ProgressCallback]:
    """Normalize an observer or a plain callable into a callable."""
    if sink is None:
        return None
    if isinstance(sink, ProgressObserver):
        return sink.on_progress
    return sink


def as_resume_callback(sink: Optional[ProgressSink]) -> Optional[ProgressCallback]:
    """The optional on_resume hook of an observer."""
    return getattr(sink, 'on_resume', None) if sink is not None else None


class FileReaderProtocol(Protocol):
    """
    Protocol for streaming file readers.
    """

    def iter_chunks(
        self,
        file_path: Path,
        offset: int = 0,
        progress: Optional[ProgressCallback] = None,
        total_bytes: Optional[int] = None
    ) -> AsyncIterator[bytes]:
        """
        Stream a file from offset in fixed-size buffers.

        Args:
            file_path: File to read
            offset: First byte to read
            progress: Called after each buffer with bytes yielded so far
            total_bytes: Total passed through to progress

        Returns:
            Async iterator of byte buffers
        """
        ...
