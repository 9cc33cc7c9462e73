"""
Picture (thumbnail) upload for an existing video.

Two modes:
- attach(): create a picture resource, PUT the image bytes, activate it
- set_time(): let the server grab the frame at a time offset
"""
import logging
from pathlib import Path
from typing import Awaitable, Callable, Optional, Union

from .models import PictureTicket
from .services import FileValidator, AsyncFileReader
from ..api.config import ActivationRetryConfig
from ..api.retry import FixedDelayRetryStrategy, RetryStrategy
from ..exceptions import ActivationTimeoutError, VimeoException

logger = logging.getLogger('vimeopy.upload.picture')

SUCCESS_CODES = tuple(range(200, 300))


class PictureSession:
    """
    Uploads and activates video thumbnails.

    Activation is retried with a fixed delay until the deadline of
    ActivationRetryConfig has passed, then ActivationTimeoutError is
    raised from the last failure.
    """

    def __init__(
        self,
        api_client,
        retry_config: Optional[ActivationRetryConfig] = None,
        clock: Optional[Callable[[], float]] = None,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
        file_reader: Optional[AsyncFileReader] = None
    ):
        self._api = api_client
        if retry_config is None:
            config = getattr(api_client, 'config', None)
            retry_config = getattr(config, 'activation', None) or ActivationRetryConfig()
        self._retry_config = retry_config
        self._clock = clock
        self._sleep = sleep
        self._file_reader = file_reader or AsyncFileReader()
        self._validator = FileValidator()

    def _create_retry_strategy(self) -> RetryStrategy:
        kwargs = {}
        if self._clock is not None:
            kwargs['clock'] = self._clock
        return FixedDelayRetryStrategy(
            delay=self._retry_config.delay,
            deadline=self._retry_config.deadline,
            sleep=self._sleep,
            **kwargs
        )

    async def attach(self, video_id: str, image_path: Union[str, Path]) -> PictureTicket:
        """
        Upload image_path and make it the active thumbnail of video_id.

        Args:
            video_id: Target video
            image_path: Image file (sent as-is)

        Returns:
            The picture ticket, marked active

        Raises:
            FileNotFoundError: If the image doesn't exist
            ActivationTimeoutError: If activation never succeeds in time
        """
        path, size = self._validator.validate(image_path)
        logger.info(f"Attaching picture {path.name} ({size} bytes) to video {video_id}")

        ticket = await self._api.create_picture(video_id)
        await self._transfer(ticket, path, size)
        await self.activate(ticket.uri)
        return PictureTicket(uri=ticket.uri, link=ticket.link, active=True)

    async def _transfer(self, ticket: PictureTicket, path: Path, size: int) -> bool:
        # Failures only get logged, activation tells whether the image arrived
        headers = {'Content-Length': str(size)}
        stream = self._file_reader.iter_chunks(path, 0, None, size)
        try:
            await self._api.execute('PUT', ticket.link, headers, stream, SUCCESS_CODES)
        except (VimeoException, OSError) as e:
            logger.warning(f"Picture transfer to {ticket.link} failed: {e}")
            return False
        finally:
            await stream.aclose()
        logger.debug(f"Picture bytes sent to {ticket.link}")
        return True

    async def activate(self, picture_uri: str) -> None:
        """
        Activate a picture, retrying until the deadline.

        Raises:
            ActivationTimeoutError: Chained to the last activation failure
        """
        strategy = self._create_retry_strategy()
        strategy.start()
        while True:
            try:
                await self._api.activate_picture(picture_uri)
            except VimeoException as e:
                if not strategy.should_retry(e):
                    raise ActivationTimeoutError(
                        f"Picture {picture_uri} not activated after "
                        f"{strategy.attempts} attempts in {strategy.elapsed:.1f}s: {e}",
                        strategy.attempts,
                        strategy.elapsed
                    ) from e
                logger.warning(
                    f"Activation attempt {strategy.attempts} of {picture_uri} failed "
                    f"({strategy.elapsed:.1f}s elapsed): {e}"
                )
                await strategy.wait_async()
                continue
            logger.info(
                f"Picture {picture_uri} activated after {strategy.elapsed:.1f}s "
                f"({strategy.attempts + 1} attempts)"
            )
            return

    async def set_time(self, video_id: str, time_offset: Union[int, float]) -> None:
        """Use the frame at time_offset seconds as the active thumbnail."""
        if time_offset < 0:
            raise ValueError("Time offset must not be negative")
        logger.info(f"Setting thumbnail of video {video_id} from {time_offset}s")
        await self._api.set_picture_time(video_id, time_offset)
