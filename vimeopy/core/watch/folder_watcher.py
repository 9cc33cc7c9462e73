"""
Single-pass folder watcher.

scan_once() uploads every video found in a check folder, attaches a
same-named .jpg as its thumbnail and moves both into a destination
folder. Scheduling the passes is left to the caller.
"""
import asyncio
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, List, Optional, Union

from ..logging import get_logger

logger = get_logger('vimeopy.watch')

VIDEO_EXTENSIONS = ('.avi', '.wmv', '.mov', '.mp4')
PICTURE_EXTENSION = '.jpg'


@dataclass
class WatchResult:
    """
    Outcome of one video processed by a scan.

    Attributes:
        video_path: Where the video ended up (inside dest_folder)
        video_id: Identifier assigned by Vimeo
        picture_path: Moved thumbnail, None when there was none
    """
    video_path: Path
    video_id: str
    picture_path: Optional[Path] = None


class FolderWatcher:
    """
    Uploads the videos of a folder, one pass at a time.

    Holds no state between passes: a file still in check_folder after a
    pass (because it failed) is simply picked up again by the next one.

    Example:
        >>> async with VimeoClient(token) as vimeo:
        ...     watcher = FolderWatcher(vimeo, "incoming", "done")
        ...     results = await watcher.scan_once()
    """

    def __init__(
        self,
        client,
        check_folder: Union[str, Path],
        dest_folder: Union[str, Path],
        picture_delay: float = 1.0,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None
    ):
        """
        Initialize folder watcher.

        Args:
            client: Started VimeoClient (needs upload() and set_picture())
            check_folder: Folder scanned for new videos
            dest_folder: Folder receiving processed files
            picture_delay: Seconds to wait between upload and thumbnail
            sleep: Awaitable sleep (asyncio.sleep by default)
        """
        self._client = client
        self.check_folder = Path(check_folder)
        self.dest_folder = Path(dest_folder)
        self.picture_delay = picture_delay
        self._sleep = sleep or asyncio.sleep

    @staticmethod
    def is_video(path: Path) -> bool:
        return path.is_file() and path.suffix.lower() in VIDEO_EXTENSIONS

    def find_videos(self) -> List[Path]:
        """Videos currently in the check folder, sorted by name."""
        if not self.check_folder.is_dir():
            raise NotADirectoryError(f"Check folder not found: {self.check_folder}")
        return sorted(p for p in self.check_folder.iterdir() if self.is_video(p))

    def find_picture(self, video: Path) -> Optional[Path]:
        """The .jpg sharing the video's stem (any case), if present."""
        for candidate in sorted(video.parent.iterdir()):
            if (
                candidate != video
                and candidate.is_file()
                and candidate.stem == video.stem
                and candidate.suffix.lower() == PICTURE_EXTENSION
            ):
                return candidate
        return None

    def _move(self, path: Path) -> Path:
        target = self.dest_folder / path.name
        shutil.move(str(path), str(target))
        logger.debug(f"Moved {path.name} to {self.dest_folder}")
        return target

    async def process(self, video: Path) -> WatchResult:
        """
        Upload one video, attach its picture and move both.

        The files are only moved after every remote call succeeded.
        """
        logger.info(f"Uploading {video.name}")
        video_id = await self._client.upload(video, name=video.stem)

        picture = self.find_picture(video)
        if picture is not None:
            await self._sleep(self.picture_delay)
            logger.info(f"Setting picture {picture.name} for video {video_id}")
            await self._client.set_picture(video_id, picture)

        self.dest_folder.mkdir(parents=True, exist_ok=True)
        moved_video = self._move(video)
        moved_picture = self._move(picture) if picture is not None else None
        logger.info(f"Processed {video.name} as video {video_id}")
        return WatchResult(moved_video, video_id, moved_picture)

    async def scan_once(self) -> List[WatchResult]:
        """
        Run one pass over the check folder.

        Returns:
            One WatchResult per uploaded video

        Raises:
            VimeoException: From the first failing video; files not yet
                processed stay in place
        """
        videos = self.find_videos()
        logger.debug(f"Found {len(videos)} videos in {self.check_folder}")
        results = []
        for video in videos:
            results.append(await self.process(video))
        return results
