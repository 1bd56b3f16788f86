"""
Handles downloading remote media files over HTTP so they can be inspected locally.
"""

import asyncio
import logging
import os

import aiofiles
import aiohttp
from rich.progress import Progress, TaskID

from forgecast.exceptions import DownloadError

log = logging.getLogger(__name__)


class Downloader:
    """A small streaming downloader with retry logic and progress reporting."""

    CHUNK_SIZE = 262144  # 256 KB

    def __init__(self, max_attempts: int = 3, base_delay: float = 1.5):
        self.max_attempts = max_attempts
        self.base_delay = base_delay

    def _create_session(self) -> aiohttp.ClientSession:
        timeout = aiohttp.ClientTimeout(total=None, sock_connect=15, sock_read=90)
        return aiohttp.ClientSession(timeout=timeout)

    async def download_file(
        self,
        url: str,
        destination_path: str,
        progress: Progress | None = None,
        task_id: TaskID | None = None,
    ) -> int:
        """
        Downloads a file from a URL, updating a Rich Progress task if provided.

        Returns:
            The number of bytes written.

        Raises:
            DownloadError: If every attempt fails.
        """
        last_exception: Exception | None = None
        async with self._create_session() as session:
            for attempt in range(1, self.max_attempts + 1):
                try:
                    return await self._stream_to_file(
                        session, url, destination_path, progress, task_id
                    )
                except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                    last_exception = e
                    log.debug(
                        f"Download attempt {attempt}/{self.max_attempts} for "
                        f"'{os.path.basename(destination_path)}' failed: {e}. Retrying..."
                    )
                    if attempt < self.max_attempts:
                        await asyncio.sleep(self.base_delay * (2 ** (attempt - 1)))

        raise DownloadError(f"Download failed: {last_exception}") from last_exception

    async def _stream_to_file(
        self,
        session: aiohttp.ClientSession,
        url: str,
        destination_path: str,
        progress: Progress | None,
        task_id: TaskID | None,
    ) -> int:
        async with session.get(url, allow_redirects=True) as response:
            response.raise_for_status()

            if progress is not None and task_id is not None:
                total = response.headers.get("Content-Length")
                progress.update(task_id, total=int(total) if total else None)

            bytes_downloaded = 0
            async with aiofiles.open(destination_path, "wb") as f:
                async for chunk in response.content.iter_chunked(self.CHUNK_SIZE):
                    await f.write(chunk)
                    bytes_downloaded += len(chunk)
                    if progress is not None and task_id is not None:
                        progress.update(task_id, completed=bytes_downloaded)
            return bytes_downloaded
