"""
Streaming downloader that counts and discards response bodies.
"""

import asyncio
import logging

import aiohttp

from common.deadline import Deadline
from common.errors import DeadlineExceeded, TransportError
from configuration import DOWNLOAD_CHUNK_SIZE
from systems.base import HTTPSystem

logger = logging.getLogger(__name__)


class StreamingDownloader:
    """Downloads a URL once, keeping only the number of bytes received."""

    def __init__(self, system: HTTPSystem, chunk_size: int = None):
        self.system = system
        self.chunk_size = chunk_size if chunk_size is not None else DOWNLOAD_CHUNK_SIZE

    async def fetch(self, deadline: Deadline, url: str) -> int:
        """Stream the body of ``url`` to nowhere until it ends or the deadline hits.

        Args:
            deadline: Shared measurement window
            url: Endpoint to download from

        Returns:
            Number of body bytes received

        Raises:
            DeadlineExceeded: If the window closed mid-transfer (carries the partial count)
            TransportError: On any other network failure
        """
        if deadline.expired():
            raise DeadlineExceeded(0)

        received = 0

        async def stream():
            nonlocal received
            session = self.system.require_session()
            async with session.get(url, headers={"User-Agent": self.system.user_agent}) as response:
                if response.status >= 400:
                    logger.debug(f"{url} answered with status {response.status}, counting body anyway")
                async for chunk in response.content.iter_chunked(self.chunk_size):
                    received += len(chunk)

        try:
            await asyncio.wait_for(stream(), timeout=deadline.remaining())
        except aiohttp.ServerTimeoutError as e:
            # Socket-level timeout, also a TimeoutError subclass but not the window closing
            raise TransportError(url, str(e) or "timed out", received) from e
        except asyncio.TimeoutError as e:
            raise DeadlineExceeded(received) from e
        except aiohttp.ClientError as e:
            raise TransportError(url, str(e) or type(e).__name__, received) from e

        return received
