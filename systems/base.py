"""
Async base class for HTTP-backed systems sharing one client session.
"""

import logging
from typing import Optional

import aiohttp

from common.errors import ProviderError
from configuration import USER_AGENT

logger = logging.getLogger(__name__)


class HTTPSystem:
    """Async context manager owning the aiohttp session used for all requests."""

    def __init__(self, user_agent: str = None, session: Optional[aiohttp.ClientSession] = None):
        """Initialize the system.

        Args:
            user_agent: Client identifier sent with every request (default: from configuration)
            session: Existing session to reuse; it is not closed on exit
        """
        self.user_agent = user_agent or USER_AGENT
        self.session = session
        self._owns_session = session is None

    def _create_timeout(self) -> aiohttp.ClientTimeout:
        """No total timeout: downloads are bounded by the measurement deadline only."""
        return aiohttp.ClientTimeout(total=None, sock_connect=30)

    async def __aenter__(self):
        if self.session is None:
            self.session = aiohttp.ClientSession(
                headers={"User-Agent": self.user_agent},
                timeout=self._create_timeout(),
            )
            self._owns_session = True
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self._owns_session and self.session is not None:
            await self.session.close()
            self.session = None

    def require_session(self) -> aiohttp.ClientSession:
        if self.session is None:
            raise RuntimeError("HTTP session not initialized. Use async context manager.")
        return self.session

    async def get_page(self, url: str) -> str:
        """Fetch a page and return its body as text.

        Raises:
            ProviderError: On transport failure or a non-2xx status
        """
        session = self.require_session()
        try:
            async with session.get(url, headers={"User-Agent": self.user_agent}) as response:
                response.raise_for_status()
                return await response.text()
        except aiohttp.ClientError as e:
            logger.error(f"error getting page: {url}: {e}")
            raise ProviderError(f"error getting page {url}: {e}") from e
