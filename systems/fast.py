"""
fast.com endpoint discovery.

Scrapes the landing page for the bundled app script, pulls the API token out
of that script and asks the API for a list of download URLs.
"""

import json
import logging
import re
from typing import List
from urllib.parse import urlencode

from common.errors import NoURLsFoundError, ScriptNotFoundError, TokenNotFoundError
from configuration import FAST_API_URL, FAST_BASE_URL, URL_COUNT
from systems.base import HTTPSystem

logger = logging.getLogger(__name__)

SCRIPT_RE = re.compile(r"app-[\w.-]*?\.js")
TOKEN_RE = re.compile(r'token:"([A-Za-z]+)"')
URL_RE = re.compile(r'"url":"((?:[^"\\]|\\.)*)"')


class FastSystem(HTTPSystem):
    """URL source backed by fast.com."""

    def __init__(
        self,
        base_url: str = None,
        api_url: str = None,
        url_count: int = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.base_url = (base_url or FAST_BASE_URL).rstrip("/")
        self.api_url = api_url or FAST_API_URL
        self.url_count = url_count if url_count is not None else URL_COUNT

    async def get_script_url(self) -> str:
        """Find the app script referenced by the landing page."""
        body = await self.get_page(self.base_url)
        match = SCRIPT_RE.search(body)
        if match is None:
            raise ScriptNotFoundError(self.base_url)
        script_url = f"{self.base_url}/{match.group(0)}"
        logger.debug(f"trying to get fast api token from {script_url}")
        return script_url

    async def get_token(self) -> str:
        """Extract the API token from the app script."""
        script_url = await self.get_script_url()
        body = await self.get_page(script_url)
        match = TOKEN_RE.search(body)
        if match is None:
            logger.warning("no token found")
            raise TokenNotFoundError(script_url)
        token = match.group(1)
        logger.debug(f"token found: {token}")
        return token

    def build_api_url(self, token: str) -> str:
        query = urlencode({"https": "true", "token": token, "urlCount": self.url_count})
        return f"{self.api_url}?{query}"

    async def list_endpoints(self) -> List[str]:
        """Return the download URLs handed out by the API, in API order.

        Raises:
            ExtractionError: If any scrape stage finds nothing
            ProviderError: If a provider page cannot be fetched
        """
        token = await self.get_token()
        api_url = self.build_api_url(token)
        logger.debug(f"getting url list from {api_url}")

        body = await self.get_page(api_url)
        urls = []
        for raw in URL_RE.findall(body):
            # Values are JSON string literals, decode their escapes
            url = json.loads(f'"{raw}"')
            logger.debug(f"got url: {url}")
            urls.append(url)

        if not urls:
            raise NoURLsFoundError(api_url)
        return urls
