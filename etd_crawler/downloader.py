"""HTTP fetcher shared by the page loop and the document workers."""

import logging
from typing import Optional

import httpx

from .config import DownloadConfig
from .errors import TransportError

logger = logging.getLogger("etd_crawler")


class Downloader:
    def __init__(self, config: DownloadConfig,
                 transport: Optional[httpx.BaseTransport] = None):
        self.config = config
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    @property
    def client(self) -> httpx.Client:
        if self._client is None or self._client.is_closed:
            if self.config.ignore_cert:
                logger.warning("TLS certificate verification is disabled")
            self._client = httpx.Client(
                timeout=httpx.Timeout(self.config.timeout, connect=self.config.connect_timeout),
                follow_redirects=True,
                headers={"User-Agent": self.config.user_agent},
                verify=not self.config.ignore_cert,
                transport=self._transport,
            )
        return self._client

    def close(self):
        if self._client and not self._client.is_closed:
            self._client.close()

    def fetch(self, url: str) -> bytes:
        """Fetch a resource and return its body.

        Raises TransportError on connection/TLS failures and on any status
        other than 200.
        """
        logger.info(f"Fetching from {url}")
        try:
            resp = self.client.get(url)
        except httpx.HTTPError as e:
            raise TransportError(url, cause=e) from e

        if resp.status_code != 200:
            raise TransportError(url, status_code=resp.status_code)
        return resp.content
