# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Pioneer receiver web interface.

Some receiver firmware only honors power and input changes sent through its
built-in web interface, while status queries keep working on the telnet
control channel. A single probe at startup decides which path is used.
"""

from __future__ import annotations

import httpx

from ..internal_types import *
from ..constants import WEB_TIMEOUT
from ..exceptions import TransportError
from ..pkg_logging import logger

STATUS_PATH = '/StatusHandler.asp'
EVENT_HANDLER_PATH = '/EventHandler.asp'
EVENT_HANDLER_PARAM = 'WebToHostItem'

class PioneerAvrWebInterface:
    """HTTP actuation path for receivers with a web interface."""
    host: str
    timeout_secs: float
    enabled: bool = False
    """True once the status endpoint has answered 200."""
    probed: bool = False

    _http_transport: Optional[httpx.AsyncBaseTransport]

    def __init__(
            self,
            host: str,
            timeout_secs: float=WEB_TIMEOUT,
            http_transport: Optional[httpx.AsyncBaseTransport]=None,
          ) -> None:
        """Args:
             host: The receiver hostname or IP address (no port).
             timeout_secs: Timeout for each HTTP request.
             http_transport: An optional httpx transport, e.g. httpx.MockTransport.
        """
        self.host = host
        self.timeout_secs = timeout_secs
        self._http_transport = http_transport

    @property
    def status_url(self) -> str:
        return f"http://{self.host}{STATUS_PATH}"

    def event_url(self, code: str) -> str:
        return f"http://{self.host}{EVENT_HANDLER_PATH}?{EVENT_HANDLER_PARAM}={code}"

    def _http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout_secs, transport=self._http_transport)

    async def probe(self) -> bool:
        """Checks once whether the web interface answers. Never raises for HTTP errors."""
        enabled = False
        try:
            async with self._http_client() as cli:
                response = await cli.get(self.status_url)
            enabled = response.status_code == 200
            logger.debug(f"Web interface probe {self.status_url} returned {response.status_code}")
        except httpx.HTTPError as e:
            logger.debug(f"Web interface probe {self.status_url} failed: {e}")
        self.enabled = enabled
        self.probed = True
        if enabled:
            logger.info('Web Interface enabled')
        return enabled

    async def send_event(self, code: str) -> None:
        """Sends a command code (e.g. "PO", "25FN") through the event handler.

        Raises TransportError if the request fails or is not answered with 2xx.
        """
        url = self.event_url(code)
        logger.debug(f"Send web command : {code}")
        try:
            async with self._http_client() as cli:
                response = await cli.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise TransportError(f"Web interface command {code!r} failed: {e}") from e

    def __str__(self) -> str:
        return f"PioneerAvrWebInterface({self.host}, enabled={self.enabled})"

    def __repr__(self) -> str:
        return str(self)
