# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Pioneer receiver TCP/IP client connector.

Creates TcpPioneerAvrClientTransport connections to a receiver's telnet port.
"""

from __future__ import annotations

from ..internal_types import *
from ..exceptions import PioneerAvrError
from .connector import PioneerAvrConnector
from .client_transport import PioneerAvrClientTransport
from .client_config import PioneerAvrClientConfig
from .resolve_host import resolve_receiver_tcp_host
from .tcp_client_transport import TcpPioneerAvrClientTransport

class TcpPioneerAvrConnector(PioneerAvrConnector):
    """Pioneer receiver TCP/IP client transport connector."""

    config: PioneerAvrClientConfig

    def __init__(
            self,
            host: Optional[str]=None,
            port: Optional[int]=None,
            timeout_secs: Optional[float]=None,
            config: Optional[PioneerAvrClientConfig]=None,
          ) -> None:
        """Creates a connector for a receiver that is reachable over TCP/IP.

              Args:
                host: The hostname or IPV4 address of the receiver.
                      May optionally be prefixed with "tcp://".
                      May be suffixed with ":<port>" to specify a
                      non-default port, which will override the port argument.
                      If None, the host will be taken from the
                        PIONEER_AVR_HOST environment variable.
                port: The default TCP/IP port number to use. If None, the port
                      will be taken from PIONEER_AVR_PORT, or the telnet
                      port (23) if that is not set.
                timeout_secs: The write timeout for the transport.
                config: A PioneerAvrClientConfig object that specifies
                        the default host, port, etc to use.
                        If None, a default config will be created.
        """
        super().__init__()
        self.config = PioneerAvrClientConfig(
            default_host=host,
            default_port=port,
            timeout_secs=timeout_secs,
            base_config=config
          )
        host = self.config.default_host
        if host is None:
            raise PioneerAvrError("No receiver host specified and PIONEER_AVR_HOST is not set")
        if '://' in host and not host.startswith('tcp://'):
            raise PioneerAvrError(f"Invalid host protocol specifier for TCP transport: '{host}'")

    @property
    def host(self) -> str:
        """The bare receiver host, without scheme or port."""
        return resolve_receiver_tcp_host(config=self.config)[0]

    # @abstractmethod
    async def connect(self) -> PioneerAvrClientTransport:
        """Create and connect a TCP/IP client transport for the receiver
           associated with this connector.
        """
        transport = TcpPioneerAvrClientTransport(config=self.config)
        await transport.connect()
        # on error, the transport will be shut down, and no further interaction is possible
        return transport

    def __str__(self) -> str:
        return f"TcpPioneerAvrConnector(host='{self.config.default_host}', port={self.config.default_port})"

    def __repr__(self) -> str:
        return str(self)
