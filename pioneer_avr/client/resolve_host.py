# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Pioneer receiver host IP/Port resolver.

Resolves the various host specifier forms (bare host, host:port, tcp://...)
together with the configured defaults into a receiver address and port.
"""

from __future__ import annotations

from ..internal_types import *
from ..exceptions import PioneerAvrError

from .client_config import PioneerAvrClientConfig

def resolve_receiver_tcp_host(
        host: Optional[str]=None,
        default_port: Optional[int]=None,
        config: Optional[PioneerAvrClientConfig]=None,
      ) -> HostAndPort:
    """Resolves a receiver host string into a TCP/IP hostname and port.

        Args:
            host: The hostname or IPV4 address of the receiver.
                    May optionally be prefixed with "tcp://".
                    May be suffixed with ":<port>" to specify a
                    non-default port, which will override the default_port argument.
                    If None, the default host in config is used.
            default_port: The default TCP/IP port number to use. If None, the port
                    will be taken from the config.

        Returns:
            A tuple of (hostname: str, port: int).
    """
    config = PioneerAvrClientConfig(
        default_host=host,
        default_port=default_port,
        base_config=config
      )
    host = config.default_host
    if host is None:
        raise PioneerAvrError("No receiver host specified (set PIONEER_AVR_HOST or pass a host)")

    if host.startswith('tcp://'):
        host = host[6:]
    elif '/' in host:
        raise PioneerAvrError(f"Invalid host specifier for TCP transport: '{host}'")

    if ':' in host:
        host, port_str = host.rsplit(':', 1)
        try:
            port = int(port_str)
        except ValueError as e:
            raise PioneerAvrError(f"Invalid port in host specifier: '{config.default_host}'") from e
    else:
        port = config.default_port

    if host == '':
        raise PioneerAvrError(f"Empty hostname in host specifier: '{config.default_host}'")

    return (host, port)
