# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Pioneer receiver simple client connection API.
"""

from __future__ import annotations

from ..internal_types import *
from .client_transport import PioneerAvrClientTransport
from .client_config import PioneerAvrClientConfig
from .client_impl import PioneerAvrClient
from .tcp_connector import TcpPioneerAvrConnector
from .web_interface import PioneerAvrWebInterface

async def pioneer_avr_transport_connect(
        host: Optional[str]=None,
        config: Optional[PioneerAvrClientConfig]=None
      ) -> PioneerAvrClientTransport:
    """Create and connect a transport for a Pioneer receiver.

    Args:
        host: The hostname or IPV4 address of the receiver.
                May optionally be prefixed with "tcp://".
                May be suffixed with ":<port>" to specify a
                non-default port.
                If None, the host will be taken from the
                PIONEER_AVR_HOST environment variable.
        config: A PioneerAvrClientConfig object that specifies
                the default host, port, etc. to use.
                If None, a default config will be created.
    """
    connector = TcpPioneerAvrConnector(host=host, config=config)
    return await connector.connect()

async def pioneer_avr_connect(
        host: Optional[str]=None,
        config: Optional[PioneerAvrClientConfig]=None
      ) -> PioneerAvrClient:
    """Create, connect and start a Pioneer receiver client.

    If the config enables the web probe, the client probes the receiver's web
    interface in the background. Input discovery is not started; call
    load_inputs() and then wait_until_ready().

    Args:
        host: The hostname or IPV4 address of the receiver, as for
              pioneer_avr_transport_connect().
        config: A PioneerAvrClientConfig object that specifies
                the default host, port, model, etc. to use.
                If None, a default config will be created.
    """
    connector = TcpPioneerAvrConnector(host=host, config=config)
    config = connector.config
    transport = await connector.connect()
    try:
        web_interface: Optional[PioneerAvrWebInterface] = None
        if config.web_probe:
            web_interface = PioneerAvrWebInterface(connector.host, timeout_secs=config.web_timeout_secs)
        client = PioneerAvrClient(
            transport=transport,
            web_interface=web_interface,
            config=config,
          )
        client.start()
    except BaseException:
        await transport.aclose()
        raise

    return client
