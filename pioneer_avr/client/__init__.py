# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Pioneer receiver client.

Provides a client for the Pioneer receiver telnet control protocol, with an
optional web interface path for power and input changes.
"""

from .resolve_host import resolve_receiver_tcp_host
from .client_config import PioneerAvrClientConfig
from .client_transport import PioneerAvrClientTransport
from .client_transport_transaction import PioneerAvrClientTransportTransaction
from .tcp_client_transport import TcpPioneerAvrClientTransport
from .connector import PioneerAvrConnector
from .tcp_connector import TcpPioneerAvrConnector
from .state import ReceiverState, InputDescriptor, InputRegistry
from .discovery import DiscoveryPhase, DiscoveryProgress, InputDiscovery
from .classifier import ResponseClassifier, ClassifiedResponse
from .dispatcher import CommandDispatcher, PendingRequest
from .web_interface import PioneerAvrWebInterface
from .client_impl import PioneerAvrClient
from .simple import pioneer_avr_transport_connect, pioneer_avr_connect
