# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Package pioneer_avr provides a command-line tool and API for controlling
Pioneer receivers via their telnet control protocol and web interface.
"""

from .version import __version__

from .pkg_logging import logger

from .internal_types import Jsonable, JsonableDict

from .exceptions import PioneerAvrError, TransportError, ResponseTimeoutError, ProtocolError

from .constants import DEFAULT_PORT, DEFAULT_TIMEOUT, RESPONSE_TIMEOUT, DEFAULT_MODEL_NAME

from .client import (
    PioneerAvrClient,
    resolve_receiver_tcp_host,
    PioneerAvrConnector,
    TcpPioneerAvrConnector,
    PioneerAvrClientConfig,
    PioneerAvrWebInterface,
    ReceiverState,
    InputDescriptor,
    InputRegistry,
    pioneer_avr_transport_connect,
    pioneer_avr_connect,
  )

from .protocol import (
    ReceiverModel,
    InputSourceType,
    AvrResponse,
    ResponseKind,
    models,
    parse_response,
  )

from .util import (
    full_class_name,
    full_name_of_class,
    error_jsonable,
)
