# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Constants used by pioneer_avr"""

DEFAULT_PORT = 23
"""The listen port number used by the receiver for TCP/IP (telnet) control."""

DEFAULT_TIMEOUT = 2.0
"""The default timeout for TCP/IP write operations, in seconds."""

RESPONSE_TIMEOUT = 5.0
"""The default time to wait for the single response line to a command, in seconds."""

CONNECT_TIMEOUT = 15.0
"""The timeout for connecting to the receiver over TCP/IP, in seconds."""

CONNECT_RETRY_INTERVAL = 1.0
"""The interval between connection attempts over TCP/IP, in seconds."""

WEB_TIMEOUT = 3.0
"""The timeout for requests to the receiver's web interface, in seconds."""

DEFAULT_MODEL_NAME = "VSX-1120K"
"""The receiver model assumed when none is configured."""
