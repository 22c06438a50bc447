# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Pioneer receiver emulator session.

One asyncio.Protocol per telnet connection. Splits the incoming byte stream
into command lines and hands them to the emulator's request queue.
"""

from __future__ import annotations

import asyncio
from enum import Enum

from ..internal_types import *
from ..pkg_logging import logger
from ..protocol import ENCODING, RESPONSE_TERMINATOR

if TYPE_CHECKING:
    from .emulator_impl import PioneerAvrEmulator

IDLE_TIMEOUT = 300.0
"""Timeout for idle connections."""

class EmulatorSessionState(Enum):
    UNCONNECTED = 0
    READING_COMMAND = 1
    SHUTTING_DOWN = 2
    CLOSED = 3

class PioneerAvrEmulatorSession(asyncio.Protocol):
    session_id: int = -1
    emulator: PioneerAvrEmulator
    transport: Optional[asyncio.Transport] = None
    peer_name: str = "<unconnected>"
    description: str = "EmulatorSession(<unconnected>)"
    state: EmulatorSessionState = EmulatorSessionState.UNCONNECTED
    partial_data: bytes = b""
    transport_closed: bool = True
    idle_timer: Optional[asyncio.TimerHandle] = None

    def __init__(self, emulator: PioneerAvrEmulator):
        self.emulator = emulator
        self.session_id = emulator.alloc_session_id(self)
        self.description = f"EmulatorSession(id={self.session_id}, from=<unconnected>)"

    def write_line(self, line: str) -> None:
        if self.transport is None or self.transport_closed:
            logger.debug(f"EmulatorSession: Attempt to write to closed session {self.description}; ignored")
            return
        self.transport.write((line + RESPONSE_TERMINATOR).encode(ENCODING))

    def connection_made(self, transport: asyncio.BaseTransport):
        """Called when a connection is made."""
        assert isinstance(transport, asyncio.Transport)
        assert self.state == EmulatorSessionState.UNCONNECTED
        self.transport = transport
        self.transport_closed = False
        self.peer_name = transport.get_extra_info('peername')
        self.description = f"EmulatorSession(id={self.session_id}, from='{self.peer_name}')"
        logger.debug(f"EmulatorSession: Connection from {self.peer_name}")
        self.state = EmulatorSessionState.READING_COMMAND
        self._restart_idle_timer()

    def close(self) -> None:
        if not self.state in (EmulatorSessionState.CLOSED, EmulatorSessionState.SHUTTING_DOWN):
            self.state = EmulatorSessionState.SHUTTING_DOWN
            if self.idle_timer is not None:
                self.idle_timer.cancel()
                self.idle_timer = None
            if not self.transport_closed and not self.transport is None:
                self.transport_closed = True
                self.transport.close()
            self.state = EmulatorSessionState.CLOSED
            self.emulator.free_session_id(self.session_id)

    def _restart_idle_timer(self) -> None:
        if self.idle_timer is not None:
            self.idle_timer.cancel()
        self.idle_timer = asyncio.get_running_loop().call_later(
            IDLE_TIMEOUT,
            lambda: self._on_idle_read_timeout())

    def _on_idle_read_timeout(self) -> None:
        self.idle_timer = None
        if self.state == EmulatorSessionState.READING_COMMAND:
            logger.debug(f"{self}: Idle timeout")
            self.close()

    def data_received(self, data: bytes) -> None:
        """Called when some data is received. Commands end with CR, LF or CRLF."""
        try:
            self.partial_data += data.replace(b'\n', b'\r')
            while self.state == EmulatorSessionState.READING_COMMAND:
                i_eol = self.partial_data.find(b'\r')
                if i_eol < 0:
                    break
                line_bytes = self.partial_data[:i_eol]
                self.partial_data = self.partial_data[i_eol + 1:]
                if len(line_bytes) == 0:
                    continue
                self._restart_idle_timer()
                self.emulator.on_command_received(self, line_bytes.decode(ENCODING, errors='replace'))
        except BaseException as e:
            logger.exception(f"{self}: Exception while processing data: {e}")
            self.close()
            raise

    def connection_lost(self, exc: Optional[BaseException]) -> None:
        """Called when the connection is lost or closed."""
        logger.debug(f"{self}: Connection lost, exception={exc}; closing connection")
        self.close()

    def eof_received(self) -> bool:
        logger.debug(f"{self}: EOF received; closing connection")
        self.close()
        return True

    def __str__(self) -> str:
        return self.description

    def __repr__(self) -> str:
        return str(self)
