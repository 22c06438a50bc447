# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Pioneer receiver TCP/IP client transport.

Provides an implementation of PioneerAvrClientTransport over a TCP/IP
(telnet) socket.
"""

from __future__ import annotations

import time
import asyncio
from asyncio import Future

from ..internal_types import *
from ..exceptions import PioneerAvrError, TransportError, ResponseTimeoutError
from ..pkg_logging import logger
from ..protocol import ENCODING, COMMAND_TERMINATOR

from .client_config import PioneerAvrClientConfig

from .client_transport import PioneerAvrClientTransport

from .resolve_host import resolve_receiver_tcp_host

class TcpPioneerAvrClientTransport(PioneerAvrClientTransport):
    """Pioneer receiver TCP/IP client transport."""

    reader: Optional[asyncio.StreamReader] = None
    writer: Optional[asyncio.StreamWriter] = None
    config: PioneerAvrClientConfig
    resolved_host: str
    resolved_port: int
    final_status: Future[None]
    reader_closed: bool = False
    writer_closed: bool = False

    _transaction_lock: asyncio.Lock
    """A mutex to ensure that only one command is awaiting its response at a time;
    this allows multiple callers to use the same transport without worrying
    about mixing up response lines."""

    def __init__(
            self,
            host: Optional[str]=None,
            *,
            config: Optional[PioneerAvrClientConfig]=None,
          ) -> None:
        """Initializes the transport. Does not connect; call connect()."""
        super().__init__()
        self.config = PioneerAvrClientConfig(
            default_host=host,
            base_config=config
          )
        self.resolved_host, self.resolved_port = resolve_receiver_tcp_host(config=self.config)
        self.final_status = asyncio.get_event_loop().create_future()
        self._transaction_lock = asyncio.Lock()

    @property
    def host(self) -> str:
        """Returns the resolved TCP/IP host."""
        return self.resolved_host

    @property
    def port(self) -> int:
        """Returns the resolved TCP/IP port."""
        return self.resolved_port

    @property
    def timeout_secs(self) -> float:
        """Returns the write timeout in seconds."""
        return self.config.timeout_secs

    @property
    def response_timeout_secs(self) -> float:
        """Returns the response timeout in seconds."""
        return self.config.response_timeout_secs

    # @abstractmethod
    def is_shutting_down(self) -> bool:
        """Returns True if the transport is shutting down or closed."""
        return self.final_status.done()

    # @abstractmethod
    async def begin_transaction(self) -> None:
        """Acquires the transaction lock.
        """
        await self._transaction_lock.acquire()

    # @abstractmethod
    async def end_transaction(self) -> None:
        """Releases the transaction lock.
        """
        self._transaction_lock.release()

    async def _read_response_line(self) -> str:
        """Reads a single response line from the receiver, with timeout (nonlocking).

        Blank lines are skipped. The returned line has its terminator removed.

        On error, the transport will be shut down, and no further interaction is possible.
        """
        assert self.reader is not None

        deadline = time.monotonic() + self.response_timeout_secs
        try:
            while True:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise asyncio.TimeoutError()
                line_bytes = await asyncio.wait_for(self.reader.readline(), remaining)
                logger.debug(f"Read line bytes: {line_bytes!r}")
                if len(line_bytes) == 0:
                    raise TransportError("Connection closed by receiver while waiting for response")
                if line_bytes[-1] != 0x0a:
                    raise TransportError(f"Connection closed by receiver with partial response line: {line_bytes!r}")
                line = line_bytes.decode(ENCODING, errors='replace').rstrip('\r\n')
                if line.strip() != '':
                    return line
        except asyncio.TimeoutError as e:
            exc: BaseException = ResponseTimeoutError(
                f"{self}: No response from receiver within {self.response_timeout_secs} seconds")
            await self.shutdown(exc)
            raise exc from e
        except PioneerAvrError as e:
            await self.shutdown(e)
            raise
        except Exception as e:
            exc = TransportError(f"{self}: Error reading response: {e}")
            await self.shutdown(exc)
            raise exc from e

    async def _write_line(self, line: str) -> None:
        """Writes a command line plus terminator to the receiver, with timeout (nonlocking).

        On error, the transport will be shut down, and no further interaction is possible.
        """
        assert self.writer is not None

        try:
            data = (line + COMMAND_TERMINATOR).encode(ENCODING)
            logger.debug(f"Writing line bytes: {data!r}")
            self.writer.write(data)
            await asyncio.wait_for(self.writer.drain(), self.timeout_secs)
        except Exception as e:
            exc = TransportError(f"{self}: Error sending command {line!r}: {e}")
            await self.shutdown(exc)
            raise exc from e

    # @abstractmethod
    async def send_message_no_lock(self, command: str) -> str:
        """Sends a command line and reads exactly one response line.

        The caller must be holding the transaction lock. Ordinary users
        should use the transaction() context manager or call send_message()
        instead.
        """
        if self.is_shutting_down() or self.writer is None:
            raise TransportError(f"{self}: Transport is not connected")
        await self._write_line(command)
        return await self._read_response_line()

    # @abstractmethod
    async def shutdown(self, exc: Optional[BaseException] = None) -> None:
        """Shuts the transport down. Does not wait for the transport to finish
           closing. Safe to call from a callback or with transaction lock.

        If exc is not None, sets the final status of the transport.

        Has no effect if the transport is already shutting down or closed.

        Does not raise an exception based on final status.
        """
        if not self.final_status.done():
            if exc is not None:
                logger.debug(f"{self}: Shutting down with exception: {exc}")
                self.final_status.set_exception(exc)
            else:
                self.final_status.set_result(None)
        try:
            if not self.reader_closed:
                self.reader_closed = True
                if self.reader is not None:
                    self.reader.feed_eof()
        except Exception as e:
            logger.debug("Exception while closing reader", exc_info=True)
        finally:
            try:
                if not self.writer_closed:
                    self.writer_closed = True
                    if self.writer is not None:
                        self.writer.close()
            except Exception as e:
                logger.debug("Exception while closing writer", exc_info=True)

    # @abstractmethod
    async def wait(self) -> None:
        """Waits for complete shutdown/cleanup. Does not initiate shutdown.
        Not safe to call from a callback.

        Returns immediately if the transport is already closed.
        Raises an exception if the final status of the transport is an exception.
        """
        try:
            if self.writer is not None:
                await self.writer.wait_closed()
        except Exception as e:
            logger.debug("Exception while waiting for writer to close", exc_info=True)
            await self.shutdown(e)
        finally:
            if not self.final_status.done():
                await self.shutdown()
        await self.final_status

    # @override
    async def __aenter__(self) -> TcpPioneerAvrClientTransport:
        """Enters a context that will close the transport on exit."""
        return self

    async def connect(self) -> None:
        """Connect to the receiver, with timeout and retry on refused connections.
        """
        try:
            async with self._transaction_lock:
                try:
                    assert self.reader is None and self.writer is None
                    logger.debug(f"Connecting to receiver at {self.host}:{self.port}")
                    connect_end_time = time.monotonic() + self.config.connect_timeout_secs
                    while True:
                        next_retry_time = min(
                            connect_end_time,
                            time.monotonic() + self.config.connect_retry_interval_secs)
                        try:
                            wait_time = max(connect_end_time - time.monotonic(), 0.25)
                            logger.debug(f"Trying receiver connect to {self.host}:{self.port} with timeout={wait_time}")
                            self.reader, self.writer = await asyncio.wait_for(
                                asyncio.open_connection(self.host, self.port),
                                timeout=wait_time)
                            break
                        except ConnectionRefusedError as e:
                            # The receiver refuses connections while its telnet
                            # sessions are in use. We retry until the timeout expires.
                            if time.monotonic() >= connect_end_time:
                                raise TransportError(f"Connection to {self.host}:{self.port} refused") from e
                            retry_sleep_time = next_retry_time - time.monotonic()
                            if retry_sleep_time > 0:
                                logger.debug(f"Connection refused, sleeping for {retry_sleep_time} seconds")
                                await asyncio.sleep(retry_sleep_time)
                            logger.debug("Connection refused, retrying")
                        except asyncio.TimeoutError as e:
                            raise TransportError(f"Timeout connecting to receiver at {self.host}:{self.port}") from e
                        except OSError as e:
                            raise TransportError(f"Error connecting to receiver at {self.host}:{self.port}: {e}") from e
                    logger.info(f"{self}: connected")
                except BaseException as e:
                    await self.shutdown(e)
                    raise
        except BaseException as e:
            await self.aclose(e)
            raise

    def __str__(self) -> str:
        return f"TcpPioneerAvrClientTransport({self.host}:{self.port})"

    def __repr__(self) -> str:
        return str(self)
