# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Pioneer receiver client abstract transport interface.

Provides a low-level abstract interface for sending command lines
to a Pioneer receiver and receiving the single response line to each.
Does not classify responses or keep any receiver state.

The protocol carries no request correlation ids, so a response can only be
matched to its command by program order; every exchange holds the
transaction lock from the write until its response line has been read.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod

from ..internal_types import *
from ..pkg_logging import logger

from .client_transport_transaction import PioneerAvrClientTransportTransaction

class PioneerAvrClientTransport(ABC):
    """Abstract base class for Pioneer receiver client transports."""

    @abstractmethod
    async def begin_transaction(self) -> None:
        """Acquires the transaction lock.

        Must be implemented by subclasses.
        """
        raise NotImplementedError()

    @abstractmethod
    async def end_transaction(self) -> None:
        """Releases the transaction lock.

        Must be implemented by subclasses.
        """
        raise NotImplementedError()

    def transaction(self) -> PioneerAvrClientTransportTransaction:
        """Returns an async context manager that while entered will
           hold the transaction lock for this transport and provide
           a safe send_message() method.

        Example:

           async with transport.transaction() as transaction:
               response1 = await transaction.send_message('?P')
               response2 = await transaction.send_message('?F')
        """
        return PioneerAvrClientTransportTransaction(self)

    @abstractmethod
    async def send_message_no_lock(self, command: str) -> str:
        """Sends a command line and reads exactly one response line.

        Returns the response line without its terminator.

        The caller must be holding the transaction lock. Ordinary users
        should use the transaction() context manager or call send_message()
        instead.

        Raises TransportError (or ResponseTimeoutError) on failure, after
        which the transport is shut down.

        Must be implemented by subclasses.
        """
        raise NotImplementedError()

    async def send_message(self, command: str) -> str:
        """Sends a command line and reads exactly one response line.

        A transaction lock is held during the exchange to ensure that only one
        command is awaiting a response at a time.
        """
        async with self.transaction() as transaction:
            return await transaction.send_message(command)

    @abstractmethod
    def is_shutting_down(self) -> bool:
        """Returns True if the transport is shutting down or closed."""
        raise NotImplementedError()

    @abstractmethod
    async def shutdown(self, exc: Optional[BaseException] = None) -> None:
        """Shuts the transport down. Does not wait for the transport to finish
           closing. Safe to call from a callback.

        If exc is not None, sets the final status of the transport.

        Has no effect if the transport is already shutting down or closed.

        Does not raise an exception based on final status.

        Must be implemented by subclasses.
        """
        raise NotImplementedError()

    @abstractmethod
    async def wait(self) -> None:
        """Waits for complete shutdown/cleanup. Does not initiate shutdown
        Not safe to call from a callback.

        Returns immediately if the transport is already closed.
        Raises an exception if the final status of the transport is an exception.

        Must be implemented by a subclass.
        """
        raise NotImplementedError()

    # @overridable
    async def aclose(self, exc: Optional[BaseException] = None) -> None:
        """Closes the transport and waits for complete shutdown/cleanup.
        Not safe to call from a callback.

        If exc is not None, sets the final status of the transport.

        Has no effect if the transport is already closed.

        Raises an exception if the final status of the transport is an exception.

        May be overridden by subclasses. The default implementation simply calls
        shutdown() and then wait().
        """
        await self.shutdown(exc)
        await self.wait()

    async def __aenter__(self) -> PioneerAvrClientTransport:
        """Enters a context that will close the transport on exit."""
        return self

    async def __aexit__(
            self,
            exc_type: Optional[Type[BaseException]],
            exc: Optional[BaseException],
            tb: Optional[TracebackType],
          ) -> None:
        """Exits the context, closes the transport, and waits for complete shutdown/cleanup."""
        # Close the transport without raising an exception
        closer: asyncio.Task[None] = asyncio.ensure_future(self.aclose(exc))
        assert isinstance(closer, asyncio.Task)
        done, pending = await asyncio.wait([closer])
        assert len(done) == 1 and len(pending) == 0
        if exc is None:
            # raise the exception from the transport if there is one
            closer.result()
