# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Pioneer receiver client transport transaction context manager.
"""

from __future__ import annotations

from ..internal_types import *
if TYPE_CHECKING:
    from .client_transport import PioneerAvrClientTransport

class PioneerAvrClientTransportTransaction():
    """A context manager that holds a transaction lock on a transport and allows one or
       more send_message() calls to be made with the lock held."""
    transport: PioneerAvrClientTransport
    context_entered: bool = False

    def __init__(self, transport: PioneerAvrClientTransport) -> None:
        self.transport = transport

    async def __aenter__(self) -> PioneerAvrClientTransportTransaction:
        """Enters a context that will release the transaction lock on exit."""
        assert not self.context_entered
        await self.transport.begin_transaction()
        self.context_entered = True
        return self

    async def __aexit__(
            self,
            exc_type: Optional[Type[BaseException]],
            exc: Optional[BaseException],
            tb: Optional[TracebackType],
          ) -> None:
        """Exits the context, releases the transaction lock."""
        assert self.context_entered
        self.context_entered = False
        await self.transport.end_transaction()

    async def send_message(self, command: str) -> str:
        """Sends a command line and reads its single response line.

        If the context has not been entered, the lock is held for just this
        one exchange.
        """
        if not self.context_entered:
            async with self:
                return await self.transport.send_message_no_lock(command)
        else:
            return await self.transport.send_message_no_lock(command)
