# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Command dispatcher.

A single worker task drains a queue of pending requests, performing one
command/response exchange at a time and classifying each response before
taking the next request. Since the wire protocol has no correlation ids, this
strict alternation is the only thing that ties a response to its command.
Classification (and therefore every state mutation) happens on the worker.
"""

from __future__ import annotations

import asyncio

from ..internal_types import *
from ..exceptions import PioneerAvrError, TransportError, ProtocolError
from ..pkg_logging import logger
from ..protocol import ResponseKind

from .client_transport import PioneerAvrClientTransport
from .classifier import ResponseClassifier, ClassifiedResponse

class PendingRequest:
    """A queued command and the future its submitter is waiting on."""
    command: str
    future: asyncio.Future[ClassifiedResponse]

    def __init__(self, command: str) -> None:
        self.command = command
        self.future = asyncio.get_event_loop().create_future()

    def set_result(self, result: ClassifiedResponse) -> None:
        if not self.future.done():
            self.future.set_result(result)

    def set_exception(self, exc: BaseException) -> None:
        if not self.future.done():
            self.future.set_exception(exc)

    def __str__(self) -> str:
        return f"PendingRequest({self.command!r})"

    def __repr__(self) -> str:
        return str(self)

class CommandDispatcher:
    transport: PioneerAvrClientTransport
    classifier: ResponseClassifier
    in_flight: Optional[PendingRequest] = None
    """The request whose response is currently awaited, if any."""

    _queue: asyncio.Queue[Optional[PendingRequest]]
    _worker_task: Optional[asyncio.Task[None]] = None
    _closed: bool = False

    def __init__(self, transport: PioneerAvrClientTransport, classifier: ResponseClassifier) -> None:
        self.transport = transport
        self.classifier = classifier
        self._queue = asyncio.Queue()

    @property
    def is_closed(self) -> bool:
        return self._closed

    def _ensure_worker(self) -> None:
        if self._worker_task is None:
            self._worker_task = asyncio.create_task(self._run())

    async def execute(self, command: str) -> ClassifiedResponse:
        """Queues a command and waits for its classified response.

        Raises TransportError if the exchange failed, or ProtocolError if the
        response could not be classified.
        """
        if self._closed:
            raise TransportError(f"Dispatcher is closed; cannot send {command!r}")
        pending = PendingRequest(command)
        self._queue.put_nowait(pending)
        self._ensure_worker()
        return await pending.future

    async def send(self, command: str) -> str:
        """Queues a command and returns its raw response line, once classified."""
        classified = await self.execute(command)
        return classified.raw

    async def _exchange(self, pending: PendingRequest) -> None:
        command = pending.command
        logger.debug(f"Send command : {command}")
        try:
            raw = await self.transport.send_message(command)
        except PioneerAvrError as e:
            logger.warning(f"Command {command!r} failed: {e}")
            pending.set_exception(e)
            return
        except Exception as e:
            logger.warning(f"Command {command!r} failed: {e}")
            exc = TransportError(f"Command {command!r} failed: {e}")
            exc.__cause__ = e
            pending.set_exception(exc)
            return
        logger.debug(f"Receive data : {raw}")
        try:
            classified = self.classifier.classify(raw, command)
        except Exception as e:
            logger.exception(f"Error classifying response {raw!r}: {e}")
            pending.set_exception(ProtocolError(f"Error classifying response {raw!r}: {e}", response=raw))
            return
        if classified.kind == ResponseKind.UNRECOGNIZED:
            pending.set_exception(ProtocolError(
                f"Unrecognized response to {command!r}: {raw!r}", response=raw))
        else:
            pending.set_result(classified)

    async def _run(self) -> None:
        """Worker loop. Exits when it dequeues None."""
        while True:
            pending = await self._queue.get()
            try:
                if pending is None:
                    logger.debug("Dispatcher worker: Received EOF; exiting")
                    break
                if pending.future.done():
                    # submitter was cancelled before the command was sent
                    continue
                self.in_flight = pending
                try:
                    await self._exchange(pending)
                finally:
                    self.in_flight = None
            except asyncio.CancelledError:
                if pending is not None:
                    pending.set_exception(TransportError(f"Dispatcher cancelled while sending {pending.command!r}"))
                raise
            finally:
                self._queue.task_done()

    def _fail_queued(self) -> None:
        while True:
            try:
                pending = self._queue.get_nowait()
            except asyncio.QueueEmpty:
                break
            if pending is not None:
                pending.set_exception(TransportError(f"Dispatcher closed before sending {pending.command!r}"))
            self._queue.task_done()

    async def aclose(self) -> None:
        """Stops the worker after the in-flight exchange (if any) completes.
           Requests still queued fail with TransportError."""
        if self._closed:
            return
        self._closed = True
        self._fail_queued()
        if self._worker_task is not None:
            self._queue.put_nowait(None)
            try:
                await self._worker_task
            finally:
                self._worker_task = None

    def __str__(self) -> str:
        return f"CommandDispatcher(transport={self.transport})"

    def __repr__(self) -> str:
        return str(self)
