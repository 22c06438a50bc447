# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Pioneer receiver client.

The high-level API used by accessory layers (CLI, REST server, home automation
glue): input discovery, status accessors that always round-trip to the
receiver, and power/input control over either the telnet control channel or
the receiver's web interface.
"""

from __future__ import annotations

import asyncio
import inspect

from ..internal_types import *
from ..exceptions import PioneerAvrError, ProtocolError
from ..pkg_logging import logger
from ..protocol import (
    ReceiverModel,
    ResponseKind,
    CMD_POWER_QUERY,
    CMD_POWER_ON,
    CMD_POWER_OFF,
    CMD_INPUT_QUERY,
    CMD_VOLUME_QUERY,
    CMD_MUTE_QUERY,
    validate_input_id,
    truncate_input_name,
    input_name_query_command,
    input_rename_command,
    input_set_command,
  )
from .client_config import PioneerAvrClientConfig
from .client_transport import PioneerAvrClientTransport
from .state import ReceiverState, InputRegistry, InputDescriptor
from .discovery import InputDiscovery, DiscoveryPhase
from .classifier import ResponseClassifier, ClassifiedResponse
from .dispatcher import CommandDispatcher
from .web_interface import PioneerAvrWebInterface

InputDiscoveredCallback = Callable[[int], Any]
"""Called with the ordinal of each discovered input. May return an awaitable."""

class PioneerAvrClient:
    """Pioneer receiver client."""

    transport: PioneerAvrClientTransport
    config: PioneerAvrClientConfig
    model: ReceiverModel
    state: ReceiverState
    inputs: InputRegistry
    discovery: InputDiscovery
    classifier: ResponseClassifier
    dispatcher: CommandDispatcher
    web_interface: Optional[PioneerAvrWebInterface]

    _web_probe_task: Optional[asyncio.Task[None]] = None

    def __init__(
            self,
            transport: PioneerAvrClientTransport,
            model: Optional[Union[ReceiverModel, str]]=None,
            web_interface: Optional[PioneerAvrWebInterface]=None,
            config: Optional[PioneerAvrClientConfig]=None,
          ):
        """Initialize a Pioneer receiver client on a connected transport.

        If web_interface is provided, start() probes it once, and power/input
        changes go through it when it answers.
        """
        self.config = PioneerAvrClientConfig(
            model=model,
            base_config=config,
          )
        self.transport = transport
        self.model = self.config.model
        self.state = ReceiverState()
        self.inputs = InputRegistry()
        self.discovery = InputDiscovery(self.model.input_ids)
        self.classifier = ResponseClassifier(self.state, self.inputs, self.model, self.discovery)
        self.dispatcher = CommandDispatcher(transport, self.classifier)
        self.web_interface = web_interface

    def start(self) -> None:
        """Starts the one-time web interface probe in the background, if there
           is a web interface. It runs independently of the control channel."""
        if self.web_interface is not None and self._web_probe_task is None:
            self._web_probe_task = asyncio.create_task(self._probe_web_interface())

    async def _probe_web_interface(self) -> None:
        assert self.web_interface is not None
        try:
            await self.web_interface.probe()
        except Exception as e:
            logger.warning(f"{self}: Web interface probe failed: {e}")

    async def wait_web_probe(self) -> None:
        """Waits for the web interface probe started by start(), if any."""
        if self._web_probe_task is not None:
            await self._web_probe_task

    @property
    def uses_web_interface(self) -> bool:
        return self.web_interface is not None and self.web_interface.enabled

    # Input discovery

    async def load_inputs(
            self,
            on_discovered: Optional[InputDiscoveredCallback]=None,
          ) -> List[InputDescriptor]:
        """Probes every candidate input id of the receiver model once.

        on_discovered is called with the ordinal of each input that exists.
        Probes that fail are logged and abandoned (the receiver will then
        never become ready). May only be called once per client.

        Returns the discovered descriptors, in discovery order.
        """
        self.discovery.begin()
        logger.debug('Discovering inputs')

        async def probe(input_id: str) -> Optional[InputDescriptor]:
            logger.debug(f"Trying Input key: {input_id}")
            try:
                classified = await self.dispatcher.execute(input_name_query_command(input_id))
            except PioneerAvrError as e:
                logger.error(f"{self}: Discovery probe for input {input_id} abandoned: {e}")
                return None
            if classified.kind != ResponseKind.INPUT_DISCOVERED:
                return None
            descriptor = self.inputs[classified.value]
            if on_discovered is not None:
                try:
                    result = on_discovered(classified.value)
                    if inspect.isawaitable(result):
                        await result
                except Exception as e:
                    logger.exception(f"{self}: on_discovered callback failed for input {input_id}: {e}")
            return descriptor

        # All probes are queued at once; the dispatcher sends them one at a time in order.
        results = await asyncio.gather(*(probe(input_id) for input_id in self.discovery.candidate_ids))
        return [descriptor for descriptor in results if descriptor is not None]

    async def discover_inputs(self, timeout: Optional[float]=None) -> List[InputDescriptor]:
        """Runs discovery if it has not been started, and waits until the
           client is ready. Returns every registered input descriptor."""
        if self.discovery.phase == DiscoveryPhase.IDLE:
            await self.load_inputs()
        await self.wait_until_ready(timeout)
        return list(self.inputs)

    @property
    def is_ready(self) -> bool:
        """True once every candidate input has been probed to a terminal outcome."""
        return self.discovery.is_ready

    async def wait_until_ready(self, timeout: Optional[float]=None) -> None:
        """Waits for input discovery to complete. The device must not be
           presented as operable before this returns."""
        await self.discovery.wait_ready(timeout)
        logger.debug(f"{self}: ready with {len(self.inputs)} inputs")

    # Status accessors; each one queries the receiver before answering

    async def _query(self, command: str, expected_kind: ResponseKind) -> ClassifiedResponse:
        """Sends a status query and raises ProtocolError unless it is answered
           with a response of the expected kind."""
        classified = await self.dispatcher.execute(command)
        if classified.kind != expected_kind:
            raise ProtocolError(
                f"Unexpected response to {command!r}: {classified.raw!r}", response=classified.raw)
        return classified

    async def power_status(self) -> Optional[bool]:
        """Queries the receiver and returns True if it is on."""
        return (await self._query(CMD_POWER_QUERY, ResponseKind.POWER)).value

    async def input_status(self) -> Optional[int]:
        """Queries the receiver and returns the ordinal of the current input,
           or None if the current input was not discovered."""
        return (await self._query(CMD_INPUT_QUERY, ResponseKind.INPUT)).value

    async def volume_status(self) -> Optional[int]:
        """Queries the receiver and returns the raw volume step."""
        return (await self._query(CMD_VOLUME_QUERY, ResponseKind.VOLUME)).value

    async def mute_status(self) -> Optional[bool]:
        """Queries the receiver and returns True if it is muted."""
        return (await self._query(CMD_MUTE_QUERY, ResponseKind.MUTE)).value

    # Control; failures are logged, not raised

    async def _actuate(self, code: str) -> None:
        try:
            if self.web_interface is not None and self.web_interface.enabled:
                await self.web_interface.send_event(code)
            else:
                await self.dispatcher.execute(code)
        except PioneerAvrError as e:
            logger.error(f"{self}: Command {code!r} abandoned: {e}")

    async def power_on(self) -> None:
        logger.debug('Power on')
        await self._actuate(CMD_POWER_ON)

    async def power_off(self) -> None:
        logger.debug('Power off')
        await self._actuate(CMD_POWER_OFF)

    async def set_input(self, input_id: str) -> None:
        """Switches the receiver to an input, by receiver input id (e.g. "25")."""
        logger.debug(f"Set input {input_id}")
        await self._actuate(input_set_command(input_id))

    async def rename_input(self, input_id: str, new_name: str) -> str:
        """Renames an input on the receiver, then updates the local descriptor.

        The name is truncated to 14 characters for both. Returns the
        truncated name.
        """
        validate_input_id(input_id)
        name = truncate_input_name(new_name)
        logger.debug(f"Rename input {input_id} to {name!r}")
        try:
            await self.dispatcher.execute(input_rename_command(input_id, name))
        except PioneerAvrError as e:
            logger.error(f"{self}: Rename of input {input_id} abandoned: {e}")
        descriptor = self.inputs.find(input_id)
        if descriptor is not None:
            descriptor.name = name
        return name

    async def _async_dispose(self) -> None:
        try:
            if self._web_probe_task is not None and not self._web_probe_task.done():
                self._web_probe_task.cancel()
                try:
                    await self._web_probe_task
                except asyncio.CancelledError:
                    pass
        finally:
            try:
                await self.dispatcher.aclose()
            finally:
                await self.transport.aclose()

    async def __aenter__(self) -> PioneerAvrClient:
        logger.debug(f"{self}: Entering async context manager")
        return self

    async def __aexit__(
            self,
            exc_type: type[BaseException],
            exc_val: Optional[BaseException],
            exc_tb: TracebackType
          ) -> None:
        logger.debug(f"{self}: Exiting async context manager, exc={exc_val}")
        await self._async_dispose()

    def __str__(self) -> str:
        return f"PioneerAvrClient(transport={self.transport})"

    def __repr__(self) -> str:
       return str(self)

    async def aclose(self) -> None:
       await self._async_dispose()
