# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Pioneer receiver emulator.

Provides a simple emulation of a Pioneer receiver's telnet control port,
answering the same command set the client uses.
"""

from __future__ import annotations

import asyncio

from ..internal_types import *
from ..pkg_logging import logger
from ..protocol import ReceiverModel, models, truncate_input_name
from ..protocol.constants import (
    INPUT_ID_LENGTH,
    CMD_POWER_QUERY,
    CMD_POWER_ON,
    CMD_POWER_OFF,
    CMD_INPUT_QUERY,
    CMD_VOLUME_QUERY,
    CMD_MUTE_QUERY,
    CMD_INPUT_NAME_QUERY_PREFIX,
    CMD_INPUT_NAME_SET_SEPARATOR,
    CMD_INPUT_SET_SUFFIX,
    RESP_POWER,
    RESP_INPUT,
    RESP_INPUT_NAME,
    RESP_INPUT_NOT_FOUND,
    RESP_VOLUME,
    RESP_MUTE,
    RESP_BAD_COMMAND,
  )
from ..constants import DEFAULT_PORT, DEFAULT_MODEL_NAME
from ..exceptions import PioneerAvrError

from .session import PioneerAvrEmulatorSession

DEFAULT_EMULATOR_INPUTS: Dict[str, str] = {
    '22': 'HDMI4',
    '25': 'BD',
  }
"""Inputs that exist on the emulated receiver, by id. Ids of the model that
   are missing here answer E06."""

class PioneerAvrEmulator(AsyncContextManager['PioneerAvrEmulator']):
    model: ReceiverModel
    bind_addr: str
    port: int
    sessions: Dict[int, PioneerAvrEmulatorSession]
    next_session_id: int = 0
    requests: asyncio.Queue[Optional[Tuple[PioneerAvrEmulatorSession, str]]]
    server: Optional[asyncio.Server] = None
    handler_task: Optional[asyncio.Task[None]] = None
    final_result: asyncio.Future[None]

    power: bool
    inputs: Dict[str, str]
    current_input: str
    volume: int
    muted: bool
    ignored_commands: Set[str]
    """Commands that are read but never answered."""
    received_commands: List[str]
    """Every command line received, in order."""

    def __init__(
            self,
            model: Optional[Union[ReceiverModel, str]] = None,
            bind_addr: Optional[str] = None,
            port: int = DEFAULT_PORT,
            inputs: Optional[Mapping[str, str]] = None,
            initial_power: bool = False,
            initial_input: Optional[str] = None,
            initial_volume: int = 81,
            initial_muted: bool = False,
            ignored_commands: Optional[Iterable[str]] = None,
          ):
        if model is None:
            model = DEFAULT_MODEL_NAME
        if isinstance(model, str):
            if not model in models:
                raise PioneerAvrError(f"Unknown model {model}")
            model = models[model]
        self.model = model
        self.bind_addr = '0.0.0.0' if bind_addr is None else bind_addr
        self.port = port
        self.sessions = {}
        self.requests = asyncio.Queue()
        self.final_result = asyncio.get_event_loop().create_future()
        self.inputs = dict(DEFAULT_EMULATOR_INPUTS if inputs is None else inputs)
        self.power = initial_power
        if initial_input is None:
            initial_input = next(iter(self.inputs), '25')
        self.current_input = initial_input
        self.volume = initial_volume
        self.muted = initial_muted
        self.ignored_commands = set() if ignored_commands is None else set(ignored_commands)
        self.received_commands = []

    @property
    def bound_port(self) -> int:
        """The port actually listened on; differs from port when port is 0."""
        if self.server is not None and len(self.server.sockets) > 0:
            return self.server.sockets[0].getsockname()[1]
        return self.port

    def alloc_session_id(self, session: PioneerAvrEmulatorSession) -> int:
        result = self.next_session_id
        self.next_session_id += 1
        self.sessions[result] = session
        return result

    def free_session_id(self, session_id: int) -> None:
        self.sessions.pop(session_id, None)

    def on_command_received(self, session: PioneerAvrEmulatorSession, command: str) -> None:
        """Called when a command line is received from a session."""
        self.requests.put_nowait((session, command))

    def _input_name_response(self, input_id: str) -> str:
        return f"{RESP_INPUT_NAME}{input_id}1{self.inputs[input_id]}"

    def _power_response(self) -> str:
        return f"{RESP_POWER}{'0' if self.power else '1'}"

    async def handle_command(
            self,
            session: PioneerAvrEmulatorSession,
            command: str
          ) -> Optional[str]:
        """Handle a single command line, and return the response line.

        If None is returned, no response is sent.
        """
        if command in self.ignored_commands:
            logger.debug(f"{session}: Ignoring command {command!r}")
            return None

        if command == CMD_POWER_QUERY:
            return self._power_response()
        if command == CMD_POWER_ON:
            logger.info("Emulator powering on")
            self.power = True
            return self._power_response()
        if command == CMD_POWER_OFF:
            logger.info("Emulator entering standby")
            self.power = False
            return self._power_response()
        if command == CMD_INPUT_QUERY:
            return f"{RESP_INPUT}{self.current_input}"
        if command == CMD_VOLUME_QUERY:
            return f"{RESP_VOLUME}{self.volume:03d}"
        if command == CMD_MUTE_QUERY:
            return f"{RESP_MUTE}{'0' if self.muted else '1'}"

        if command.startswith(CMD_INPUT_NAME_QUERY_PREFIX):
            input_id = command[len(CMD_INPUT_NAME_QUERY_PREFIX):]
            if input_id not in self.inputs:
                return RESP_INPUT_NOT_FOUND
            return self._input_name_response(input_id)

        i_sep = command.rfind(CMD_INPUT_NAME_SET_SEPARATOR)
        if i_sep >= 0:
            name = command[:i_sep]
            input_id = command[i_sep + len(CMD_INPUT_NAME_SET_SEPARATOR):]
            if input_id not in self.inputs:
                return RESP_INPUT_NOT_FOUND
            self.inputs[input_id] = truncate_input_name(name)
            logger.info(f"Emulator renamed input {input_id} to {self.inputs[input_id]!r}")
            return self._input_name_response(input_id)

        if len(command) == INPUT_ID_LENGTH + len(CMD_INPUT_SET_SUFFIX) and command.endswith(CMD_INPUT_SET_SUFFIX):
            input_id = command[:INPUT_ID_LENGTH]
            if input_id not in self.inputs:
                return RESP_INPUT_NOT_FOUND
            self.current_input = input_id
            return f"{RESP_INPUT}{self.current_input}"

        return RESP_BAD_COMMAND

    async def handle_requests(self) -> None:
        """Handle requests from sessions."""
        while True:
            session_and_command = await self.requests.get()
            try:
                if session_and_command is None:
                    logger.debug("Emulator handler: Received EOF; exiting")
                    break
                session, command = session_and_command
                try:
                    logger.debug(f"{session}: Emulator handler: received command: {command!r}")
                    self.received_commands.append(command)
                    response = await self.handle_command(session, command)
                    if response is not None:
                        logger.debug(f"{session}: Emulator handler: Sending response: {response!r}")
                        session.write_line(response)
                except asyncio.CancelledError as e:
                    logger.debug(f"{session}: Handler task cancelled; exiting")
                    break
                except Exception as e:
                    logger.exception(f"{session}: Handler task: Exception while handling request; killing session: {e}")
                    session.close()
            finally:
                self.requests.task_done()

    async def run(self) -> None:
        """Runs the Emulator until it is closed."""
        async with self:
            await self.wait_closed()

    async def start(self) -> None:
        try:
            loop = asyncio.get_running_loop()
            self.handler_task = asyncio.create_task(self.handle_requests())
            self.server = await loop.create_server(
                lambda: PioneerAvrEmulatorSession(self),
                host=self.bind_addr,
                port=self.port)
            logger.info(f"Emulator: Listening on {self.bind_addr}:{self.bound_port}")
            await self.server.start_serving()
        except BaseException as e:
            self.set_final_result(e)
            try:
                await self.wait_closed()
            except BaseException as e:
                pass
            raise

    def close(self, exc: Optional[BaseException]=None) -> None:
        """Stops the Emulator."""
        self.set_final_result(exc)

    async def wait_closed(self) -> None:
        """Waits for the emulator to be fully closed. Does not initiate shutdown."""
        try:
            await self.final_result
        finally:
            try:
                if self.server is not None:
                    try:
                        for session in list(self.sessions.values()):
                            session.close()
                        self.server.close()
                    finally:
                        await self.server.wait_closed()
            finally:
                self.server = None
                if self.handler_task is not None:
                    try:
                        await self.handler_task
                    finally:
                        self.handler_task = None

    async def close_and_wait(self, exc: Optional[BaseException]=None) -> None:
        self.close(exc)
        await self.wait_closed()

    def set_final_result(self, exc: Optional[BaseException]=None) -> None:
        if not self.final_result.done():
            if exc is None:
                logger.debug(f"Emulator: Setting final result to success")
                self.final_result.set_result(None)
            else:
                logger.debug(f"Emulator: Setting final exception: {exc}")
                self.final_result.set_exception(exc)
            self.requests.put_nowait(None)
            if self.server is not None:
                self.server.close()

    async def __aenter__(self) -> PioneerAvrEmulator:
        await self.start()
        return self

    async def __aexit__(self,
            exc_type: Optional[type[BaseException]],
            exc: Optional[BaseException],
            tb: Optional[TracebackType]
      ) -> None:
        self.set_final_result(exc)
        try:
            # ensure that final_result has been awaited
            await self.wait_closed()
        except Exception as e:
            pass

    def __str__(self) -> str:
        return f"PioneerAvrEmulator(model={self.model}, port={self.bound_port})"

    def __repr__(self) -> str:
        return str(self)
