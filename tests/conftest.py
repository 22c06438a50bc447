# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

from __future__ import annotations

import asyncio

import pytest
import pytest_asyncio

from pioneer_avr.internal_types import *
from pioneer_avr import (
    PioneerAvrClient,
    PioneerAvrClientConfig,
    TransportError,
    ResponseTimeoutError,
    models,
    pioneer_avr_connect,
  )
from pioneer_avr.client import (
    PioneerAvrClientTransport,
    ReceiverState,
    InputRegistry,
    InputDiscovery,
    ResponseClassifier,
  )
from pioneer_avr.emulator import PioneerAvrEmulator

class FakeTransport(PioneerAvrClientTransport):
    """An in-memory transport answering from a table of canned responses.

    A missing entry behaves like a receiver that never answers; an exception
    entry is raised from the exchange.
    """
    responses: Dict[str, Union[str, BaseException]]
    sent: List[str]
    in_exchange: int = 0
    max_in_exchange: int = 0
    delay: float = 0.0
    closed: bool = False

    def __init__(self, responses: Optional[Mapping[str, Union[str, BaseException]]]=None, delay: float=0.0):
        self.responses = dict({} if responses is None else responses)
        self.sent = []
        self.delay = delay
        self._lock = asyncio.Lock()

    async def begin_transaction(self) -> None:
        await self._lock.acquire()

    async def end_transaction(self) -> None:
        self._lock.release()

    async def send_message_no_lock(self, command: str) -> str:
        if self.closed:
            raise TransportError("Fake transport is closed")
        self.sent.append(command)
        self.in_exchange += 1
        self.max_in_exchange = max(self.max_in_exchange, self.in_exchange)
        try:
            await asyncio.sleep(self.delay)
            response = self.responses.get(command)
            if response is None:
                raise ResponseTimeoutError(f"No response to {command!r}")
            if isinstance(response, BaseException):
                raise response
            return response
        finally:
            self.in_exchange -= 1

    def is_shutting_down(self) -> bool:
        return self.closed

    async def shutdown(self, exc: Optional[BaseException] = None) -> None:
        self.closed = True

    async def wait(self) -> None:
        pass

DISCOVERY_RESPONSES: Dict[str, Union[str, BaseException]] = {
    '?RGB22': 'RGB221HDMI4',
    '?RGB25': 'RGB251BD            ',
    '?RGB26': 'E06',
  }

@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ('PIONEER_AVR_HOST', 'PIONEER_AVR_PORT', 'PIONEER_AVR_CONFIG_FILE'):
        monkeypatch.delenv(name, raising=False)

@pytest.fixture
def fake_transport_class() -> Type[FakeTransport]:
    return FakeTransport

@pytest.fixture
def discovery_responses() -> Dict[str, Union[str, BaseException]]:
    return dict(DISCOVERY_RESPONSES)

@pytest.fixture
def classifier() -> ResponseClassifier:
    model = models['VSX-1120K']
    return ResponseClassifier(
        ReceiverState(),
        InputRegistry(),
        model,
        InputDiscovery(model.input_ids),
      )

@pytest.fixture
def offline_config() -> PioneerAvrClientConfig:
    return PioneerAvrClientConfig(web_probe=False, use_config_file=False)

@pytest_asyncio.fixture
async def emulator() -> AsyncIterator[PioneerAvrEmulator]:
    async with PioneerAvrEmulator(bind_addr='127.0.0.1', port=0) as emu:
        yield emu

@pytest.fixture
def client_config(emulator: PioneerAvrEmulator) -> PioneerAvrClientConfig:
    return PioneerAvrClientConfig(
        default_host=f"127.0.0.1:{emulator.bound_port}",
        web_probe=False,
        response_timeout_secs=2.0,
        connect_timeout_secs=2.0,
        use_config_file=False,
      )

@pytest_asyncio.fixture
async def client(client_config: PioneerAvrClientConfig) -> AsyncIterator[PioneerAvrClient]:
    avr_client = await pioneer_avr_connect(config=client_config)
    try:
        yield avr_client
    finally:
        await avr_client.aclose()
