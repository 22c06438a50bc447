# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

import asyncio

import pytest

from pioneer_avr import (
    PioneerAvrClientConfig,
    ProtocolError,
    ResponseTimeoutError,
    TransportError,
    pioneer_avr_connect,
  )
from pioneer_avr.emulator import PioneerAvrEmulator

async def test_discovery_against_emulator(client, emulator):
    discovered = []
    descriptors = await client.load_inputs(on_discovered=discovered.append)
    await client.wait_until_ready(timeout=2.0)
    assert client.is_ready
    assert [(d.id, d.name) for d in descriptors] == [('22', 'HDMI4'), ('25', 'BD')]
    assert sorted(discovered) == [0, 1]
    assert emulator.received_commands == ['?RGB22', '?RGB25', '?RGB26']

async def test_power_and_input_control(client, emulator):
    await client.discover_inputs(timeout=2.0)
    assert await client.power_status() is False
    await client.power_on()
    assert emulator.power is True
    assert await client.power_status() is True
    await client.set_input('25')
    assert emulator.current_input == '25'
    assert await client.input_status() == 1
    await client.power_off()
    assert await client.power_status() is False

async def test_concurrent_queries_each_get_their_own_response(client):
    power, volume, muted = await asyncio.gather(
        client.power_status(),
        client.volume_status(),
        client.mute_status(),
      )
    assert (power, volume, muted) == (False, 81, False)

async def test_rename_against_emulator(client, emulator):
    await client.discover_inputs(timeout=2.0)
    assert await client.rename_input('22', 'Living Room Theater Room') == 'Living Room Th'
    assert emulator.inputs['22'] == 'Living Room Th'
    assert client.inputs.find('22').name == 'Living Room Th'

async def test_rejected_command_does_not_break_the_session(client):
    with pytest.raises(ProtocolError):
        await client.dispatcher.execute('XYZZY')
    assert await client.power_status() is False

async def test_unanswered_command_times_out():
    async with PioneerAvrEmulator(bind_addr='127.0.0.1', port=0, ignored_commands=['?P']) as emulator:
        config = PioneerAvrClientConfig(
            default_host=f"127.0.0.1:{emulator.bound_port}",
            web_probe=False,
            response_timeout_secs=0.2,
            use_config_file=False,
          )
        client = await pioneer_avr_connect(config=config)
        with pytest.raises(ResponseTimeoutError):
            await client.power_status()
        # the transport is shut down after a timeout
        with pytest.raises(TransportError):
            await client.volume_status()
        with pytest.raises(ResponseTimeoutError):
            await client.aclose()

async def test_connect_to_closed_port_fails():
    async with PioneerAvrEmulator(bind_addr='127.0.0.1', port=0) as emulator:
        port = emulator.bound_port
    config = PioneerAvrClientConfig(
        default_host=f"127.0.0.1:{port}",
        web_probe=False,
        connect_timeout_secs=0.3,
        connect_retry_interval_secs=0.1,
        use_config_file=False,
      )
    with pytest.raises(TransportError):
        await pioneer_avr_connect(config=config)
