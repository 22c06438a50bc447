# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

import asyncio

async def exchange(reader, writer, command: str) -> str:
    writer.write(f"{command}\r".encode('ascii'))
    await writer.drain()
    line = await asyncio.wait_for(reader.readline(), 2.0)
    assert line.endswith(b'\r\n')
    return line.decode('ascii')[:-2]

async def test_emulator_answers_the_wire_protocol(emulator):
    reader, writer = await asyncio.open_connection('127.0.0.1', emulator.bound_port)
    try:
        assert await exchange(reader, writer, '?P') == 'PWR1'
        assert await exchange(reader, writer, 'PO') == 'PWR0'
        assert await exchange(reader, writer, '?RGB22') == 'RGB221HDMI4'
        assert await exchange(reader, writer, '?RGB26') == 'E06'
        assert await exchange(reader, writer, '25FN') == 'FN25'
        assert await exchange(reader, writer, '?F') == 'FN25'
        assert await exchange(reader, writer, 'Movies1RGB25') == 'RGB251Movies'
        assert await exchange(reader, writer, '?V') == 'VOL081'
        assert await exchange(reader, writer, '?M') == 'MUT1'
        assert await exchange(reader, writer, 'XYZZY') == 'E04'
    finally:
        writer.close()
        await writer.wait_closed()
    assert emulator.power is True
    assert emulator.inputs['25'] == 'Movies'
    assert emulator.received_commands[0] == '?P'
