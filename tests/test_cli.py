# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

import json

from pioneer_avr import __version__
from pioneer_avr.__main__ import arun

async def test_version(capsys):
    assert await arun(['version']) == 0
    assert capsys.readouterr().out.strip() == __version__

async def test_missing_command(capsys):
    assert await arun([]) == 1

async def test_exec_against_emulator(emulator, capsys):
    host = f"127.0.0.1:{emulator.bound_port}"
    rc = await arun(['exec', '--host', host, '--no-web', 'on', 'power_status', 'inputs', 'input=25', 'input_status'])
    assert rc == 0
    results = json.loads(capsys.readouterr().out)
    assert [r['name'] for r in results] == ['on', 'power_status', 'inputs', 'input=25', 'input_status']
    assert results[1]['power'] is True
    assert [i['name'] for i in results[2]['inputs']] == ['HDMI4', 'BD']
    assert results[4]['input']['id'] == '25'

async def test_exec_unknown_command_reports_error(emulator, capsys):
    host = f"127.0.0.1:{emulator.bound_port}"
    rc = await arun(['exec', '--host', host, '--no-web', 'bogus'])
    assert rc == 1
    captured = capsys.readouterr()
    results = json.loads(captured.out)
    assert results[0]['error_message'] == "Unknown command: 'bogus'"
    assert "pioneer-avr: error" in captured.err

async def test_exec_continue_on_error(emulator, capsys):
    host = f"127.0.0.1:{emulator.bound_port}"
    rc = await arun(['exec', '--host', host, '--no-web', '--continue', 'bogus', 'rename=22:Den'])
    assert rc == 0
    results = json.loads(capsys.readouterr().out)
    assert 'error' in results[0]
    assert results[1]['new_name'] == 'Den'
    assert emulator.inputs['22'] == 'Den'
