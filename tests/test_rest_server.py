# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

import time

import httpx
import pytest
import pytest_asyncio

from pioneer_avr import __version__
from pioneer_avr.rest_server import proj_api

@pytest_asyncio.fixture
async def api(client):
    proj_api.state.avr_client = client
    proj_api.state.launch_time = time.monotonic()
    transport = httpx.ASGITransport(app=proj_api)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
        yield http

async def test_version(api):
    response = await api.get("/api/v1/version")
    assert response.status_code == 200
    assert response.json() == {"version": __version__}

async def test_config(api):
    config = (await api.get("/api/v1/config")).json()["config"]
    assert config["model"] == "VSX-1120K"
    assert config["web_probe"] is False

async def test_ping(api):
    result = (await api.get("/api/v1/ping")).json()
    assert result["server_status"] == "OK"
    assert result["receiver_status"] == "OK"

async def test_input_routes_wait_for_discovery(api, client):
    assert (await api.get("/api/v1/ready")).json()["ready"] is False
    assert (await api.get("/api/v1/inputs")).status_code == 503
    assert (await api.get("/api/v1/input")).status_code == 503

    await client.discover_inputs(timeout=2.0)
    ready = (await api.get("/api/v1/ready")).json()
    assert ready["ready"] is True
    assert ready["progress"] == "3/3"
    inputs = (await api.get("/api/v1/inputs")).json()["inputs"]
    assert [(i["id"], i["name"], i["input_type"]) for i in inputs] == [
        ("22", "HDMI4", "HDMI"),
        ("25", "BD", "HDMI"),
      ]

async def test_power_routes(api, emulator):
    assert (await api.get("/api/v1/power")).json() == {"power": False}
    await api.get("/api/v1/on")
    assert emulator.power is True
    assert (await api.get("/api/v1/power")).json() == {"power": True}
    await api.get("/api/v1/off")
    assert emulator.power is False

async def test_volume_and_mute_routes(api):
    assert (await api.get("/api/v1/volume")).json() == {"volume": 81}
    assert (await api.get("/api/v1/mute")).json() == {"muted": False}

async def test_input_control_routes(api, client, emulator):
    await client.discover_inputs(timeout=2.0)
    await api.get("/api/v1/input/25")
    status = (await api.get("/api/v1/input")).json()
    assert status["current_input"] == 1
    assert status["input"]["name"] == "BD"

    result = (await api.get("/api/v1/inputs/22/rename/Living Room Theater Room")).json()
    assert result["new_name"] == "Living Room Th"
    assert emulator.inputs["22"] == "Living Room Th"

async def test_bad_input_id_is_reported(api, client):
    await client.discover_inputs(timeout=2.0)
    result = (await api.get("/api/v1/input/123")).json()
    assert result["error"] == "pioneer_avr.exceptions.PioneerAvrError"
