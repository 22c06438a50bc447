#!/usr/bin/env python3

# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
A REST FastAPI server that controls a Pioneer receiver.
"""

from __future__ import annotations

from fastapi import APIRouter, Request, HTTPException

import time

from .logger import logger
from ..internal_types import *
from .. import (
    __version__ as pkg_version,
    PioneerAvrClient,
    error_jsonable,
  )

router = APIRouter(prefix="/api/v1")

def get_client(request: Request) -> PioneerAvrClient:
    return request.app.state.avr_client

def get_ready_client(request: Request) -> PioneerAvrClient:
    """Returns the client, or answers 503 if input discovery is not complete."""
    client = get_client(request)
    if not client.is_ready:
        raise HTTPException(status_code=503, detail="Receiver inputs are still being discovered")
    return client

@router.get("/version")
async def version():
    """Returns the pioneer-avr package version"""
    return { "version": pkg_version }

@router.get("/config")
async def config_data(request: Request) -> Dict[str, Any]:
    """Returns the current client configuration."""
    client = get_client(request)
    return dict(config=client.config.to_jsonable())

@router.get("/ping")
async def ping(
        request: Request
      ) -> Dict[str, Any]:
    """Returns the health status of the API server and the receiver."""
    client = get_client(request)
    launch_time: float = request.app.state.launch_time
    up_time = time.monotonic() - launch_time
    result: Dict[str, Any] = dict(server_status="OK", up_time=up_time)
    try:
        await client.power_status()
    except Exception as exc:
        result["receiver_status"] = "ERROR"
        err = error_jsonable(exc)
        result["receiver_error"] = err["error"]
        result["receiver_error_message"] = err["error_message"]
    else:
        result["receiver_status"] = "OK"
    return result

@router.get("/ready")
async def ready(request: Request) -> Dict[str, Any]:
    """Returns whether input discovery has completed."""
    client = get_client(request)
    return dict(
        ready=client.is_ready,
        progress=str(client.discovery.progress),
        web_interface=client.uses_web_interface,
      )

@router.get("/power")
async def power_status(request: Request) -> Dict[str, Any]:
    """Queries and returns the power state of the receiver."""
    client = get_client(request)
    try:
        power = await client.power_status()
    except Exception as exc:
        return error_jsonable(exc, name="power_status")
    return dict(power=power)

@router.get("/on")
async def power_on(request: Request) -> Dict[str, Any]:
    """Turns the receiver on."""
    client = get_client(request)
    logger.info("Power on")
    await client.power_on()
    return dict(name="on")

@router.get("/off")
async def power_off(request: Request) -> Dict[str, Any]:
    """Turns the receiver off."""
    client = get_client(request)
    logger.info("Power off")
    await client.power_off()
    return dict(name="off")

@router.get("/volume")
async def volume_status(request: Request) -> Dict[str, Any]:
    """Queries and returns the raw volume step of the receiver."""
    client = get_client(request)
    try:
        volume = await client.volume_status()
    except Exception as exc:
        return error_jsonable(exc, name="volume_status")
    return dict(volume=volume)

@router.get("/mute")
async def mute_status(request: Request) -> Dict[str, Any]:
    """Queries and returns the mute state of the receiver."""
    client = get_client(request)
    try:
        muted = await client.mute_status()
    except Exception as exc:
        return error_jsonable(exc, name="mute_status")
    return dict(muted=muted)

@router.get("/inputs")
async def inputs(request: Request) -> Dict[str, Any]:
    """Returns the discovered inputs, in discovery order."""
    client = get_ready_client(request)
    return dict(inputs=client.inputs.to_jsonable())

@router.get("/input")
async def input_status(request: Request) -> Dict[str, Any]:
    """Queries and returns the current input of the receiver."""
    client = get_ready_client(request)
    try:
        ordinal = await client.input_status()
    except Exception as exc:
        return error_jsonable(exc, name="input_status")
    result: Dict[str, Any] = dict(current_input=ordinal)
    descriptor = None if ordinal is None else client.inputs.get(ordinal)
    if descriptor is not None:
        result["input"] = descriptor.to_jsonable()
    return result

@router.get("/input/{input_id}")
async def set_input(input_id: str, request: Request) -> Dict[str, Any]:
    """Switches the receiver to an input, by 2-character input id."""
    client = get_ready_client(request)
    logger.info(f"Set input {input_id}")
    try:
        await client.set_input(input_id)
    except Exception as exc:
        return error_jsonable(exc, name="set_input")
    return dict(name="set_input", input_id=input_id)

@router.get("/inputs/{input_id}/rename/{name}")
async def rename_input(input_id: str, name: str, request: Request) -> Dict[str, Any]:
    """Renames an input. Names longer than 14 characters are truncated."""
    client = get_ready_client(request)
    logger.info(f"Rename input {input_id} to {name!r}")
    try:
        new_name = await client.rename_input(input_id, name)
    except Exception as exc:
        return error_jsonable(exc, name="rename_input")
    return dict(name="rename_input", input_id=input_id, new_name=new_name)
