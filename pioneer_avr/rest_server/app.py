#!/usr/bin/env python3

# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
A REST FastAPI server that controls a Pioneer receiver.

On startup the server connects to the receiver and runs input discovery in
the background; input routes answer 503 until discovery completes.
"""

from __future__ import annotations

from fastapi import FastAPI

import time
import os
import json
import asyncio

from contextlib import asynccontextmanager

from .logger import logger
from ..internal_types import *
from .. import (
    PioneerAvrClient,
    pioneer_avr_connect,
    PioneerAvrClientConfig,
  )

from .api import router as api_router

DEFAULT_CONFIG_FILE = "pioneer_avr_config.json"

def load_raw_config() -> JsonableDict:
    """Loads the server's client configuration, from the file named by
       PIONEER_AVR_CONFIG_FILE or else ./pioneer_avr_config.json if it exists."""
    config_file = os.environ.get("PIONEER_AVR_CONFIG_FILE", None)
    if config_file is None and os.path.exists(DEFAULT_CONFIG_FILE):
        config_file = DEFAULT_CONFIG_FILE
    if config_file is None:
        return {}
    with open(config_file, "r") as f:
        raw_config: JsonableDict = json.load(f)
    return raw_config

async def _discover_inputs(client: PioneerAvrClient) -> None:
    try:
        await client.load_inputs()
    except Exception as e:
        logger.exception(f"Input discovery failed: {e}")

@asynccontextmanager
async def fastapi_lifetime(app: FastAPI) -> AsyncIterator[None]:
    """
    A context manager that initializes and cleans up for FastAPI.
    """
    discovery_task: Optional[asyncio.Task[None]] = None
    avr_client: Optional[PioneerAvrClient] = None
    try:
        logger.info("Receiver REST server starting up--initializing...")
        raw_config = load_raw_config()
        app.state.raw_config = raw_config
        avr_config = PioneerAvrClientConfig.from_jsonable(raw_config)
        app.state.avr_config = avr_config
        app.state.launch_time = time.monotonic()
        avr_client = await pioneer_avr_connect(config=avr_config)
        app.state.avr_client = avr_client
        discovery_task = asyncio.create_task(_discover_inputs(avr_client))
        logger.info(f"Serving API for receiver at {avr_client}...")

        logger.info("Receiver REST server initialization done; starting server...")
        yield
    finally:
        logger.info("Receiver REST server shutting down--cleaning up...")
        if discovery_task is not None and not discovery_task.done():
            discovery_task.cancel()
            try:
                await discovery_task
            except asyncio.CancelledError:
                pass
        if avr_client is not None:
            await avr_client.aclose()

proj_api = FastAPI(lifespan=fastapi_lifetime)
proj_api.include_router(api_router)

def get_receiver_client() -> PioneerAvrClient:
    return proj_api.state.avr_client

def get_receiver_config() -> PioneerAvrClientConfig:
    return proj_api.state.avr_config

def get_raw_config() -> JsonableDict:
    return proj_api.state.raw_config
