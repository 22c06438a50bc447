# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Parsing of raw response lines into typed responses.

Parsing is pure; applying a response to receiver state is done by
pioneer_avr.client.classifier.
"""

from __future__ import annotations

from enum import Enum

from ..internal_types import *
from .constants import (
    INPUT_ID_LENGTH,
    INPUT_NAME_OFFSET,
    RESP_POWER,
    RESP_INPUT,
    RESP_INPUT_NAME,
    RESP_INPUT_NOT_FOUND,
    RESP_VOLUME,
    RESP_MUTE,
    VAL_ON,
  )

class ResponseKind(Enum):
    POWER = 'power'
    INPUT = 'input'
    INPUT_DISCOVERED = 'input_discovered'
    INPUT_NOT_FOUND = 'input_not_found'
    VOLUME = 'volume'
    MUTE = 'mute'
    UNRECOGNIZED = 'unrecognized'

class AvrResponse:
    """A single response line from the receiver, parsed by prefix.

    Only the attributes relevant to the response kind are set; the rest are None.
    """
    raw: str
    kind: ResponseKind
    power_on: Optional[bool] = None
    muted: Optional[bool] = None
    volume: Optional[int] = None
    input_id: Optional[str] = None
    input_name: Optional[str] = None

    def __init__(
            self,
            raw: str,
            kind: ResponseKind,
            *,
            power_on: Optional[bool]=None,
            muted: Optional[bool]=None,
            volume: Optional[int]=None,
            input_id: Optional[str]=None,
            input_name: Optional[str]=None,
          ) -> None:
        self.raw = raw
        self.kind = kind
        self.power_on = power_on
        self.muted = muted
        self.volume = volume
        self.input_id = input_id
        self.input_name = input_name

    @property
    def is_recognized(self) -> bool:
        return self.kind != ResponseKind.UNRECOGNIZED

    def __str__(self) -> str:
        return f"AvrResponse({self.kind.value}: {self.raw!r})"

    def __repr__(self) -> str:
        return str(self)

def parse_response(raw: str) -> AvrResponse:
    """Parses a raw response line (without terminator) from the receiver.

    Dispatch is by literal prefix. Lines with an unknown prefix, or a known
    prefix with a malformed body, parse as ResponseKind.UNRECOGNIZED.
    """
    if raw.startswith(RESP_POWER):
        # "PWR0" is on; any other value is off
        return AvrResponse(raw, ResponseKind.POWER, power_on=raw[3:4] == VAL_ON)

    if raw.startswith(RESP_INPUT):
        input_id = raw[2:2 + INPUT_ID_LENGTH]
        return AvrResponse(raw, ResponseKind.INPUT, input_id=input_id)

    if raw.startswith(RESP_INPUT_NAME):
        input_id = raw[3:3 + INPUT_ID_LENGTH]
        if len(input_id) != INPUT_ID_LENGTH:
            return AvrResponse(raw, ResponseKind.UNRECOGNIZED)
        input_name = raw[INPUT_NAME_OFFSET:].rstrip()
        return AvrResponse(raw, ResponseKind.INPUT_DISCOVERED, input_id=input_id, input_name=input_name)

    if raw.startswith(RESP_INPUT_NOT_FOUND):
        return AvrResponse(raw, ResponseKind.INPUT_NOT_FOUND)

    if raw.startswith(RESP_VOLUME):
        volume_str = raw[3:].strip()
        if not volume_str.isdigit():
            return AvrResponse(raw, ResponseKind.UNRECOGNIZED)
        return AvrResponse(raw, ResponseKind.VOLUME, volume=int(volume_str))

    if raw.startswith(RESP_MUTE):
        return AvrResponse(raw, ResponseKind.MUTE, muted=raw[3:4] == VAL_ON)

    return AvrResponse(raw, ResponseKind.UNRECOGNIZED)
