# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Protocol-specific constants
"""

from __future__ import annotations

from ..internal_types import *

ENCODING = 'ascii'
"""Character encoding of every command and response line."""

COMMAND_TERMINATOR = '\r'
"""Appended to every command sent to the receiver."""

RESPONSE_TERMINATOR = '\r\n'
"""Terminates every response line sent by the receiver."""

INPUT_ID_LENGTH = 2
"""Input ids are always two characters, e.g. "25"."""

MAX_INPUT_NAME_LENGTH = 14
"""The receiver stores at most this many characters of an input name."""

INPUT_NAME_OFFSET = 6
"""Offset of the input name in an RGB response: "RGB" + 2-character id + 1 flag character."""

# Commands sent to the receiver
CMD_POWER_QUERY = '?P'
CMD_POWER_ON = 'PO'
CMD_POWER_OFF = 'PF'
CMD_INPUT_QUERY = '?F'
CMD_VOLUME_QUERY = '?V'
CMD_MUTE_QUERY = '?M'
CMD_INPUT_NAME_QUERY_PREFIX = '?RGB'
CMD_INPUT_NAME_SET_SEPARATOR = '1RGB'
CMD_INPUT_SET_SUFFIX = 'FN'

# Response prefixes received from the receiver
RESP_POWER = 'PWR'
RESP_INPUT = 'FN'
RESP_INPUT_NAME = 'RGB'
RESP_INPUT_NOT_FOUND = 'E06'
RESP_VOLUME = 'VOL'
RESP_MUTE = 'MUT'
RESP_BAD_COMMAND = 'E04'

VAL_ON = '0'
"""Power and mute use an inverted encoding: "0" means on."""
