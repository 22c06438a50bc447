# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Low-level protocol definitions for Pioneer receivers.

This module defines the ASCII line protocol used by Pioneer receivers for TCP/IP
(telnet) control. It does not contain protocol implementations.
"""

from .constants import (
    ENCODING,
    COMMAND_TERMINATOR,
    RESPONSE_TERMINATOR,
    INPUT_ID_LENGTH,
    MAX_INPUT_NAME_LENGTH,
    CMD_POWER_QUERY,
    CMD_POWER_ON,
    CMD_POWER_OFF,
    CMD_INPUT_QUERY,
    CMD_VOLUME_QUERY,
    CMD_MUTE_QUERY,
    RESP_INPUT_NOT_FOUND,
    RESP_BAD_COMMAND,
  )

from .receiver_model import ReceiverModel, InputSourceType, models

from .command import (
    validate_input_id,
    truncate_input_name,
    input_name_query_command,
    input_rename_command,
    input_set_command,
  )

from .response import AvrResponse, ResponseKind, parse_response
