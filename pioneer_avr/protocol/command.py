# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Builders for command lines sent to the receiver.

All builders return the bare command; the transport appends the terminator.
"""

from __future__ import annotations

from ..internal_types import *
from ..exceptions import PioneerAvrError
from .constants import (
    INPUT_ID_LENGTH,
    MAX_INPUT_NAME_LENGTH,
    CMD_INPUT_NAME_QUERY_PREFIX,
    CMD_INPUT_NAME_SET_SEPARATOR,
    CMD_INPUT_SET_SUFFIX,
  )

def validate_input_id(input_id: str) -> str:
    """Raises PioneerAvrError unless input_id is a 2-character id."""
    if len(input_id) != INPUT_ID_LENGTH:
        raise PioneerAvrError(f"Input id must be {INPUT_ID_LENGTH} characters: {input_id!r}")
    return input_id

def truncate_input_name(name: str) -> str:
    """Truncates an input name to the length the receiver can store."""
    return name[:MAX_INPUT_NAME_LENGTH]

def input_name_query_command(input_id: str) -> str:
    """The discovery probe for one input id, e.g. "?RGB25"."""
    return f"{CMD_INPUT_NAME_QUERY_PREFIX}{validate_input_id(input_id)}"

def input_rename_command(input_id: str, name: str) -> str:
    """Renames an input, e.g. "Blu-ray1RGB25". The name is truncated to 14 characters."""
    return f"{truncate_input_name(name)}{CMD_INPUT_NAME_SET_SEPARATOR}{validate_input_id(input_id)}"

def input_set_command(input_id: str) -> str:
    """Selects an input, e.g. "25FN"."""
    return f"{validate_input_id(input_id)}{CMD_INPUT_SET_SUFFIX}"
