# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
ReceiverModel class and the static input capability tables
"""
from __future__ import annotations

from enum import IntEnum

from ..internal_types import *

class InputSourceType(IntEnum):
    """Input categories, numbered the way smart-home platforms number TV input sources."""
    OTHER = 0
    HOME_SCREEN = 1
    TUNER = 2
    HDMI = 3
    COMPOSITE_VIDEO = 4
    S_VIDEO = 5
    COMPONENT_VIDEO = 6
    DVI = 7
    AIRPLAY = 8
    USB = 9
    APPLICATION = 10

class ReceiverModel:
    name: str
    """The name for this model. This is the name that will be used when
       displaying, logging, etc."""

    input_types: Dict[str, InputSourceType]
    """Candidate input ids probed during discovery, in probe order, mapped
       to their input category."""

    def __init__(self, name: str, input_types: Mapping[str, InputSourceType]):
        self.name = name
        self.input_types = dict(input_types)

    @property
    def input_ids(self) -> List[str]:
        """The candidate input ids, in probe order."""
        return list(self.input_types.keys())

    def input_type(self, input_id: str) -> InputSourceType:
        """Returns the category of an input id; OTHER if the id is not in the table."""
        return self.input_types.get(input_id, InputSourceType.OTHER)

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"ReceiverModel('{self.name}')"

_known_models: Dict[str, Dict[str, InputSourceType]] = {
    "VSX-1120K": {
        '22': InputSourceType.HDMI,          # HDMI4
        '25': InputSourceType.HDMI,          # BD
        '26': InputSourceType.APPLICATION,   # NET RADIO
      },
  }
"""Input capability tables of the receiver models known at the time this
   metadata was defined."""

models: Dict[str, ReceiverModel] = {}
"""A dictionary of receiver models, keyed by model name."""

for _model_name, _input_types in _known_models.items():
    models[_model_name] = ReceiverModel(_model_name, _input_types)
