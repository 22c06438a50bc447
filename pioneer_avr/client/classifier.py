# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Response classification.

Parses each response line and applies it to the receiver state, the input
registry and the discovery progress. This is the only place any of those
are mutated.
"""

from __future__ import annotations

from ..internal_types import *
from ..pkg_logging import logger
from ..protocol import AvrResponse, ResponseKind, ReceiverModel, parse_response
from ..protocol.constants import CMD_INPUT_NAME_QUERY_PREFIX

from .state import ReceiverState, InputRegistry
from .discovery import InputDiscovery

class ClassifiedResponse:
    """The outcome of classifying one response line.

    value depends on the kind:
        POWER             the new power state (bool)
        INPUT             ordinal of the current input, or None if unknown
        INPUT_DISCOVERED  ordinal of the newly added descriptor
        INPUT_NOT_FOUND   None
        VOLUME            the new volume (int)
        MUTE              the new mute state (bool)
        UNRECOGNIZED      None
    """
    response: AvrResponse
    value: Any

    def __init__(self, response: AvrResponse, value: Any=None) -> None:
        self.response = response
        self.value = value

    @property
    def kind(self) -> ResponseKind:
        return self.response.kind

    @property
    def raw(self) -> str:
        return self.response.raw

    @property
    def is_not_found(self) -> bool:
        return self.response.kind == ResponseKind.INPUT_NOT_FOUND

    def __str__(self) -> str:
        return f"ClassifiedResponse({self.kind.value}: {self.raw!r} -> {self.value!r})"

    def __repr__(self) -> str:
        return str(self)

class ResponseClassifier:
    state: ReceiverState
    inputs: InputRegistry
    model: ReceiverModel
    discovery: InputDiscovery

    def __init__(
            self,
            state: ReceiverState,
            inputs: InputRegistry,
            model: ReceiverModel,
            discovery: InputDiscovery,
          ) -> None:
        self.state = state
        self.inputs = inputs
        self.model = model
        self.discovery = discovery

    def classify(self, raw: str, command: Optional[str]=None) -> ClassifiedResponse:
        """Classifies a raw response line and applies it to state.

        command is the command line the response answers. Discovery progress
        only advances for responses to input name queries ("?RGB<id>"); an
        RGB echo of a rename or an E06 answer to "<id>FN" does not count.

        Unrecognized lines are logged and change nothing; the caller decides
        how to settle the waiting operation.
        """
        response = parse_response(raw)
        kind = response.kind

        if kind == ResponseKind.POWER:
            logger.debug(f"Receive power status: {raw}")
            self.state.power = response.power_on
            return ClassifiedResponse(response, self.state.power)

        if kind == ResponseKind.INPUT:
            logger.debug(f"Receive input status: {raw}")
            assert response.input_id is not None
            self.state.current_input = self.inputs.find_ordinal(response.input_id)
            return ClassifiedResponse(response, self.state.current_input)

        if kind == ResponseKind.INPUT_DISCOVERED:
            assert response.input_id is not None and response.input_name is not None
            descriptor = self.inputs.add(
                response.input_id,
                response.input_name,
                self.model.input_type(response.input_id),
              )
            if self._is_name_query(command):
                self.discovery.settle()
            logger.debug(
                f"Input [{descriptor.name}] discovered (id: {descriptor.id}, "
                f"type: {descriptor.input_type.name}). Progress={self.discovery.progress}")
            return ClassifiedResponse(response, descriptor.discovery_order)

        if kind == ResponseKind.INPUT_NOT_FOUND:
            if self._is_name_query(command):
                self.discovery.settle()
            logger.debug(f"Input does not exist. Progress={self.discovery.progress}")
            return ClassifiedResponse(response, None)

        if kind == ResponseKind.VOLUME:
            self.state.volume = response.volume
            return ClassifiedResponse(response, self.state.volume)

        if kind == ResponseKind.MUTE:
            self.state.muted = response.muted
            return ClassifiedResponse(response, self.state.muted)

        logger.warning(f"Unrecognized response from receiver: {raw!r}")
        return ClassifiedResponse(response, None)

    @staticmethod
    def _is_name_query(command: Optional[str]) -> bool:
        return command is not None and command.startswith(CMD_INPUT_NAME_QUERY_PREFIX)
