# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Last-known receiver state and the registry of discovered inputs.

Both are mutated only by ResponseClassifier, which runs on the command
dispatcher's worker task.
"""

from __future__ import annotations

from ..internal_types import *
from ..protocol import InputSourceType, truncate_input_name

class ReceiverState:
    """Last-known receiver state. None means unknown."""
    power: Optional[bool] = None
    muted: Optional[bool] = None
    volume: Optional[int] = None
    current_input: Optional[int] = None
    """Ordinal (discovery order) of the current input in the InputRegistry."""

    def to_jsonable(self) -> JsonableDict:
        return dict(
            power=self.power,
            muted=self.muted,
            volume=self.volume,
            current_input=self.current_input,
          )

    def __str__(self) -> str:
        return (
            f"ReceiverState(power={self.power}, muted={self.muted}, "
            f"volume={self.volume}, current_input={self.current_input})"
          )

    def __repr__(self) -> str:
        return str(self)

class InputDescriptor:
    """A receiver input discovered during the discovery handshake."""
    id: str
    input_type: InputSourceType
    discovery_order: int
    _name: str

    def __init__(self, id: str, name: str, input_type: InputSourceType, discovery_order: int):
        self.id = id
        self.name = name
        self.input_type = input_type
        self.discovery_order = discovery_order

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        # The receiver cannot store more than 14 characters
        self._name = truncate_input_name(value)

    def to_jsonable(self) -> JsonableDict:
        return dict(
            id=self.id,
            name=self.name,
            input_type=self.input_type.name,
            discovery_order=self.discovery_order,
          )

    def __str__(self) -> str:
        return f"InputDescriptor({self.discovery_order}: id={self.id!r}, name={self.name!r}, type={self.input_type.name})"

    def __repr__(self) -> str:
        return str(self)

class InputRegistry:
    """Discovered inputs, in arrival order. Descriptors are never removed.

    The ordinal of a descriptor is its index here, which is also its
    discovery_order.
    """
    _inputs: List[InputDescriptor]

    def __init__(self) -> None:
        self._inputs = []

    def add(self, input_id: str, name: str, input_type: InputSourceType) -> InputDescriptor:
        """Appends a new descriptor and returns it. Ids are not deduplicated."""
        descriptor = InputDescriptor(input_id, name, input_type, len(self._inputs))
        self._inputs.append(descriptor)
        return descriptor

    def find_ordinal(self, input_id: str) -> Optional[int]:
        """Returns the ordinal of the first descriptor with the given id, or None."""
        for ordinal, descriptor in enumerate(self._inputs):
            if descriptor.id == input_id:
                return ordinal
        return None

    def find(self, input_id: str) -> Optional[InputDescriptor]:
        """Returns the first descriptor with the given id, or None."""
        ordinal = self.find_ordinal(input_id)
        return None if ordinal is None else self._inputs[ordinal]

    def get(self, ordinal: int) -> Optional[InputDescriptor]:
        """Returns the descriptor at an ordinal, or None if out of range."""
        if 0 <= ordinal < len(self._inputs):
            return self._inputs[ordinal]
        return None

    def __getitem__(self, ordinal: int) -> InputDescriptor:
        return self._inputs[ordinal]

    def __iter__(self) -> Iterator[InputDescriptor]:
        return iter(list(self._inputs))

    def __len__(self) -> int:
        return len(self._inputs)

    def to_jsonable(self) -> List[JsonableDict]:
        return [descriptor.to_jsonable() for descriptor in self._inputs]
