# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

from pioneer_avr import InputSourceType, InputRegistry, ReceiverState

def test_receiver_state_starts_unknown():
    state = ReceiverState()
    assert state.to_jsonable() == dict(power=None, muted=None, volume=None, current_input=None)

def test_registry_assigns_ordinals_in_arrival_order():
    inputs = InputRegistry()
    first = inputs.add("25", "BD", InputSourceType.HDMI)
    second = inputs.add("22", "HDMI4", InputSourceType.HDMI)
    assert (first.discovery_order, second.discovery_order) == (0, 1)
    assert [d.id for d in inputs] == ["25", "22"]
    assert inputs.find_ordinal("22") == 1
    assert inputs.find("25") is first
    assert inputs.find_ordinal("99") is None
    assert inputs.get(2) is None
    assert inputs.get(-1) is None
    assert len(inputs) == 2

def test_descriptor_name_is_truncated_on_write():
    inputs = InputRegistry()
    descriptor = inputs.add("22", "A very long input name", InputSourceType.HDMI)
    assert descriptor.name == "A very long in"
    descriptor.name = "Living Room Theater Room"
    assert descriptor.name == "Living Room Th"
    assert descriptor.discovery_order == 0

def test_registry_jsonable():
    inputs = InputRegistry()
    inputs.add("26", "NET RADIO", InputSourceType.APPLICATION)
    assert inputs.to_jsonable() == [
        dict(id="26", name="NET RADIO", input_type="APPLICATION", discovery_order=0)
      ]
