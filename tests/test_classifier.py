# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

from pioneer_avr import ResponseKind, InputSourceType

def test_power_responses(classifier):
    assert classifier.classify("PWR0").value is True
    assert classifier.state.power is True
    assert classifier.classify("PWR1").value is False
    assert classifier.state.power is False

def test_input_response_maps_id_to_ordinal(classifier):
    classifier.inputs.add("22", "HDMI4", InputSourceType.HDMI)
    classifier.inputs.add("25", "BD", InputSourceType.HDMI)
    assert classifier.classify("FN25").value == 1
    assert classifier.state.current_input == 1

def test_input_response_for_unknown_id_clears_current_input(classifier):
    classifier.inputs.add("25", "BD", InputSourceType.HDMI)
    classifier.classify("FN25")
    result = classifier.classify("FN19")
    assert result.kind == ResponseKind.INPUT
    assert result.value is None
    assert classifier.state.current_input is None

def test_discovery_sequence(classifier):
    discovery = classifier.discovery
    discovery.begin()

    result = classifier.classify("RGB221HDMI4", "?RGB22")
    assert result.kind == ResponseKind.INPUT_DISCOVERED
    assert result.value == 0
    descriptor = classifier.inputs[0]
    assert (descriptor.id, descriptor.name, descriptor.input_type) == ("22", "HDMI4", InputSourceType.HDMI)
    assert str(discovery.progress) == "1/3"
    assert not discovery.is_ready

    result = classifier.classify("E06", "?RGB26")
    assert result.is_not_found
    assert len(classifier.inputs) == 1
    assert str(discovery.progress) == "2/3"
    assert not discovery.is_ready

    result = classifier.classify("RGB251BD", "?RGB25")
    assert result.value == 1
    assert classifier.inputs[1].name == "BD"
    assert str(discovery.progress) == "3/3"
    assert discovery.is_ready

def test_repeated_discovery_line_appends_duplicate_descriptor(classifier):
    # Descriptors are not deduplicated by id; lookups use the first match.
    classifier.classify("RGB221HDMI4")
    classifier.classify("RGB221HDMI4")
    assert [d.id for d in classifier.inputs] == ["22", "22"]
    assert [d.discovery_order for d in classifier.inputs] == [0, 1]
    assert classifier.inputs.find_ordinal("22") == 0

def test_discovery_lines_outside_discovery_do_not_count(classifier):
    classifier.classify("RGB221HDMI4")
    classifier.classify("E06")
    assert classifier.discovery.progress.settled == 0
    assert len(classifier.inputs) == 1

def test_only_input_name_queries_advance_discovery(classifier):
    discovery = classifier.discovery
    discovery.begin()
    # E06 answering an input change, and the echo of a rename
    assert classifier.classify("E06", "99FN").is_not_found
    assert classifier.classify("RGB221Den", "Den1RGB22").kind == ResponseKind.INPUT_DISCOVERED
    assert discovery.progress.settled == 0
    assert len(classifier.inputs) == 1
    classifier.classify("RGB221HDMI4", "?RGB22")
    assert str(discovery.progress) == "1/3"

def test_volume_and_mute(classifier):
    assert classifier.classify("VOL121").value == 121
    assert classifier.state.volume == 121
    assert classifier.classify("MUT0").value is True
    assert classifier.state.muted is True

def test_unrecognized_response_changes_nothing(classifier, caplog):
    classifier.discovery.begin()
    result = classifier.classify("XYZ")
    assert result.kind == ResponseKind.UNRECOGNIZED
    assert result.value is None
    assert classifier.state.to_jsonable() == dict(power=None, muted=None, volume=None, current_input=None)
    assert len(classifier.inputs) == 0
    assert classifier.discovery.progress.settled == 0
    assert "Unrecognized response" in caplog.text
